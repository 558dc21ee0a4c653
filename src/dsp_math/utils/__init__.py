"""
Utility functions and helpers.
"""

from .integer_math import integer_sqrt, optimized_sqrt, sqrt_ladder_bucket

__all__ = [
    "integer_sqrt",
    "optimized_sqrt",
    "sqrt_ladder_bucket",
]
