"""
Core module - Fixed-point conventions and configuration.
"""

from .config import (
    ConfigValidationError,
    DSPMathConfig,
    FilterConfig,
    GoertzelConfig,
    RMSConfig,
    SineConfig,
    get_preset,
    list_presets,
)
from .fixed_point import (
    FAST_LEAKY_ATTENUATION,
    GOERTZEL_FIXED64_SHIFT,
    HIGHPASS_FIXED32_SHIFT,
    HIGHPASS_FIXED64_SHIFT,
    LOWPASS_FIXED32_SHIFT,
    LOWPASS_FIXED64_SHIFT,
    ShiftRange,
    from_fixed,
    headroom,
    round_half,
    to_fixed,
    wrap_int32,
    wrap_int64,
    wrap_uint32,
)

__all__ = [
    "DSPMathConfig",
    "FilterConfig",
    "GoertzelConfig",
    "RMSConfig",
    "SineConfig",
    "ConfigValidationError",
    "get_preset",
    "list_presets",
    # Fixed-point scaling
    "ShiftRange",
    "HIGHPASS_FIXED32_SHIFT",
    "HIGHPASS_FIXED64_SHIFT",
    "LOWPASS_FIXED32_SHIFT",
    "LOWPASS_FIXED64_SHIFT",
    "FAST_LEAKY_ATTENUATION",
    "GOERTZEL_FIXED64_SHIFT",
    "to_fixed",
    "from_fixed",
    "round_half",
    "headroom",
    "wrap_int32",
    "wrap_int64",
    "wrap_uint32",
]
