"""
Integer math helpers for targets without a floating point unit.
"""

from typing import Tuple

UINT32_MAX = 0xFFFFFFFF

# (bit mask, left shift, divisor) buckets for the optimized square root.
# The divisor is sqrt(2**shift), truncated to the values used by the
# reference firmware so results stay bit compatible.
SQRT_LADDER: Tuple[Tuple[int, int, float], ...] = (
    (3 << 30, 0, 1.0),
    (3 << 28, 1, 1.414213),
    (15 << 24, 3, 2.828427),
    (15 << 20, 7, 11.313708),
    (15 << 16, 11, 45.254834),
    (15 << 12, 15, 181.019336),
    (15 << 8, 19, 724.077343),
)
SQRT_LADDER_FLOOR: Tuple[int, float] = (23, 2896.309376)

# Upper bound of the relative error introduced by integer_sqrt truncation,
# per bucket, after the value has been normalized by the ladder shift.
# The smallest normalized value in a bucket is 2**k, so the error is
# below 2**(-k/2).
SQRT_LADDER_MAX_RELATIVE_ERROR = {
    "bits 30-31": 2.0 ** -15,
    "bits 28-29": 2.0 ** -14.5,
    "bits 24-27": 2.0 ** -13.5,
    "bits 20-23": 2.0 ** -13.5,
    "bits 16-19": 2.0 ** -13.5,
    "bits 12-15": 2.0 ** -13.5,
    "bits 8-11": 2.0 ** -13.5,
    "bits 0-7": 2.0 ** -11.5,
}


def integer_sqrt(x: int) -> int:
    """
    Integer square root using the bit-by-bit (non-restoring) method.

    Works for the whole unsigned 32-bit range without floating point.

    Args:
        x: Input value, at most 2**32 - 1

    Returns:
        Largest r such that r*r <= x, or -1 if x is negative

    Raises:
        ValueError: If x does not fit in 32 bits
    """
    if x < 0:
        return -1
    if x > UINT32_MAX:
        raise ValueError(f"integer_sqrt input must fit in 32 bits, got {x}")
    if x == 0:
        return 0

    root = 0
    remainder = x
    place = 1 << 30

    while place > remainder:
        place >>= 2
    while place:
        if remainder >= root + place:
            remainder = remainder - root - place
            root = root + (place << 1)
        root >>= 1
        place >>= 2
    return root


def sqrt_ladder_bucket(value: int) -> Tuple[int, float]:
    """
    Select the normalization shift and divisor for a mean-square value.

    Args:
        value: Unsigned 32-bit mean-square value

    Returns:
        Tuple of (left shift, divisor)
    """
    for mask, shift, divisor in SQRT_LADDER:
        if value & mask:
            return shift, divisor
    return SQRT_LADDER_FLOOR


def optimized_sqrt(value: int) -> float:
    """
    Square root of an unsigned 32-bit value with extra fractional precision.

    The value is shifted left so its most significant bits land near the
    top of the register, integer_sqrt is applied, and the result is divided
    by the square root of the applied scale.

    Args:
        value: Unsigned 32-bit value

    Returns:
        Approximate square root
    """
    shift, divisor = sqrt_ladder_bucket(value)
    root = integer_sqrt(value << shift)
    if shift == 0:
        return float(root)
    return root / divisor
