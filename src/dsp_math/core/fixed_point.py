"""
Fixed-point scaling conventions shared by the integer DSP primitives.

A real coefficient c is represented as the integer round(c * 2**shift).
Each primitive accepts shifts only inside its own safe range; requests
outside it are clamped to the nearest bound rather than rejected.

Register helpers emulate the two's complement wraparound of the
32-bit and 64-bit registers found on the embedded targets, so that
overflow past the documented headroom behaves like it would on hardware.
"""

import logging
import math
from dataclasses import dataclass

logger = logging.getLogger(__name__)

INT32_BITS = 32
INT64_BITS = 64

_MASK32 = 0xFFFFFFFF
_MASK64 = 0xFFFFFFFFFFFFFFFF


@dataclass(frozen=True)
class ShiftRange:
    """Inclusive range of shift values a primitive can use safely."""

    name: str
    minimum: int
    maximum: int

    def clamp(self, shift: int) -> int:
        """
        Clamp a requested shift into this range.

        Args:
            shift: Requested shift (bits)

        Returns:
            Shift limited to [minimum, maximum]
        """
        shift = int(shift)
        clamped = min(max(shift, self.minimum), self.maximum)
        if clamped != shift:
            logger.debug(
                f"{self.name}: shift {shift} clamped to {clamped} "
                f"(range {self.minimum}-{self.maximum})"
            )
        return clamped

    def __contains__(self, shift: int) -> bool:
        return self.minimum <= shift <= self.maximum


# Per-primitive shift limits
HIGHPASS_FIXED32_SHIFT = ShiftRange("highpass-fixed32", 8, 15)
HIGHPASS_FIXED64_SHIFT = ShiftRange("highpass-fixed64", 8, 30)
LOWPASS_FIXED32_SHIFT = ShiftRange("lowpass-fixed32", 8, 12)
LOWPASS_FIXED64_SHIFT = ShiftRange("lowpass-fixed64", 8, 28)
FAST_LEAKY_ATTENUATION = ShiftRange("lowpass-fast-leaky", 1, 16)
GOERTZEL_FIXED64_SHIFT = ShiftRange("goertzel-fixed64", 8, 19)


def to_fixed(value: float, shift: int) -> int:
    """
    Scale a real value by 2**shift and round half up to an integer.

    Args:
        value: Real coefficient
        shift: Number of fractional bits

    Returns:
        Scaled integer coefficient
    """
    return int(math.floor(value * (1 << shift) + 0.5))


def from_fixed(value: int, shift: int) -> float:
    """Convert a scaled integer back to a real value."""
    return value / (1 << shift)


def round_half(shift: int) -> int:
    """Rounding constant added before the final right shift of the low-pass step."""
    return 1 << shift


def headroom(bits: int, shift: int) -> int:
    """
    Largest input magnitude a register of the given width holds after
    being shifted left by ``shift``.

    Args:
        bits: Register width (32 or 64)
        shift: Left shift applied to the input

    Returns:
        Approximate input headroom
    """
    return 1 << (bits - 1 - shift)


def wrap_int32(value: int) -> int:
    """Wrap an integer to signed 32-bit range using two's complement."""
    value &= _MASK32
    if value & 0x80000000:
        value -= 0x100000000
    return value


def wrap_int64(value: int) -> int:
    """Wrap an integer to signed 64-bit range using two's complement."""
    value &= _MASK64
    if value & 0x8000000000000000:
        value -= 0x10000000000000000
    return value


def wrap_uint32(value: int) -> int:
    """Wrap an integer to unsigned 32-bit range."""
    return value & _MASK32


def wrap_for_bits(bits: int):
    """Return the signed wrap function for a register width."""
    if bits == INT32_BITS:
        return wrap_int32
    if bits == INT64_BITS:
        return wrap_int64
    raise ValueError(f"Unsupported register width: {bits}")
