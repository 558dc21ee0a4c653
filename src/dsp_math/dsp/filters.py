"""
Single-pole IIR filters for embedded signal conditioning.

Provides first-order filters in several arithmetic flavours:
- High-pass (DC blocker): float, fixed 32-bit, fixed 64-bit extended
- Low-pass: float, fixed 32-bit, fixed 64-bit extended
- Leaky integrator low-pass: multiply-free, shifts and additions only

Fixed variants emulate the register widths of the target, so an input
beyond the filter headroom wraps instead of growing without bound.
"""

import logging
from abc import ABC, abstractmethod
from enum import Enum
from typing import List, Optional, Union

import numpy as np

from ..core.fixed_point import (
    FAST_LEAKY_ATTENUATION,
    HIGHPASS_FIXED32_SHIFT,
    HIGHPASS_FIXED64_SHIFT,
    INT32_BITS,
    INT64_BITS,
    LOWPASS_FIXED32_SHIFT,
    LOWPASS_FIXED64_SHIFT,
    ShiftRange,
    headroom,
    round_half,
    to_fixed,
    wrap_for_bits,
    wrap_int32,
)

logger = logging.getLogger(__name__)

Number = Union[int, float]


class FilterVariant(Enum):
    """Arithmetic used by a filter."""
    FLOAT = "float"
    FIXED32 = "fixed32"
    FIXED64 = "fixed64"
    FAST_LEAKY = "fast_leaky"


class FilterResponse(Enum):
    """Filter response types."""
    LOWPASS = "lowpass"
    HIGHPASS = "highpass"


class SinglePoleFilter(ABC):
    """
    Common interface of the single-pole filters.

    Each subclass is tagged with its response and variant so callers
    can select an implementation at runtime and drive all of them the
    same way.
    """

    response: FilterResponse
    variant: FilterVariant

    @property
    @abstractmethod
    def y(self) -> Number:
        """Current filter output."""
        pass

    @abstractmethod
    def process_sample(self, x: Number) -> Number:
        """
        Run one sample through the filter.

        Args:
            x: Input sample

        Returns:
            Filter output for this sample
        """
        pass

    @abstractmethod
    def reset(self) -> None:
        """Clear running state, keeping the configuration."""
        pass

    def process(self, samples: np.ndarray) -> np.ndarray:
        """
        Run an array of samples through the filter, sample by sample.

        State is preserved between calls.

        Args:
            samples: Input samples

        Returns:
            Filtered samples
        """
        samples = np.asarray(samples)
        dtype = np.float64 if self.variant == FilterVariant.FLOAT else np.int64
        output = np.zeros(len(samples), dtype=dtype)
        for i, sample in enumerate(samples):
            output[i] = self.process_sample(sample)
        return output


class _FixedShiftMixin:
    """Shift bookkeeping shared by the coefficient-based fixed filters."""

    shift_range: ShiftRange
    bits: int

    def _configure_shift(self, shift: int) -> None:
        self._requested_shift = int(shift)
        self._shift = self.shift_range.clamp(shift)
        self._wrap = wrap_for_bits(self.bits)

    @property
    def shift(self) -> int:
        """Shift in use after clamping."""
        return self._shift

    @property
    def requested_shift(self) -> int:
        """Shift passed at construction, before clamping."""
        return self._requested_shift

    @property
    def coefficient(self) -> int:
        """Scaled integer coefficient."""
        return self._coefficient


# =============================================================================
# High-pass (DC blocker)
# =============================================================================

class HighPassFloat(SinglePoleFilter):
    """
    Floating point DC blocker.

    y = x - x[n-1] + a * y[n-1], with a = 1 - cutoff.
    """

    response = FilterResponse.HIGHPASS
    variant = FilterVariant.FLOAT

    def __init__(self, cutoff: float):
        """
        Initialize filter.

        Args:
            cutoff: Pole distance from unity (e.g. 0.004)
        """
        self.set_cutoff(cutoff)
        self.reset()

    @property
    def cutoff(self) -> float:
        return self._cutoff

    @property
    def pole(self) -> float:
        """Feedback coefficient a = 1 - cutoff."""
        return self._pole

    @property
    def y(self) -> float:
        return self._y

    def set_cutoff(self, cutoff: float) -> None:
        """Change the cutoff without clearing running state."""
        self._cutoff = float(cutoff)
        self._pole = 1.0 - self._cutoff

    def process_sample(self, x: Number) -> float:
        x = float(x)
        self._y = x - self._prev_x + self._pole * self._prev_y
        self._prev_x = x
        self._prev_y = self._y
        return self._y

    def reset(self) -> None:
        self._prev_x = 0.0
        self._prev_y = 0.0
        self._y = 0.0


class HighPassFixed32(_FixedShiftMixin, SinglePoleFilter):
    """
    Fixed-point DC blocker with noise shaping, 32-bit registers.

    The accumulator keeps the fraction discarded by each right shift and
    feeds it back on the next sample, so the output has no DC offset
    from truncation.

    Approximate input limits (headroom = 2**(31 - shift)):
        shift 15: +/- 64k
        shift 12: +/- 512k
        shift  8: +/- 8M
    """

    response = FilterResponse.HIGHPASS
    variant = FilterVariant.FIXED32
    shift_range = HIGHPASS_FIXED32_SHIFT
    bits = INT32_BITS

    def __init__(self, cutoff: float, shift: int = 15):
        """
        Initialize filter.

        Args:
            cutoff: Pole distance from unity (e.g. 0.004)
            shift: Fractional bits, clamped to the variant range
        """
        self._configure_shift(shift)
        self.set_cutoff(cutoff)
        self.reset()
        logger.debug(
            f"{type(self).__name__}: cutoff={cutoff}, shift={self._shift}, "
            f"A={self._coefficient}"
        )

    @property
    def cutoff(self) -> float:
        return self._cutoff

    @property
    def headroom(self) -> int:
        """Approximate largest input magnitude before register overflow."""
        return headroom(self.bits, self._shift)

    @property
    def y(self) -> int:
        return self._y

    def set_cutoff(self, cutoff: float) -> None:
        """Recompute the coefficient without clearing running state."""
        self._cutoff = float(cutoff)
        self._coefficient = to_fixed(self._cutoff, self._shift)

    def process_sample(self, x: Number) -> int:
        wrap = self._wrap
        acc = self._acc - self._prev_x
        self._prev_x = wrap(int(x) << self._shift)
        acc = wrap(acc + self._prev_x)
        acc = wrap(acc - wrap(self._coefficient * self._prev_y))
        self._acc = acc
        self._prev_y = self._output(acc >> self._shift)
        self._y = self._prev_y
        return self._y

    def _output(self, value: int) -> int:
        return value

    def reset(self) -> None:
        self._acc = 0
        self._prev_x = 0
        self._prev_y = 0
        self._y = 0


class HighPassFixed64(HighPassFixed32):
    """
    Extended fixed-point DC blocker with 64-bit registers.

    Same recurrence as the 32-bit version; the wider accumulator allows
    shifts up to 30 or, at a given shift, a much larger input range.
    The output register stays 32 bits wide.
    """

    variant = FilterVariant.FIXED64
    shift_range = HIGHPASS_FIXED64_SHIFT
    bits = INT64_BITS

    def __init__(self, cutoff: float, shift: int = 30):
        super().__init__(cutoff, shift)

    def _output(self, value: int) -> int:
        return wrap_int32(value)


# =============================================================================
# Low-pass
# =============================================================================

class LowPassFloat(SinglePoleFilter):
    """
    Floating point single-pole low-pass.

    y = b0 * x + a1 * y[n-1], with b0 = cutoff and a1 = 1 - cutoff.
    """

    response = FilterResponse.LOWPASS
    variant = FilterVariant.FLOAT

    def __init__(self, cutoff: float):
        """
        Initialize filter.

        Args:
            cutoff: Input coefficient in (0, 1]
        """
        self.set_cutoff(cutoff)
        self.reset()

    @property
    def cutoff(self) -> float:
        return self._cutoff

    @property
    def b0(self) -> float:
        return self._b0

    @property
    def a1(self) -> float:
        return self._a1

    @property
    def y(self) -> float:
        return self._y

    def set_cutoff(self, cutoff: float) -> None:
        """Change the cutoff without clearing running state."""
        self._cutoff = float(cutoff)
        self._b0 = self._cutoff
        self._a1 = 1.0 - self._cutoff

    def process_sample(self, x: Number) -> float:
        self._y = self._b0 * float(x) + self._a1 * self._prev_y
        self._prev_y = self._y
        return self._y

    def reset(self) -> None:
        self._prev_y = 0.0
        self._y = 0.0


class LowPassFixed32(_FixedShiftMixin, SinglePoleFilter):
    """
    Fixed-point single-pole low-pass, 32-bit registers.

    The output is kept scaled by 2**shift between samples:

        shifted = last + (A * ((x << shift) - last + round) >> shift)
        y = shifted >> shift

    Approximate input limits at cutoff 0.005:
        shift 12: +/- 30k
        shift 10: +/- 480k
        shift  8: +/- 7.6M
    """

    response = FilterResponse.LOWPASS
    variant = FilterVariant.FIXED32
    shift_range = LOWPASS_FIXED32_SHIFT
    bits = INT32_BITS

    def __init__(self, cutoff: float, shift: int = 10):
        """
        Initialize filter.

        Args:
            cutoff: Input coefficient in (0, 1]
            shift: Fractional bits, clamped to the variant range
        """
        self._configure_shift(shift)
        self._round = round_half(self._shift)
        self.set_cutoff(cutoff)
        self.reset()
        logger.debug(
            f"{type(self).__name__}: cutoff={cutoff}, shift={self._shift}, "
            f"A={self._coefficient}"
        )

    @property
    def cutoff(self) -> float:
        return self._cutoff

    @property
    def round_number(self) -> int:
        return self._round

    @property
    def headroom(self) -> int:
        """Approximate largest input step before the product overflows."""
        return headroom(self.bits, self._shift) // max(self._coefficient, 1)

    @property
    def shifted_output(self) -> int:
        """Output scaled by 2**shift."""
        return self._shifted_filtered

    @property
    def y(self) -> int:
        return self._y

    def set_cutoff(self, cutoff: float) -> None:
        """Recompute the coefficient without clearing running state."""
        self._cutoff = float(cutoff)
        self._coefficient = to_fixed(self._cutoff, self._shift)

    def process_sample(self, x: Number) -> int:
        wrap = self._wrap
        shift = self._shift
        last = self._shifted_last
        error = wrap(wrap(int(x) << shift) - last + self._round)
        step = wrap(self._coefficient * error) >> shift
        self._shifted_filtered = wrap(last + step)
        self._shifted_last = self._shifted_filtered
        self._y = self._output(self._shifted_filtered >> shift)
        return self._y

    def _output(self, value: int) -> int:
        return value

    def reset(self) -> None:
        self._shifted_filtered = 0
        self._shifted_last = 0
        self._y = 0


class LowPassFixed64(LowPassFixed32):
    """
    Extended fixed-point single-pole low-pass with 64-bit registers.

    Allows shifts up to 28 for finer cutoff resolution.
    """

    variant = FilterVariant.FIXED64
    shift_range = LOWPASS_FIXED64_SHIFT
    bits = INT64_BITS

    def __init__(self, cutoff: float, shift: int = 20):
        super().__init__(cutoff, shift)

    def _output(self, value: int) -> int:
        return wrap_int32(value)


class LeakyLowPass(SinglePoleFilter):
    """
    Multiply-free leaky integrator.

        acc = acc - (acc >> k) + x
        y = acc >> k

    The time constant is about 2**k samples and the DC gain is one.
    Several instances can be cascaded for a steeper response.
    """

    response = FilterResponse.LOWPASS
    variant = FilterVariant.FAST_LEAKY
    attenuation_range = FAST_LEAKY_ATTENUATION

    def __init__(self, attenuation: int = 7):
        """
        Initialize filter.

        Args:
            attenuation: Shift k selecting the time constant
        """
        self._requested_attenuation = int(attenuation)
        self.set_attenuation(attenuation)
        self.reset()

    @property
    def attenuation(self) -> int:
        return self._attenuation

    @property
    def requested_attenuation(self) -> int:
        return self._requested_attenuation

    @property
    def accumulator(self) -> int:
        return self._acc

    @property
    def headroom(self) -> int:
        """Approximate largest input magnitude before the accumulator wraps."""
        return headroom(INT32_BITS, self._attenuation)

    @property
    def y(self) -> int:
        return self._y

    def set_attenuation(self, attenuation: int) -> None:
        """Change the attenuation without clearing running state."""
        self._attenuation = self.attenuation_range.clamp(attenuation)

    def process_sample(self, x: Number) -> int:
        k = self._attenuation
        self._acc = wrap_int32(self._acc - (self._acc >> k) + int(x))
        self._y = self._acc >> k
        return self._y

    def reset(self) -> None:
        self._acc = 0
        self._y = 0


class CascadedLeakyLowPass(SinglePoleFilter):
    """
    Chain of leaky integrators, each fed by the previous stage output.

    Two stages give a second-order response: the output rises with zero
    initial slope and never overshoots a step.
    """

    response = FilterResponse.LOWPASS
    variant = FilterVariant.FAST_LEAKY

    def __init__(self, attenuation: int = 7, stages: int = 2):
        """
        Initialize cascade.

        Args:
            attenuation: Shift k for every stage
            stages: Number of cascaded stages
        """
        if stages < 1:
            raise ValueError(f"stages must be at least 1, got {stages}")
        self._stages: List[LeakyLowPass] = [
            LeakyLowPass(attenuation) for _ in range(stages)
        ]

    @property
    def stages(self) -> List[LeakyLowPass]:
        return list(self._stages)

    @property
    def attenuation(self) -> int:
        return self._stages[0].attenuation

    @property
    def y(self) -> int:
        return self._stages[-1].y

    def set_attenuation(self, attenuation: int) -> None:
        for stage in self._stages:
            stage.set_attenuation(attenuation)

    def process_sample(self, x: Number) -> int:
        value = x
        for stage in self._stages:
            value = stage.process_sample(value)
        return value

    def reset(self) -> None:
        for stage in self._stages:
            stage.reset()


# =============================================================================
# Factories
# =============================================================================

_HIGHPASS_CLASSES = {
    FilterVariant.FLOAT: HighPassFloat,
    FilterVariant.FIXED32: HighPassFixed32,
    FilterVariant.FIXED64: HighPassFixed64,
}

_LOWPASS_CLASSES = {
    FilterVariant.FLOAT: LowPassFloat,
    FilterVariant.FIXED32: LowPassFixed32,
    FilterVariant.FIXED64: LowPassFixed64,
}


def create_highpass(
    variant: FilterVariant,
    cutoff: float,
    shift: Optional[int] = None,
) -> SinglePoleFilter:
    """
    Create a high-pass filter of the requested variant.

    Args:
        variant: Arithmetic variant (FAST_LEAKY has no high-pass form)
        cutoff: Pole distance from unity
        shift: Fractional bits for fixed variants (variant default if None)

    Returns:
        Filter instance
    """
    cls = _HIGHPASS_CLASSES.get(variant)
    if cls is None:
        raise ValueError(f"No high-pass filter for variant {variant.value}")
    if variant == FilterVariant.FLOAT or shift is None:
        return cls(cutoff)
    return cls(cutoff, shift)


def create_lowpass(
    variant: FilterVariant,
    cutoff: float = 0.0,
    shift: Optional[int] = None,
    attenuation: int = 7,
) -> SinglePoleFilter:
    """
    Create a low-pass filter of the requested variant.

    Args:
        variant: Arithmetic variant
        cutoff: Input coefficient (ignored by FAST_LEAKY)
        shift: Fractional bits for fixed variants (variant default if None)
        attenuation: Leaky integrator shift (FAST_LEAKY only)

    Returns:
        Filter instance
    """
    if variant == FilterVariant.FAST_LEAKY:
        return LeakyLowPass(attenuation)
    cls = _LOWPASS_CLASSES[variant]
    if variant == FilterVariant.FLOAT or shift is None:
        return cls(cutoff)
    return cls(cutoff, shift)


def create_filter(config) -> SinglePoleFilter:
    """
    Create a filter from a FilterConfig.

    Args:
        config: dsp_math.core.config.FilterConfig

    Returns:
        Filter instance
    """
    variant = FilterVariant(config.variant)
    response = FilterResponse(config.response)
    if response == FilterResponse.HIGHPASS:
        return create_highpass(variant, config.cutoff, config.shift)
    return create_lowpass(variant, config.cutoff, config.shift, config.attenuation)
