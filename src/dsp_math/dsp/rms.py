"""
RMS (root-mean-square) measurement.

Two forms are provided:
- Streaming accumulators: add samples one at a time, then finalize
- Batch functions: compute the RMS of a whole buffer

The int16 forms accumulate squares in an unsigned 32-bit total and, in
the optimized method, take the square root with the integer ladder from
dsp_math.utils.integer_math instead of floating point sqrt.

Precision of the optimized method: the integer square root truncates,
so the relative error of the result is bounded per mean-square bucket by
SQRT_LADDER_MAX_RELATIVE_ERROR (2**-15 for bits 30-31 down to 2**-11.5
below bit 8), plus the truncation of the integer mean, at most
1 / (2 * mean_square).
"""

import logging
import math
from enum import Enum
from typing import Union

import numpy as np

from ..core.fixed_point import wrap_uint32
from ..utils.integer_math import optimized_sqrt

logger = logging.getLogger(__name__)


class NoSamplesError(ValueError):
    """Raised when an RMS value is requested with no accumulated samples."""

    pass


class RMSMethod(Enum):
    """Square root method of the int16 path."""
    STANDARD = "standard"    # float division and sqrt, more accurate
    OPTIMIZED = "optimized"  # integer mean and integer square root ladder


class RMSVariant(Enum):
    """Sample type of an accumulator."""
    FLOAT = "float"
    INT16 = "int16"


def _add_square(acc: int, value: int, count: int) -> int:
    """Add value**2 to an unsigned 32-bit total, warning when it wraps."""
    total = acc + wrap_uint32(value * value)
    wrapped = wrap_uint32(total)
    if wrapped != total:
        logger.warning(f"RMS int16 accumulator wrapped after {count} samples")
    return wrapped


def _mean_square_root(acc: int, count: int, method: RMSMethod) -> float:
    if method == RMSMethod.STANDARD:
        return math.sqrt(acc / count)
    return optimized_sqrt(acc // count)


class RMSFloat:
    """
    Streaming RMS accumulator for float samples.

    Usage:
        rms = RMSFloat()
        for sample in samples:
            rms.add_sample(sample)
        value = rms.finalize()
    """

    variant = RMSVariant.FLOAT

    def __init__(self):
        self._count = 0
        self._acc = 0.0
        self._rms_value = 0.0

    @property
    def count(self) -> int:
        """Number of samples accumulated since the last finalize."""
        return self._count

    @property
    def accumulator(self) -> float:
        return self._acc

    @property
    def rms_value(self) -> float:
        """RMS value computed by the last finalize."""
        return self._rms_value

    def add_sample(self, sample: float) -> None:
        """Square and accumulate one sample."""
        sample = float(sample)
        self._acc += sample * sample
        self._count += 1

    def add_samples(self, samples: np.ndarray) -> None:
        """Accumulate every sample of an array."""
        for sample in np.asarray(samples):
            self.add_sample(sample)

    def finalize(self) -> float:
        """
        Compute the RMS of the accumulated samples and restart accumulation.

        Returns:
            RMS value

        Raises:
            NoSamplesError: If no samples were added
        """
        if self._count == 0:
            raise NoSamplesError("Cannot finalize RMS without samples")
        self._rms_value = math.sqrt(self._acc / self._count)
        self._acc = 0.0
        self._count = 0
        return self._rms_value

    def clear(self) -> None:
        """Discard accumulated samples and the last result."""
        self._acc = 0.0
        self._count = 0
        self._rms_value = 0.0


class RMSInt16(RMSFloat):
    """
    Streaming RMS accumulator for int16 samples.

    Each sample is widened to 32 bits before squaring and added to an
    unsigned 32-bit total. The total holds at least 4 full-scale samples
    and about 4000 samples of amplitude 1000; past that it wraps, which
    is reported with a warning.
    """

    variant = RMSVariant.INT16

    def __init__(self, method: RMSMethod = RMSMethod.OPTIMIZED):
        """
        Initialize accumulator.

        Args:
            method: Square root method used by finalize
        """
        super().__init__()
        self._acc = 0
        self._method = method

    @property
    def method(self) -> RMSMethod:
        return self._method

    def add_sample(self, sample: int) -> None:
        self._count += 1
        self._acc = _add_square(self._acc, int(sample), self._count)

    def finalize(self) -> float:
        """
        Compute the RMS of the accumulated samples and restart accumulation.

        Returns:
            RMS value

        Raises:
            NoSamplesError: If no samples were added
        """
        if self._count == 0:
            raise NoSamplesError("Cannot finalize RMS without samples")
        self._rms_value = _mean_square_root(self._acc, self._count, self._method)
        self._acc = 0
        self._count = 0
        return self._rms_value

    def clear(self) -> None:
        super().clear()
        self._acc = 0


def rms_array_float(samples: np.ndarray, dc_level: float = 0.0) -> float:
    """
    RMS value of a float buffer.

    Args:
        samples: Input samples
        dc_level: DC level subtracted from every sample before squaring

    Returns:
        RMS value

    Raises:
        NoSamplesError: If the buffer is empty
    """
    samples = np.asarray(samples, dtype=np.float64)
    if len(samples) == 0:
        raise NoSamplesError("Cannot compute RMS of an empty buffer")
    if dc_level:
        samples = samples - dc_level
    return float(np.sqrt(np.sum(samples * samples) / len(samples)))


def rms_array_int16(
    samples: np.ndarray,
    dc_level: int = 0,
    method: RMSMethod = RMSMethod.OPTIMIZED,
) -> float:
    """
    RMS value of an int16 buffer using a 32-bit unsigned accumulator.

    Args:
        samples: Input samples (int16 range)
        dc_level: DC level subtracted from every sample before squaring
        method: Square root method

    Returns:
        RMS value

    Raises:
        NoSamplesError: If the buffer is empty
    """
    samples = np.asarray(samples)
    if len(samples) == 0:
        raise NoSamplesError("Cannot compute RMS of an empty buffer")

    dc_level = int(dc_level)
    acc = 0
    for count, sample in enumerate(samples, start=1):
        value = int(sample) - dc_level if dc_level else int(sample)
        acc = _add_square(acc, value, count)
    return _mean_square_root(acc, len(samples), method)


def create_rms(config) -> Union[RMSFloat, RMSInt16]:
    """
    Create a streaming accumulator from an RMSConfig.

    Args:
        config: dsp_math.core.config.RMSConfig

    Returns:
        Accumulator instance
    """
    if RMSVariant(config.variant) == RMSVariant.FLOAT:
        return RMSFloat()
    return RMSInt16(RMSMethod(config.method))
