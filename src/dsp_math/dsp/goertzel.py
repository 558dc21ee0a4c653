"""
Goertzel single-bin DFT detectors.

Computes the amplitude of one frequency bin of an N-sample window with a
second-order recursion, without a full transform. Both detectors work
either sample by sample (add_sample, then finalize) or on a whole buffer
(compute).

The magnitude is normalized to the amplitude of a sine wave in the bin:
magnitude = 2 * |X[bin]| / N.
"""

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Tuple, Union

import numpy as np

from ..core.fixed_point import GOERTZEL_FIXED64_SHIFT, to_fixed, wrap_int64

logger = logging.getLogger(__name__)


class GoertzelVariant(Enum):
    """Arithmetic used by a detector."""
    FLOAT = "float"
    FIXED64 = "fixed64"


@dataclass
class GoertzelResult:
    """Result of one Goertzel window."""

    real: float
    imag: float
    magnitude: float


def _angular_frequency(bin_index: float, size: int) -> float:
    if size <= 0:
        raise ValueError(f"Window size must be positive, got {size}")
    return 2.0 * math.pi * bin_index / size


def _state_gain(w: float, size: int) -> float:
    # sum of |sin(j*w) / sin(w)| over the window, j*w limit when sin(w) ~ 0
    sin_w = math.sin(w)
    if abs(sin_w) < 1e-12:
        return size * (size + 1) / 2.0
    return sum(abs(math.sin(j * w)) for j in range(1, size + 1)) / abs(sin_w)


class GoertzelFloat:
    """
    Floating point Goertzel detector.

    Usage:
        det = GoertzelFloat(bin_index=1, size=64)
        for sample in samples:
            det.add_sample(sample)
        result = det.finalize()
    """

    variant = GoertzelVariant.FLOAT

    def __init__(self, bin_index: float, size: int):
        """
        Initialize detector.

        Args:
            bin_index: Target bin (harmonic of the window fundamental)
            size: Window length N
        """
        self._bin = bin_index
        self._size = int(size)
        self._w = _angular_frequency(bin_index, self._size)
        self._cr = math.cos(self._w)
        self._ci = math.sin(self._w)
        self._coeff = 2.0 * self._cr

        self._real = 0.0
        self._imag = 0.0
        self._magnitude = 0.0
        self.reset()

        logger.debug(f"GoertzelFloat: bin={bin_index}, N={self._size}")

    @property
    def bin_index(self) -> float:
        return self._bin

    @property
    def size(self) -> int:
        return self._size

    @property
    def cr(self) -> float:
        return self._cr

    @property
    def ci(self) -> float:
        return self._ci

    @property
    def coeff(self) -> float:
        return self._coeff

    @property
    def count(self) -> int:
        """Samples consumed in the current window."""
        return self._count

    @property
    def is_complete(self) -> bool:
        """True once N samples have been added."""
        return self._count >= self._size

    @property
    def real(self) -> float:
        return self._real

    @property
    def imag(self) -> float:
        return self._imag

    @property
    def magnitude(self) -> float:
        return self._magnitude

    @property
    def result(self) -> GoertzelResult:
        return GoertzelResult(self._real, self._imag, self._magnitude)

    def add_sample(self, sample: Union[int, float]) -> None:
        """
        Feed one sample into the recursion.

        Samples beyond the window length are ignored until finalize.
        """
        if self._count < self._size:
            s = float(sample) + self._coeff * self._s1 - self._s2
            self._s2 = self._s1
            self._s1 = s
            self._count += 1

    def add_samples(self, samples: np.ndarray) -> None:
        for sample in np.asarray(samples):
            self.add_sample(sample)

    def finalize(self) -> GoertzelResult:
        """
        Compute the bin from the samples added so far and start a new window.

        Returns:
            Real part, imaginary part and normalized magnitude
        """
        result = self._finish(self._s1, self._s2)
        self.reset()
        return result

    def compute(self, samples: np.ndarray) -> GoertzelResult:
        """
        Compute the bin over the first N samples of a buffer.

        The streaming state is left untouched.

        Args:
            samples: Input buffer (float or int16)

        Returns:
            Real part, imaginary part and normalized magnitude
        """
        window = self._window(samples).astype(np.float64)
        coeff = self._coeff
        s1 = 0.0
        s2 = 0.0
        for sample in window:
            s = float(sample) + coeff * s1 - s2
            s2 = s1
            s1 = s
        return self._finish(s1, s2)

    def reset(self) -> None:
        """Clear the delay line and counter, keeping the configuration."""
        self._s1 = 0.0
        self._s2 = 0.0
        self._count = 0

    def _window(self, samples: np.ndarray) -> np.ndarray:
        samples = np.asarray(samples)
        if len(samples) < self._size:
            raise ValueError(
                f"Need {self._size} samples for a Goertzel window, got {len(samples)}"
            )
        return samples[: self._size]

    def _finish(self, s1: float, s2: float) -> GoertzelResult:
        self._real = s1 - s2 * self._cr
        self._imag = s2 * self._ci
        self._magnitude = (
            math.sqrt(self._real * self._real + self._imag * self._imag)
            * 2.0 / self._size
        )
        return self.result


class GoertzelFixed64(GoertzelFloat):
    """
    Fixed-point Goertzel detector with 64-bit state, for int16 samples.

    cos, sin and the feedback coefficient are scaled by 2**shift. Only
    the final square root and normalization use floating point; the
    rescale by 2**(shift / 2) is exact for odd shifts as well.

    real and imag are reported in the scaled integer domain.
    """

    variant = GoertzelVariant.FIXED64
    shift_range = GOERTZEL_FIXED64_SHIFT

    def __init__(self, bin_index: float, size: int, shift: int = 18):
        """
        Initialize detector.

        Args:
            bin_index: Target bin (harmonic of the window fundamental)
            size: Window length N
            shift: Fractional bits, clamped to the supported range
        """
        self._requested_shift = int(shift)
        self._shift = self.shift_range.clamp(shift)
        super().__init__(bin_index, size)

        self._cr_fix = to_fixed(self._cr, self._shift)
        self._ci_fix = to_fixed(self._ci, self._shift)
        self._coeff_fix = to_fixed(self._coeff, self._shift)
        self._real = 0
        self._imag = 0

        logger.debug(
            f"GoertzelFixed64: shift={self._shift}, cr={self._cr_fix}, "
            f"ci={self._ci_fix}, coeff={self._coeff_fix}"
        )

    @property
    def shift(self) -> int:
        return self._shift

    @property
    def requested_shift(self) -> int:
        return self._requested_shift

    @property
    def cr_fixed(self) -> int:
        return self._cr_fix

    @property
    def ci_fixed(self) -> int:
        return self._ci_fix

    @property
    def coeff_fixed(self) -> int:
        return self._coeff_fix

    @property
    def headroom(self) -> int:
        """
        Largest input magnitude that cannot wrap the 64-bit state.

        Worst case bound over any input of that magnitude. A sine in the
        bin reaches about three quarters of the bound.
        """
        gain = _state_gain(self._w, self._size)
        scale = (1 << self._shift) * max(abs(self._coeff_fix), 1 << self._shift)
        return int((1 << 63) // (gain * scale))

    def add_sample(self, sample: Union[int, float]) -> None:
        if self._count < self._size:
            s, wrapped = self._step(int(sample), self._s1, self._s2)
            self._s2, self._s1 = self._s1, s
            self._wrapped = self._wrapped or wrapped
            self._count += 1

    def finalize(self) -> GoertzelResult:
        self._warn_if_wrapped(self._wrapped)
        return super().finalize()

    def compute(self, samples: np.ndarray) -> GoertzelResult:
        window = self._window(samples)
        s1 = 0
        s2 = 0
        overflow = False
        for sample in window:
            s, wrapped = self._step(int(sample), s1, s2)
            s2, s1 = s1, s
            overflow = overflow or wrapped
        self._warn_if_wrapped(overflow)
        return self._finish(s1, s2)

    def reset(self) -> None:
        self._s1 = 0
        self._s2 = 0
        self._count = 0
        self._wrapped = False

    def _step(self, sample: int, s1: int, s2: int) -> Tuple[int, bool]:
        shift = self._shift
        product = self._coeff_fix * s1
        feedback = wrap_int64(product) >> shift
        total = (sample << shift) + feedback - s2
        s = wrap_int64(total)
        return s, s != total or wrap_int64(product) != product

    def _warn_if_wrapped(self, wrapped: bool) -> None:
        if wrapped:
            logger.warning(
                f"GoertzelFixed64 state wrapped at shift {self._shift}, "
                f"input headroom is {self.headroom}"
            )

    def _finish(self, s1: int, s2: int) -> GoertzelResult:
        shift = self._shift
        self._real = wrap_int64(s1 - (wrap_int64(s2 * self._cr_fix) >> shift))
        self._imag = wrap_int64(s2 * self._ci_fix) >> shift
        energy = (self._real * self._real + self._imag * self._imag) >> shift
        magnitude = math.sqrt(float(energy)) / self._size * 2.0
        self._magnitude = magnitude / 2.0 ** (shift / 2.0)
        return self.result


def create_goertzel(config) -> GoertzelFloat:
    """
    Create a detector from a GoertzelConfig.

    Args:
        config: dsp_math.core.config.GoertzelConfig

    Returns:
        Detector instance
    """
    if GoertzelVariant(config.variant) == GoertzelVariant.FLOAT:
        return GoertzelFloat(config.bin_index, config.size)
    return GoertzelFixed64(config.bin_index, config.size, config.shift)
