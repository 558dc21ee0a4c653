"""
Sine wave test signal generation.

The generator advances a phase accumulator by 2*pi*freq/points per
sample, so `points` samples cover `freq` full cycles. The batch function
uses the same accumulation, so both forms produce identical samples.
"""

import math
from typing import Optional

import numpy as np


def _phase_increment(freq: float, points: int) -> float:
    if points <= 0:
        raise ValueError(f"points must be positive, got {points}")
    return 2.0 * math.pi * freq / points


class SineWaveGenerator:
    """
    Sample-by-sample sine wave source.

    Usage:
        fundamental = SineWaveGenerator(freq=1, amplitude=1000, points=64)
        harmonic = SineWaveGenerator(freq=8, amplitude=1000 / 16, points=64)
        sample = fundamental.get_sample() + harmonic.get_sample()
    """

    def __init__(
        self,
        freq: float = 1.0,
        phase: float = 0.0,
        amplitude: float = 1.0,
        offset: float = 0.0,
        points: int = 64,
    ):
        """
        Initialize generator.

        Args:
            freq: Cycles per `points` samples
            phase: Phase offset in radians
            amplitude: Peak amplitude
            offset: DC offset added to every sample
            points: Samples per window
        """
        self._freq = freq
        self._phase = phase
        self._amplitude = amplitude
        self._offset = offset
        self._points = int(points)
        self._increment = _phase_increment(freq, self._points)
        self._acc = 0.0

    @property
    def freq(self) -> float:
        return self._freq

    @property
    def phase(self) -> float:
        return self._phase

    @property
    def amplitude(self) -> float:
        return self._amplitude

    @property
    def offset(self) -> float:
        return self._offset

    @property
    def points(self) -> int:
        return self._points

    @property
    def increment(self) -> float:
        """Phase step per sample in radians."""
        return self._increment

    @property
    def phase_accumulator(self) -> float:
        return self._acc

    def get_sample(self) -> float:
        """Return the current sample and advance the phase."""
        sample = self._amplitude * math.sin(self._acc + self._phase) + self._offset
        self._acc += self._increment
        return sample

    def generate(self, count: Optional[int] = None) -> np.ndarray:
        """
        Return the next samples as an array.

        Args:
            count: Number of samples (one window if None)

        Returns:
            Generated samples
        """
        if count is None:
            count = self._points
        output = np.zeros(count)
        for i in range(count):
            output[i] = self.get_sample()
        return output

    def reset(self) -> None:
        """Restart the wave at phase zero."""
        self._acc = 0.0


def sine_wave(
    points: int,
    freq: float = 1.0,
    phase: float = 0.0,
    amplitude: float = 1.0,
    offset: float = 0.0,
    out: Optional[np.ndarray] = None,
    clean: bool = True,
) -> np.ndarray:
    """
    Fill a buffer with one window of a sine wave.

    With clean=False the wave is added to the existing contents of `out`,
    which builds signals with harmonics:

        signal = sine_wave(64, freq=1, amplitude=1000)
        sine_wave(64, freq=8, amplitude=62.5, out=signal, clean=False)

    Args:
        points: Number of samples
        freq: Cycles per window
        phase: Phase offset in radians
        amplitude: Peak amplitude
        offset: DC offset
        out: Destination buffer (allocated if None)
        clean: Zero the buffer before writing

    Returns:
        The filled buffer
    """
    increment = _phase_increment(freq, points)
    if out is None:
        out = np.zeros(points)
    elif len(out) < points:
        raise ValueError(f"Output buffer holds {len(out)} samples, need {points}")
    elif clean:
        out[:points] = 0.0

    x = 0.0
    for i in range(points):
        out[i] += amplitude * math.sin(x + phase) + offset
        x += increment
    return out


def create_sine_generator(config) -> SineWaveGenerator:
    """
    Create a generator from a SineConfig.

    Args:
        config: dsp_math.core.config.SineConfig

    Returns:
        Generator instance
    """
    return SineWaveGenerator(
        freq=config.freq,
        phase=config.phase,
        amplitude=config.amplitude,
        offset=config.offset,
        points=config.points,
    )
