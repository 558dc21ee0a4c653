"""Tests for Goertzel single-bin detectors."""

import logging
import math

import numpy as np
import pytest

from dsp_math.core.config import GoertzelConfig
from dsp_math.core.fixed_point import to_fixed
from dsp_math.dsp.generators import sine_wave
from dsp_math.dsp.goertzel import (
    GoertzelFixed64,
    GoertzelFloat,
    GoertzelResult,
    GoertzelVariant,
    create_goertzel,
)


def int16_sine(points, freq, amplitude, phase=0.0):
    """Rounded sine wave as int16 samples."""
    return np.round(sine_wave(points, freq, phase, amplitude)).astype(np.int16)


class TestGoertzelFloat:
    """Test floating point detector."""

    def test_coefficients(self):
        """Test cos, sin and feedback coefficient."""
        det = GoertzelFloat(1, 64)
        w = 2 * math.pi / 64
        assert det.cr == pytest.approx(math.cos(w))
        assert det.ci == pytest.approx(math.sin(w))
        assert det.coeff == pytest.approx(2 * math.cos(w))

    def test_invalid_size(self):
        """Test a non-positive window is rejected."""
        with pytest.raises(ValueError):
            GoertzelFloat(1, 0)

    def test_sine_amplitude(self):
        """Test magnitude equals the amplitude of a sine in the bin."""
        det = GoertzelFloat(1, 64)
        result = det.compute(sine_wave(64, freq=1, amplitude=100))
        assert isinstance(result, GoertzelResult)
        assert result.magnitude == pytest.approx(100.0, rel=1e-9)

    def test_phase_independent(self):
        """Test magnitude does not depend on the phase of the input."""
        det = GoertzelFloat(3, 64)
        for phase in (0.0, 0.7, math.pi / 2, 2.5):
            signal = sine_wave(64, freq=3, phase=phase, amplitude=50)
            assert det.compute(signal).magnitude == pytest.approx(50.0, rel=1e-9)

    def test_other_bin_rejected(self):
        """Test a sine in another bin gives no energy."""
        det = GoertzelFloat(2, 64)
        result = det.compute(sine_wave(64, freq=5, amplitude=100))
        assert result.magnitude == pytest.approx(0.0, abs=1e-6)

    def test_fundamental_leakage_at_bin_8(self):
        """Test a bin-1 sine leaves less than one unit in bin 8."""
        det = GoertzelFloat(8, 64)
        result = det.compute(sine_wave(64, freq=1, amplitude=100))
        assert result.magnitude < 1.0

    def test_harmonic_separation(self):
        """Test each bin of a signal with harmonics is measured on its own."""
        signal = sine_wave(64, freq=1, amplitude=1000)
        sine_wave(64, freq=8, amplitude=1000 / 16, out=signal, clean=False)

        fundamental = GoertzelFloat(1, 64).compute(signal)
        harmonic = GoertzelFloat(8, 64).compute(signal)
        assert fundamental.magnitude == pytest.approx(1000.0, rel=1e-9)
        assert harmonic.magnitude == pytest.approx(62.5, rel=1e-9)

    def test_streaming_matches_batch(self):
        """Test add_sample then finalize equals compute."""
        signal = sine_wave(64, freq=1, amplitude=100, offset=20)
        det = GoertzelFloat(1, 64)
        batch = det.compute(signal)

        det.add_samples(signal)
        assert det.is_complete
        streamed = det.finalize()
        assert streamed.real == pytest.approx(batch.real)
        assert streamed.imag == pytest.approx(batch.imag)
        assert streamed.magnitude == pytest.approx(batch.magnitude)

    def test_extra_samples_ignored(self):
        """Test samples beyond the window do not change the result."""
        signal = sine_wave(80, freq=80 / 64, amplitude=100)
        det = GoertzelFloat(1, 64)
        det.add_samples(signal)
        assert det.count == 64
        streamed = det.finalize()
        assert streamed.magnitude == pytest.approx(det.compute(signal[:64]).magnitude)

    def test_finalize_starts_new_window(self):
        """Test finalize resets the delay line and counter."""
        det = GoertzelFloat(1, 64)
        det.add_samples(sine_wave(64, freq=1, amplitude=100))
        det.finalize()
        assert det.count == 0
        assert not det.is_complete
        det.add_samples(sine_wave(64, freq=1, amplitude=40))
        assert det.finalize().magnitude == pytest.approx(40.0, rel=1e-9)

    def test_result_properties(self):
        """Test last result is exposed after finalize."""
        det = GoertzelFloat(1, 64)
        det.add_samples(sine_wave(64, freq=1, amplitude=100))
        result = det.finalize()
        assert det.magnitude == result.magnitude
        assert det.real == result.real
        assert det.imag == result.imag

    def test_compute_requires_full_window(self):
        """Test a short buffer is rejected."""
        det = GoertzelFloat(1, 64)
        with pytest.raises(ValueError):
            det.compute(np.zeros(63))

    def test_compute_leaves_streaming_state(self):
        """Test compute does not disturb a window in progress."""
        signal = sine_wave(64, freq=1, amplitude=100)
        det = GoertzelFloat(1, 64)
        det.add_samples(signal[:10])
        det.compute(sine_wave(64, freq=2, amplitude=5))
        assert det.count == 10
        det.add_samples(signal[10:])
        assert det.finalize().magnitude == pytest.approx(100.0, rel=1e-9)


class TestGoertzelFixed64:
    """Test fixed-point detector."""

    def test_coefficients(self):
        """Test scaled coefficients."""
        det = GoertzelFixed64(1, 64, shift=18)
        w = 2 * math.pi / 64
        assert det.cr_fixed == to_fixed(math.cos(w), 18)
        assert det.ci_fixed == to_fixed(math.sin(w), 18)
        assert det.coeff_fixed == to_fixed(2 * math.cos(w), 18)
        assert det.variant == GoertzelVariant.FIXED64

    def test_shift_clamped(self):
        """Test out-of-range shifts are clamped."""
        det = GoertzelFixed64(1, 64, shift=30)
        assert det.shift == 19
        assert det.requested_shift == 30
        assert GoertzelFixed64(1, 64, shift=4).shift == 8

    def test_sine_amplitude(self):
        """Test magnitude of an int16 sine."""
        det = GoertzelFixed64(1, 64, shift=18)
        result = det.compute(int16_sine(64, 1, 100))
        assert result.magnitude == pytest.approx(100.0, abs=1.5)
        assert isinstance(result.real, int)
        assert isinstance(result.imag, int)

    def test_odd_shift(self):
        """Test an odd shift is rescaled exactly."""
        det = GoertzelFixed64(1, 64, shift=17)
        assert det.shift == 17
        result = det.compute(int16_sine(64, 1, 100))
        assert result.magnitude == pytest.approx(100.0, abs=1.5)

    def test_matches_float(self):
        """Test fixed and float detectors agree on the same input."""
        signal = int16_sine(64, 1, 100)
        fixed = GoertzelFixed64(1, 64, shift=18).compute(signal)
        reference = GoertzelFloat(1, 64).compute(signal)
        assert fixed.magnitude == pytest.approx(reference.magnitude, abs=0.05)

    def test_full_scale_input(self):
        """Test a near full-scale int16 input at the default shift."""
        signal = int16_sine(64, 1, 32000)
        fixed = GoertzelFixed64(1, 64, shift=18).compute(signal)
        reference = GoertzelFloat(1, 64).compute(signal)
        assert fixed.magnitude == pytest.approx(reference.magnitude, rel=1e-3)

    def test_full_scale_at_maximum_shift(self, caplog):
        """Test full-scale int16 input at the largest shift does not wrap."""
        det = GoertzelFixed64(1, 64, shift=24)
        assert det.shift == 19
        assert det.headroom >= 32767

        signal = int16_sine(64, 1, 32767)
        with caplog.at_level(logging.WARNING, logger="dsp_math.dsp.goertzel"):
            fixed = det.compute(signal)
        reference = GoertzelFloat(1, 64).compute(signal)
        assert fixed.magnitude == pytest.approx(reference.magnitude, rel=1e-3)
        assert "wrapped" not in caplog.text

    def test_headroom_shrinks_with_shift(self):
        """Test a larger shift leaves less input headroom."""
        assert GoertzelFixed64(1, 64, shift=12).headroom > GoertzelFixed64(1, 64, shift=19).headroom

    def test_wrap_warning(self, caplog):
        """Test a long window past the headroom reports the wrap."""
        det = GoertzelFixed64(1, 1024)
        signal = int16_sine(1024, 1, 32000)
        assert det.headroom < 32000

        with caplog.at_level(logging.WARNING, logger="dsp_math.dsp.goertzel"):
            det.compute(signal)
        assert "state wrapped at shift 18" in caplog.text

        caplog.clear()
        with caplog.at_level(logging.WARNING, logger="dsp_math.dsp.goertzel"):
            det.add_samples(signal)
            det.finalize()
        assert "state wrapped" in caplog.text

    def test_streaming_matches_batch(self):
        """Test add_sample then finalize equals compute."""
        signal = int16_sine(64, 1, 100)
        det = GoertzelFixed64(1, 64)
        batch = det.compute(signal)
        for sample in signal:
            det.add_sample(sample)
        streamed = det.finalize()
        assert streamed == batch

    def test_reset(self):
        """Test reset clears state to integers."""
        det = GoertzelFixed64(1, 64)
        det.add_samples(int16_sine(64, 1, 100)[:5])
        det.reset()
        assert det.count == 0
        det.add_samples(int16_sine(64, 1, 100))
        assert det.finalize().magnitude == pytest.approx(100.0, abs=1.5)


class TestCreateGoertzel:
    """Test building detectors from configuration."""

    def test_float(self):
        """Test float detector from default configuration."""
        det = create_goertzel(GoertzelConfig())
        assert type(det) is GoertzelFloat
        assert det.size == 64

    def test_fixed(self):
        """Test fixed detector from configuration."""
        det = create_goertzel(GoertzelConfig(bin_index=2, size=128, variant="fixed64", shift=16))
        assert isinstance(det, GoertzelFixed64)
        assert det.shift == 16
        assert det.bin_index == 2
