"""Tests for RMS accumulators and batch functions."""

import logging
import math

import numpy as np
import pytest

from dsp_math.core.config import RMSConfig
from dsp_math.dsp.generators import sine_wave
from dsp_math.dsp.rms import (
    NoSamplesError,
    RMSFloat,
    RMSInt16,
    RMSMethod,
    RMSVariant,
    create_rms,
    rms_array_float,
    rms_array_int16,
)


class TestRMSFloat:
    """Test float streaming accumulator."""

    def test_simple_values(self):
        """Test RMS of a few known samples."""
        rms = RMSFloat()
        rms.add_sample(3.0)
        rms.add_sample(4.0)
        assert rms.count == 2
        assert rms.accumulator == 25.0
        assert rms.finalize() == pytest.approx(math.sqrt(12.5))

    def test_sine(self):
        """Test RMS of a full sine cycle is amplitude / sqrt(2)."""
        rms = RMSFloat()
        rms.add_samples(sine_wave(64, freq=1, amplitude=100))
        assert rms.finalize() == pytest.approx(100 / math.sqrt(2), rel=1e-9)

    def test_finalize_restarts(self):
        """Test finalize stores the result and clears the accumulator."""
        rms = RMSFloat()
        rms.add_samples([2.0, -2.0])
        value = rms.finalize()
        assert rms.rms_value == value == 2.0
        assert rms.count == 0
        assert rms.accumulator == 0.0

    def test_no_samples(self):
        """Test finalize without samples raises."""
        rms = RMSFloat()
        with pytest.raises(NoSamplesError):
            rms.finalize()

    def test_no_samples_is_value_error(self):
        """Test the empty case can be caught as ValueError."""
        with pytest.raises(ValueError):
            RMSFloat().finalize()

    def test_clear(self):
        """Test clear discards samples and the last result."""
        rms = RMSFloat()
        rms.add_samples([1.0, 2.0])
        rms.finalize()
        rms.add_sample(5.0)
        rms.clear()
        assert rms.count == 0
        assert rms.rms_value == 0.0


class TestRMSInt16:
    """Test int16 streaming accumulator."""

    def test_full_scale(self):
        """Test full-scale negative samples."""
        for method in RMSMethod:
            rms = RMSInt16(method)
            rms.add_samples(np.full(3, -32768, dtype=np.int16))
            assert rms.finalize() == 32768.0

    def test_small_constant(self):
        """Test the optimized ladder keeps precision for small values."""
        rms = RMSInt16(RMSMethod.OPTIMIZED)
        rms.add_samples(np.full(10, 3, dtype=np.int16))
        assert rms.finalize() == pytest.approx(3.0, rel=1e-3)

    def test_standard_method(self):
        """Test the float sqrt path."""
        rms = RMSInt16(RMSMethod.STANDARD)
        rms.add_samples(np.array([3, 4], dtype=np.int16))
        assert rms.finalize() == pytest.approx(math.sqrt(12.5))

    def test_methods_agree(self):
        """Test both methods agree on a sine."""
        signal = np.round(sine_wave(64, freq=1, amplitude=1000)).astype(np.int16)
        standard = RMSInt16(RMSMethod.STANDARD)
        optimized = RMSInt16(RMSMethod.OPTIMIZED)
        standard.add_samples(signal)
        optimized.add_samples(signal)
        assert optimized.finalize() == pytest.approx(standard.finalize(), rel=1e-3)

    def test_default_method(self):
        """Test optimized is the default method."""
        rms = RMSInt16()
        assert rms.method == RMSMethod.OPTIMIZED
        assert rms.variant == RMSVariant.INT16

    def test_accumulator_is_integer(self):
        """Test the accumulator holds the exact sum of squares."""
        rms = RMSInt16()
        rms.add_samples(np.array([-3, 4, 100], dtype=np.int16))
        assert rms.accumulator == 9 + 16 + 10000

    def test_wrap_warning(self, caplog):
        """Test accumulator wraparound is reported."""
        rms = RMSInt16()
        with caplog.at_level(logging.WARNING, logger="dsp_math.dsp.rms"):
            rms.add_samples(np.full(4, 32767, dtype=np.int16))
            assert "wrapped" not in caplog.text
            rms.add_sample(32767)
        assert "wrapped after 5 samples" in caplog.text
        assert rms.accumulator == (5 * 32767 * 32767) % 2**32

    def test_no_samples(self):
        """Test finalize without samples raises."""
        with pytest.raises(NoSamplesError):
            RMSInt16().finalize()


class TestBatch:
    """Test batch RMS functions."""

    def test_float_sine(self):
        """Test RMS of a float buffer."""
        signal = sine_wave(64, freq=2, amplitude=10)
        assert rms_array_float(signal) == pytest.approx(10 / math.sqrt(2), rel=1e-9)

    def test_float_dc_level(self):
        """Test DC level is removed before squaring."""
        signal = sine_wave(64, freq=1, amplitude=10, offset=500)
        assert rms_array_float(signal, dc_level=500) == pytest.approx(
            10 / math.sqrt(2), rel=1e-9
        )

    def test_float_matches_streaming(self):
        """Test batch and streaming results agree."""
        signal = sine_wave(64, freq=3, amplitude=7, offset=1)
        rms = RMSFloat()
        rms.add_samples(signal)
        assert rms_array_float(signal) == pytest.approx(rms.finalize())

    def test_int16_dc_level(self):
        """Test int16 RMS with a DC offset removed."""
        signal = np.round(sine_wave(64, freq=1, amplitude=100, offset=1000)).astype(np.int16)
        standard = rms_array_int16(signal, dc_level=1000, method=RMSMethod.STANDARD)
        assert standard == pytest.approx(rms_array_float(signal, dc_level=1000), rel=1e-12)
        assert standard == pytest.approx(100 / math.sqrt(2), rel=1e-2)

    def test_int16_optimized(self):
        """Test optimized batch RMS against the float result."""
        signal = np.round(sine_wave(64, freq=1, amplitude=1000)).astype(np.int16)
        optimized = rms_array_int16(signal)
        assert optimized == pytest.approx(rms_array_float(signal), rel=1e-3)

    def test_int16_matches_streaming(self):
        """Test batch and streaming int16 results are identical."""
        signal = np.round(sine_wave(64, freq=1, amplitude=1000)).astype(np.int16)
        rms = RMSInt16()
        rms.add_samples(signal)
        assert rms_array_int16(signal) == rms.finalize()

    def test_int16_wrap_warning(self, caplog):
        """Test batch accumulator wraparound is reported like the streaming one."""
        with caplog.at_level(logging.WARNING, logger="dsp_math.dsp.rms"):
            rms_array_int16(np.full(4, 32767, dtype=np.int16))
            assert "wrapped" not in caplog.text
            rms_array_int16(np.full(5, 32767, dtype=np.int16))
        assert "wrapped after 5 samples" in caplog.text

    def test_empty(self):
        """Test empty buffers raise."""
        with pytest.raises(NoSamplesError):
            rms_array_float(np.array([]))
        with pytest.raises(NoSamplesError):
            rms_array_int16(np.array([], dtype=np.int16))


class TestCreateRMS:
    """Test building accumulators from configuration."""

    def test_default(self):
        """Test default configuration gives an optimized int16 accumulator."""
        rms = create_rms(RMSConfig())
        assert isinstance(rms, RMSInt16)
        assert rms.method == RMSMethod.OPTIMIZED

    def test_float(self):
        """Test float accumulator from configuration."""
        rms = create_rms(RMSConfig(variant="float"))
        assert type(rms) is RMSFloat

    def test_standard(self):
        """Test standard method from configuration."""
        rms = create_rms(RMSConfig(variant="int16", method="standard"))
        assert rms.method == RMSMethod.STANDARD
