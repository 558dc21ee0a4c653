"""
DSP and Math - Signal processing primitives for embedded targets

Stateful filters, detectors and accumulators whose fixed-point variants
reproduce the integer arithmetic of microcontrollers without an FPU, so
results can be checked against a floating point reference before the
same algorithm runs on the device.

Components:
    - Single-pole high-pass (DC blocker) and low-pass filters:
      float, fixed 32-bit, fixed 64-bit extended, leaky integrator
    - Goertzel single-bin DFT: float and fixed 64-bit
    - RMS accumulator: float and int16 with integer square root
    - Integer square root
    - Sine wave test signal generator
"""

__version__ = "0.4.3"
__author__ = "DSP Math Team"

from .dsp import (
    CascadedLeakyLowPass,
    FilterResponse,
    FilterVariant,
    GoertzelFixed64,
    GoertzelFloat,
    GoertzelResult,
    HighPassFixed32,
    HighPassFixed64,
    HighPassFloat,
    LeakyLowPass,
    LowPassFixed32,
    LowPassFixed64,
    LowPassFloat,
    NoSamplesError,
    RMSFloat,
    RMSInt16,
    RMSMethod,
    SineWaveGenerator,
    SinglePoleFilter,
    create_filter,
    create_goertzel,
    create_highpass,
    create_lowpass,
    create_rms,
    rms_array_float,
    rms_array_int16,
    sine_wave,
)
from .utils import integer_sqrt

__all__ = [
    # Filters
    "SinglePoleFilter",
    "FilterVariant",
    "FilterResponse",
    "HighPassFloat",
    "HighPassFixed32",
    "HighPassFixed64",
    "LowPassFloat",
    "LowPassFixed32",
    "LowPassFixed64",
    "LeakyLowPass",
    "CascadedLeakyLowPass",
    "create_highpass",
    "create_lowpass",
    "create_filter",
    # Goertzel
    "GoertzelFloat",
    "GoertzelFixed64",
    "GoertzelResult",
    "create_goertzel",
    # RMS
    "RMSFloat",
    "RMSInt16",
    "RMSMethod",
    "NoSamplesError",
    "rms_array_float",
    "rms_array_int16",
    "create_rms",
    # Signal generation
    "SineWaveGenerator",
    "sine_wave",
    # Math
    "integer_sqrt",
    # Version
    "__version__",
]
