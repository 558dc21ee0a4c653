"""
DSP module - Stateful signal processing primitives.
"""

from .filters import (
    FilterVariant,
    FilterResponse,
    SinglePoleFilter,
    HighPassFloat,
    HighPassFixed32,
    HighPassFixed64,
    LowPassFloat,
    LowPassFixed32,
    LowPassFixed64,
    LeakyLowPass,
    CascadedLeakyLowPass,
    create_highpass,
    create_lowpass,
    create_filter,
)
from .goertzel import (
    GoertzelVariant,
    GoertzelResult,
    GoertzelFloat,
    GoertzelFixed64,
    create_goertzel,
)
from .rms import (
    NoSamplesError,
    RMSMethod,
    RMSVariant,
    RMSFloat,
    RMSInt16,
    rms_array_float,
    rms_array_int16,
    create_rms,
)
from .generators import SineWaveGenerator, sine_wave, create_sine_generator

__all__ = [
    "FilterVariant",
    "FilterResponse",
    "SinglePoleFilter",
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
    "GoertzelVariant",
    "GoertzelResult",
    "GoertzelFloat",
    "GoertzelFixed64",
    "create_goertzel",
    "NoSamplesError",
    "RMSMethod",
    "RMSVariant",
    "RMSFloat",
    "RMSInt16",
    "rms_array_float",
    "rms_array_int16",
    "create_rms",
    "SineWaveGenerator",
    "sine_wave",
    "create_sine_generator",
]
