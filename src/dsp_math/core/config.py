"""
Configuration management for dsp_math.

Describes filter, detector, RMS and signal generator setups as
dataclasses, with validation and JSON persistence.

Shift and attenuation values are not validated here: the primitives
clamp them into their safe range when they are built.
"""

import json
import logging
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)

_FILTER_RESPONSES = ("lowpass", "highpass")
_FILTER_VARIANTS = ("float", "fixed32", "fixed64", "fast_leaky")
_GOERTZEL_VARIANTS = ("float", "fixed64")
_RMS_VARIANTS = ("float", "int16")
_RMS_METHODS = ("standard", "optimized")


class ConfigValidationError(ValueError):
    """Raised when configuration values are invalid."""

    pass


@dataclass
class FilterConfig:
    """Configuration for a single-pole filter."""

    response: str = "highpass"  # "lowpass" or "highpass"
    variant: str = "fixed32"  # "float", "fixed32", "fixed64", "fast_leaky"
    cutoff: float = 0.004
    shift: Optional[int] = None  # None selects the variant default
    attenuation: int = 7  # fast_leaky only

    def __post_init__(self) -> None:
        """Validate configuration values after initialization."""
        self._validate()

    def _validate(self) -> None:
        """Validate all configuration fields."""
        if self.response not in _FILTER_RESPONSES:
            raise ConfigValidationError(
                f"Invalid response: {self.response}. Must be one of {_FILTER_RESPONSES}"
            )
        if self.variant not in _FILTER_VARIANTS:
            raise ConfigValidationError(
                f"Invalid variant: {self.variant}. Must be one of {_FILTER_VARIANTS}"
            )
        if self.response == "highpass" and self.variant == "fast_leaky":
            raise ConfigValidationError(
                "fast_leaky variant is only available as a lowpass filter"
            )
        if not (0.0 <= self.cutoff <= 1.0):
            raise ConfigValidationError(
                f"cutoff must be between 0 and 1, got {self.cutoff}"
            )


@dataclass
class GoertzelConfig:
    """Configuration for a Goertzel detector."""

    bin_index: float = 1.0
    size: int = 64
    variant: str = "float"  # "float" or "fixed64"
    shift: int = 18  # fixed64 only

    def __post_init__(self) -> None:
        """Validate configuration values after initialization."""
        self._validate()

    def _validate(self) -> None:
        """Validate all configuration fields."""
        if self.variant not in _GOERTZEL_VARIANTS:
            raise ConfigValidationError(
                f"Invalid variant: {self.variant}. Must be one of {_GOERTZEL_VARIANTS}"
            )
        if self.size <= 0:
            raise ConfigValidationError(f"size must be positive, got {self.size}")
        if not (0 <= self.bin_index <= self.size / 2):
            raise ConfigValidationError(
                f"bin_index must be between 0 and size/2, got {self.bin_index}"
            )


@dataclass
class RMSConfig:
    """Configuration for an RMS accumulator."""

    variant: str = "int16"  # "float" or "int16"
    method: str = "optimized"  # int16 only: "standard" or "optimized"

    def __post_init__(self) -> None:
        """Validate configuration values after initialization."""
        if self.variant not in _RMS_VARIANTS:
            raise ConfigValidationError(
                f"Invalid variant: {self.variant}. Must be one of {_RMS_VARIANTS}"
            )
        if self.method not in _RMS_METHODS:
            raise ConfigValidationError(
                f"Invalid method: {self.method}. Must be one of {_RMS_METHODS}"
            )


@dataclass
class SineConfig:
    """Configuration for the sine wave test signal."""

    freq: float = 1.0
    phase: float = 0.0
    amplitude: float = 1000.0
    offset: float = 0.0
    points: int = 64

    def __post_init__(self) -> None:
        """Validate configuration values after initialization."""
        if self.points <= 0:
            raise ConfigValidationError(f"points must be positive, got {self.points}")


@dataclass
class DSPMathConfig:
    """Main configuration container."""

    highpass: FilterConfig = field(default_factory=FilterConfig)
    lowpass: FilterConfig = field(
        default_factory=lambda: FilterConfig(
            response="lowpass", variant="fixed32", cutoff=0.0051
        )
    )
    goertzel: GoertzelConfig = field(default_factory=GoertzelConfig)
    rms: RMSConfig = field(default_factory=RMSConfig)
    sine: SineConfig = field(default_factory=SineConfig)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DSPMathConfig":
        """Create configuration from dictionary."""
        config = cls()

        if "highpass" in data:
            config.highpass = FilterConfig(**data["highpass"])
        if "lowpass" in data:
            config.lowpass = FilterConfig(**data["lowpass"])
        if "goertzel" in data:
            config.goertzel = GoertzelConfig(**data["goertzel"])
        if "rms" in data:
            config.rms = RMSConfig(**data["rms"])
        if "sine" in data:
            config.sine = SineConfig(**data["sine"])

        return config

    def save(self, path: str) -> bool:
        """Save configuration to JSON file.

        Args:
            path: File path to save configuration to

        Returns:
            True if saved successfully, False otherwise
        """
        try:
            with open(path, "w") as f:
                json.dump(self.to_dict(), f, indent=2)
            logger.info(f"Configuration saved to {path}")
            return True
        except OSError as e:
            logger.error(f"Failed to save configuration to {path}: {e}")
            return False
        except (TypeError, ValueError) as e:
            logger.error(f"Failed to serialize configuration: {e}")
            return False

    @classmethod
    def load(cls, path: str) -> Optional["DSPMathConfig"]:
        """Load configuration from JSON file.

        Args:
            path: File path to load configuration from

        Returns:
            DSPMathConfig instance or None if loading failed
        """
        try:
            with open(path, "r") as f:
                data = json.load(f)
            config = cls.from_dict(data)
            logger.info(f"Configuration loaded from {path}")
            return config
        except FileNotFoundError:
            logger.warning(f"Configuration file not found: {path}")
            return None
        except json.JSONDecodeError as e:
            logger.error(f"Invalid JSON in configuration file {path}: {e}")
            return None
        except OSError as e:
            logger.error(f"Failed to read configuration from {path}: {e}")
            return None
        except (KeyError, TypeError, ValueError) as e:
            logger.error(f"Invalid configuration format in {path}: {e}")
            return None

    @classmethod
    def get_default_config_path(cls) -> Path:
        """Get default configuration file path."""
        config_dir = Path.home() / ".config" / "dsp_math"
        config_dir.mkdir(parents=True, exist_ok=True)
        return config_dir / "config.json"

    def save_default(self) -> None:
        """Save to default configuration path."""
        self.save(str(self.get_default_config_path()))

    @classmethod
    def load_default(cls) -> "DSPMathConfig":
        """Load from default configuration path, or create new if not found or invalid."""
        path = cls.get_default_config_path()
        if path.exists():
            config = cls.load(str(path))
            if config is not None:
                return config
            logger.warning("Using default configuration due to load failure")
        return cls()


# Preset setups taken from the reference board examples
PRESETS: Dict[str, DSPMathConfig] = {}


def create_preset_dc_blocker() -> DSPMathConfig:
    """DC removal of an ADC channel with 32-bit fixed math."""
    config = DSPMathConfig()
    config.highpass = FilterConfig(
        response="highpass", variant="fixed32", cutoff=0.004, shift=15
    )
    return config


def create_preset_dc_blocker_extended() -> DSPMathConfig:
    """DC removal with 64-bit registers and the finest shift."""
    config = DSPMathConfig()
    config.highpass = FilterConfig(
        response="highpass", variant="fixed64", cutoff=0.004, shift=30
    )
    return config


def create_preset_low_pass() -> DSPMathConfig:
    """Smoothing of a slowly varying signal with 32-bit fixed math."""
    config = DSPMathConfig()
    config.lowpass = FilterConfig(
        response="lowpass", variant="fixed32", cutoff=0.0051, shift=9
    )
    return config


def create_preset_low_pass_extended() -> DSPMathConfig:
    """Smoothing with 64-bit registers."""
    config = DSPMathConfig()
    config.lowpass = FilterConfig(
        response="lowpass", variant="fixed64", cutoff=0.0051, shift=20
    )
    return config


def create_preset_leaky_low_pass() -> DSPMathConfig:
    """Multiply-free smoothing."""
    config = DSPMathConfig()
    config.lowpass = FilterConfig(
        response="lowpass", variant="fast_leaky", attenuation=7
    )
    return config


def create_preset_goertzel_64() -> DSPMathConfig:
    """Fundamental detection over a 64-point window with fixed math."""
    config = DSPMathConfig()
    config.goertzel = GoertzelConfig(bin_index=1, size=64, variant="fixed64", shift=18)
    return config


# Register presets
PRESETS["dc_blocker"] = create_preset_dc_blocker()
PRESETS["dc_blocker_extended"] = create_preset_dc_blocker_extended()
PRESETS["low_pass"] = create_preset_low_pass()
PRESETS["low_pass_extended"] = create_preset_low_pass_extended()
PRESETS["leaky_low_pass"] = create_preset_leaky_low_pass()
PRESETS["goertzel_64"] = create_preset_goertzel_64()


def get_preset(name: str) -> Optional[DSPMathConfig]:
    """Get a preset configuration by name."""
    return PRESETS.get(name)


def list_presets() -> List[str]:
    """List available preset names."""
    return list(PRESETS.keys())
