"""Common types, configuration and exceptions for iconset-tools."""

from dataclasses import dataclass, field
from typing import List, Optional

# Shared metadata attached to every generated icon set
AUTHOR = "Font Awesome"
DEFAULT_HEIGHT = 32

# Inherit-current-color token used by the color normalizer
CURRENT_COLOR = "currentColor"

DEFAULT_OUTPUT_DIR = "dist"


@dataclass
class OptimizeConfig:
    """Configuration for the geometry/size optimization pass."""

    # Decimal places kept for coordinates
    precision: int = 3

    # Drop attributes that only restate the SVG default
    remove_default_attributes: bool = True

    def __post_init__(self):
        if self.precision < 0:
            raise ValueError(f"precision must be >= 0, got {self.precision}")


@dataclass
class SanitizeConfig:
    """Configuration for the per-icon sanitization pipeline."""

    # Color policy
    color_token: str = CURRENT_COLOR
    default_color: Optional[str] = CURRENT_COLOR

    # Surface cleanup chatter at WARNING instead of DEBUG
    verbose: bool = False

    optimize: OptimizeConfig = field(default_factory=OptimizeConfig)


@dataclass
class GenerateSetOptions:
    """Options for assembling a single icon set."""

    icons: List[str] = field(default_factory=list)
    output_filename: Optional[str] = None
    output_dir: str = DEFAULT_OUTPUT_DIR
    enable_logs: bool = True
    sanitize: SanitizeConfig = field(default_factory=SanitizeConfig)


@dataclass
class GenerateSetsOptions:
    """Options for assembling several icon sets in one run."""

    sets: List[str] = field(default_factory=list)
    output_dir: str = DEFAULT_OUTPUT_DIR
    enable_logs: bool = True
    sanitize: SanitizeConfig = field(default_factory=SanitizeConfig)


@dataclass
class AssemblyResult:
    """Outcome of persisting one icon set."""

    prefix: str
    count: int = 0
    target: str = ""
    size: int = 0
    failed: bool = False
    error: Optional[str] = None


class IconSetError(Exception):
    """Base exception for icon set generation errors."""

    pass


class InvalidIconError(IconSetError):
    """Raised when an icon cannot be cleaned into valid geometry."""

    def __init__(self, name: str, cause):
        self.name = name
        self.cause = cause
        super().__init__(f"Invalid icon '{name}': {cause}")


class SourceReadError(IconSetError):
    """Raised when an icon source cannot be enumerated."""

    pass


class PersistenceError(IconSetError):
    """Raised when an icon set cannot be written."""

    pass


class ConfigurationError(IconSetError):
    """Raised for invalid command-line arguments or option combinations."""

    pass
