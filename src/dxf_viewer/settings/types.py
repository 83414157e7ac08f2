"""
Configuration versions, errors and validation results for dxf_viewer settings.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List


class ConfigVersion(Enum):
    """Stored configuration layout.

    1.0 kept the engine background as an integer under viewer/clear_color.
    1.1 stores a color string under viewer/background_color.
    """
    V1_0 = "1.0"
    V1_1 = "1.1"
    CURRENT = V1_1


# Keys replaced by the 1.0 -> 1.1 migration: old key -> new key
V1_0_RENAMED_KEYS = {
    "viewer/clear_color": "viewer/background_color",
}


class ConfigError(Exception):
    """Raised for setting values the viewer cannot use (e.g. unparsable colors)."""


@dataclass
class ValidationResult:
    """Outcome of SettingsValidator.validate().

    Errors make the configuration unusable; warnings (missing fonts,
    unsupported font URL schemes) only degrade rendering.
    """
    is_valid: bool
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def messages(self) -> List[str]:
        """Errors followed by warnings, for logging at startup."""
        return self.errors + self.warnings
