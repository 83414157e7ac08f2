"""
Core settings management for dxf_viewer.
"""

import logging
from pathlib import Path
from typing import Any, List, Optional

from PySide6.QtCore import QSettings

from ..engine import EngineOptions
from .types import ConfigVersion, ValidationResult
from .migration import SettingsMigrator
from .validation import SettingsValidator
from .viewer import ViewerSettings
from .logging import LoggingSettings

logger = logging.getLogger(__name__)


class AppSettings:
    """
    Configuration management using QSettings.

    Provides type-safe access to viewer settings with automatic
    cross-platform storage and validation.
    """

    def __init__(self, profile: str = "default"):
        """Initialize settings with organization, application name, and profile.

        Args:
            profile: Settings profile name (default: "default")
        """
        self.settings = QSettings("dxf_viewer", "dxf_viewer")
        self.profile = profile

        # Use profile as a group: dxf_viewer/dxf_viewer/default/...
        self.settings.beginGroup(profile)

        self._migrator = SettingsMigrator(self.settings)
        self._validator = SettingsValidator(self)
        self._viewer = ViewerSettings(self.settings)
        self._logging = LoggingSettings(self.settings)

        self._migrator.ensure_version()

        logger.debug(
            f"Settings initialized for profile '{profile}', stored at: {self.settings.fileName()}"
        )

    # === SUBSYSTEM ACCESS ===

    @property
    def viewer(self) -> ViewerSettings:
        """Access viewer settings subsystem."""
        return self._viewer

    @property
    def logging(self) -> LoggingSettings:
        """Access logging settings subsystem."""
        return self._logging

    @property
    def version(self) -> str:
        """Get configuration version."""
        value = self.settings.value("app/version", ConfigVersion.CURRENT.value)
        return str(value)

    # === VIEWER SETTINGS (DELEGATED) ===

    @property
    def font_urls(self) -> List[str]:
        """Get list of font URLs."""
        return self._viewer.font_urls

    @font_urls.setter
    def font_urls(self, value: List[str]) -> None:
        """Set list of font URLs."""
        self._viewer.font_urls = value

    def engine_options(self, overrides: Optional[dict[str, Any]] = None) -> EngineOptions:
        """Build engine options from settings with host overrides merged in."""
        return self._viewer.engine_options().merged(overrides)

    # === LOGGING SETTINGS (DELEGATED) ===

    @property
    def console_logging(self) -> bool:
        """Check if console logging is enabled."""
        return self._logging.console_logging

    @console_logging.setter
    def console_logging(self, value: bool) -> None:
        """Set console logging enabled state."""
        self._logging.console_logging = value

    @property
    def console_log_level(self) -> str:
        """Get console logging level."""
        return self._logging.console_log_level

    @console_log_level.setter
    def console_log_level(self, value: str) -> None:
        """Set console logging level."""
        self._logging.console_log_level = value

    @property
    def console_use_colors(self) -> bool:
        """Check if console should use colors."""
        return self._logging.console_use_colors

    @property
    def file_logging(self) -> bool:
        """Check if file logging is enabled."""
        return self._logging.file_logging

    @file_logging.setter
    def file_logging(self, value: bool) -> None:
        """Set file logging enabled state."""
        self._logging.file_logging = value

    @property
    def log_file_path(self) -> str:
        """Get log file path (read-only)."""
        return self._logging.log_file_path

    @property
    def log_file_absolute_path(self) -> Path:
        """Get absolute path to log file."""
        return self._logging.log_file_absolute_path

    # === VALIDATION ===

    def validate(self) -> ValidationResult:
        """Validate current configuration."""
        return self._validator.validate()

    # === UTILITY METHODS ===

    def get_settings_file_path(self) -> str:
        """Get the file path where settings are stored."""
        return self.settings.fileName()

    def sync(self) -> None:
        """Force synchronization of settings to storage."""
        self.settings.sync()
