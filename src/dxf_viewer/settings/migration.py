"""
Settings migration system for dxf_viewer.
"""

import logging
from typing import TYPE_CHECKING

from .types import V1_0_RENAMED_KEYS, ConfigVersion

if TYPE_CHECKING:
    from PySide6.QtCore import QSettings

logger = logging.getLogger(__name__)


class SettingsMigrator:
    """Handles configuration migration between versions."""

    def __init__(self, settings: "QSettings"):
        self.settings = settings

    def ensure_version(self) -> None:
        """Ensure configuration version is set and handle migrations."""
        current_version = str(self.settings.value("app/version", ""))

        if not current_version:
            self.settings.setValue("app/version", ConfigVersion.CURRENT.value)
            self.settings.sync()
            logger.info("First run detected, initializing configuration")
        elif current_version != ConfigVersion.CURRENT.value:
            self._migrate_config(current_version, ConfigVersion.CURRENT.value)

    def _migrate_config(self, from_version: str, to_version: str) -> None:
        """Migrate configuration from old version to new version."""
        logger.info(f"Migrating configuration from {from_version} to {to_version}")

        if from_version == ConfigVersion.V1_0.value:
            self._migrate_1_0_to_1_1()

        self.settings.setValue("app/version", to_version)
        self.settings.setValue("app/migrated_from", from_version)
        self.settings.sync()
        logger.info(f"Migration from {from_version} to {to_version} completed")

    def _migrate_1_0_to_1_1(self) -> None:
        """Migrate from version 1.0 to 1.1 - integer clear color to color string."""
        old_key = "viewer/clear_color"
        new_key = V1_0_RENAMED_KEYS[old_key]
        old_value = self.settings.value(old_key, None)
        if old_value is None:
            return

        try:
            color = int(str(old_value), 0)
        except ValueError:
            logger.warning(f"Dropped unreadable clear color: {old_value}")
        else:
            color_text = f"#{color & 0xFFFFFF:06x}"
            self.settings.setValue(new_key, color_text)
            logger.info(f"Migrated clear color {old_value} -> {color_text}")

        self.settings.remove(old_key)
