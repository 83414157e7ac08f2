"""
Settings package for dxf_viewer.

This package provides a type-safe configuration layer using Qt's
QSettings for cross-platform storage.

Usage:
    from dxf_viewer.settings import AppSettings

    settings = AppSettings()
    options = settings.engine_options({"clearColor": 0xFFFFFF})
"""

from .core import AppSettings
from .types import ConfigVersion, ConfigError, ValidationResult
from .viewer import ViewerSettings, parse_color
from .logging import LoggingSettings

__all__ = [
    "AppSettings",
    "ConfigVersion",
    "ConfigError",
    "ValidationResult",
    "ViewerSettings",
    "LoggingSettings",
    "parse_color",
]
