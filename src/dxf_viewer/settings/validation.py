"""
Settings validation system for dxf_viewer.
"""

import logging
from typing import List, TYPE_CHECKING
from urllib.parse import urlparse

from .types import ConfigError, ValidationResult
from .viewer import parse_color

if TYPE_CHECKING:
    from .core import AppSettings

logger = logging.getLogger(__name__)

FONT_URL_SCHEMES = ("http", "https", "file", "")


class SettingsValidator:
    """Validates configuration settings."""

    def __init__(self, settings: "AppSettings"):
        self.settings = settings

    def validate(self) -> ValidationResult:
        """Validate current configuration."""
        errors: List[str] = []
        warnings: List[str] = []

        try:
            parse_color(self.settings.viewer.background_color)
        except ConfigError as e:
            errors.append(str(e))

        font_urls = self.settings.viewer.font_urls
        if not font_urls:
            warnings.append("No font URLs configured, text entities will not render")
        for url in font_urls:
            scheme = urlparse(url).scheme
            # Single letters are Windows drive names
            if scheme not in FONT_URL_SCHEMES and len(scheme) != 1:
                warnings.append(f"Unsupported font URL scheme '{scheme}': {url}")

        return ValidationResult(
            is_valid=len(errors) == 0, errors=errors, warnings=warnings
        )
