"""
Style management for dxf_viewer.

Loads the packaged Qt stylesheets used by the viewer overlay.
"""

import logging
from importlib import resources as importlib_resources
from typing import Optional

from PySide6.QtWidgets import QWidget


class StyleManager:
    """Loads and caches packaged stylesheets."""

    def __init__(self, package: str = "dxf_viewer.resources.styles"):
        """Initialize the style manager.

        Args:
            package: Package holding the .qss files
        """
        self.package = package
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self._loaded_styles: dict[str, str] = {}

    def load_style(self, style_name: str) -> Optional[str]:
        """Load a stylesheet from the styles package.

        Args:
            style_name: Name of the style file (without .qss extension)

        Returns:
            Stylesheet content or None if not found
        """
        if style_name in self._loaded_styles:
            return self._loaded_styles[style_name]

        style_file = importlib_resources.files(self.package) / f"{style_name}.qss"
        if not style_file.is_file():
            self.logger.warning(f"Style file not found: {style_name}.qss")
            return None

        content = style_file.read_text(encoding="utf-8")
        self._loaded_styles[style_name] = content
        self.logger.debug(f"Loaded stylesheet: {style_name}")
        return content

    def apply_style(self, widget: QWidget, style_name: str) -> bool:
        """Apply a stylesheet to a widget.

        Args:
            widget: Widget to apply style to
            style_name: Name of the style file

        Returns:
            True if style was applied successfully
        """
        style_content = self.load_style(style_name)
        if style_content:
            widget.setStyleSheet(style_content)
            return True
        return False


# Global style manager instance
style_manager = StyleManager()


def apply_style_class(widget: QWidget, class_name: str) -> None:
    """Apply a style class to a widget by setting its 'class' property.

    Selectors like QLabel[class="error-text"] in the QSS files match
    against this property.

    Args:
        widget: Widget to apply class to
        class_name: Class name used in QSS selectors
    """
    widget.setProperty("class", class_name)
    # Force style recalculation to apply new property
    widget.style().unpolish(widget)
    widget.style().polish(widget)
