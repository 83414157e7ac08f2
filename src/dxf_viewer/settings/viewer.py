"""
Viewer-related settings for dxf_viewer.

These values provide the defaults for the options the engine is built with.
"""

import logging
from typing import TYPE_CHECKING, Any, List, cast

import orjson
from PIL import ImageColor

from ..engine import EngineOptions
from .types import ConfigError

if TYPE_CHECKING:
    from PySide6.QtCore import QSettings

logger = logging.getLogger(__name__)

DEFAULT_BACKGROUND_COLOR = "#000000"


def parse_color(value: str) -> int:
    """Convert a color string to 0xRRGGBB.

    Accepts anything Pillow's ImageColor understands: "#rgb", "#rrggbb",
    "rgb(...)", "hsl(...)" and named colors.

    Raises:
        ConfigError: If the color cannot be parsed
    """
    try:
        rgb = ImageColor.getrgb(value)
    except ValueError as e:
        raise ConfigError(f"Invalid color: {value!r}") from e
    red, green, blue = rgb[:3]
    return (red << 16) | (green << 8) | blue


class ViewerSettings:
    """Manages viewer and engine option settings."""

    def __init__(self, settings: "QSettings"):
        self.settings = settings

    def _get_str(self, key: str, default: str = "") -> str:
        """Type-safe string retrieval from settings."""
        value = self.settings.value(key, default)
        return str(value) if value is not None else default

    def _get_bool(self, key: str, default: bool = False) -> bool:
        """Type-safe boolean retrieval from settings."""
        value = self.settings.value(key, default)
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            return value.lower() in ("true", "1", "yes")
        return bool(value) if value is not None else default

    # === ENGINE OPTIONS ===

    @property
    def background_color(self) -> str:
        """Get background color string."""
        return self._get_str("viewer/background_color", DEFAULT_BACKGROUND_COLOR)

    @background_color.setter
    def background_color(self, value: str) -> None:
        """Set background color string (validated before storing)."""
        parse_color(value)
        self.settings.setValue("viewer/background_color", value)
        self.settings.sync()

    @property
    def clear_color(self) -> int:
        """Get background color as 0xRRGGBB, falling back to black."""
        try:
            return parse_color(self.background_color)
        except ConfigError as e:
            logger.warning(f"{e}, using {DEFAULT_BACKGROUND_COLOR}")
            return parse_color(DEFAULT_BACKGROUND_COLOR)

    @property
    def auto_resize(self) -> bool:
        """Check if the engine should follow container resizes."""
        return self._get_bool("viewer/auto_resize", True)

    @auto_resize.setter
    def auto_resize(self, value: bool) -> None:
        """Set auto resize."""
        self.settings.setValue("viewer/auto_resize", value)
        self.settings.sync()

    @property
    def color_correction(self) -> bool:
        """Check if entity colors are corrected against the background."""
        return self._get_bool("viewer/color_correction", True)

    @color_correction.setter
    def color_correction(self, value: bool) -> None:
        """Set color correction."""
        self.settings.setValue("viewer/color_correction", value)
        self.settings.sync()

    @property
    def wireframe_mesh(self) -> bool:
        """Check if meshes are rendered as wireframe."""
        return self._get_bool("viewer/wireframe_mesh", True)

    @wireframe_mesh.setter
    def wireframe_mesh(self, value: bool) -> None:
        """Set wireframe mesh rendering."""
        self.settings.setValue("viewer/wireframe_mesh", value)
        self.settings.sync()

    @property
    def scene_options(self) -> dict[str, Any]:
        """Get additional scene options stored as JSON."""
        raw = self._get_str("viewer/scene_options", "")
        if not raw:
            return {}
        try:
            data = orjson.loads(raw)
        except orjson.JSONDecodeError:
            logger.warning(f"Ignoring malformed scene options: {raw!r}")
            return {}
        if not isinstance(data, dict):
            logger.warning(f"Scene options must be an object, got: {raw!r}")
            return {}
        return cast(dict[str, Any], data)

    @scene_options.setter
    def scene_options(self, value: dict[str, Any]) -> None:
        """Set additional scene options."""
        self.settings.setValue("viewer/scene_options", orjson.dumps(value).decode("utf-8"))
        self.settings.sync()

    # === FONTS ===

    @property
    def font_urls(self) -> List[str]:
        """Get list of font URLs in fallback order."""
        value = self.settings.value("viewer/font_urls", [])
        if value is None:
            return []
        # QSettings returns a plain string for single-element lists
        if isinstance(value, str):
            return [value] if value else []
        return [str(item) for item in cast(List[Any], value)]

    @font_urls.setter
    def font_urls(self, value: List[str]) -> None:
        """Set list of font URLs."""
        self.settings.setValue("viewer/font_urls", list(value))
        self.settings.sync()

    def engine_options(self) -> EngineOptions:
        """Build engine options from the stored settings."""
        scene_options: dict[str, Any] = {"wireframeMesh": self.wireframe_mesh}
        scene_options.update(self.scene_options)
        return EngineOptions(
            clear_color=self.clear_color,
            auto_resize=self.auto_resize,
            color_correction=self.color_correction,
            scene_options=scene_options,
        )
