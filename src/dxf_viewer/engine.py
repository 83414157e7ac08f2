"""
Contract of the external DXF rendering engine.

The viewer does not parse or render drawings itself. It drives an engine
object that satisfies DxfEngine and is built by an EngineFactory supplied
by the host application.
"""

import copy
from concurrent.futures import Executor, Future
from dataclasses import dataclass, field
from typing import Any, Callable, ClassVar, Optional, Protocol, runtime_checkable

from PySide6.QtWidgets import QWidget

ProgressCallback = Callable[[str, float, Optional[float]], None]
"""progress_cbk(phase, size, total_size) called by the engine during load."""

WorkerFactory = Callable[[], Executor]
"""Creates the executor the engine parses drawings on."""

EventHandler = Callable[[Any], None]


@runtime_checkable
class EngineCamera(Protocol):
    """Orthographic camera exposed by the engine."""

    left: float
    right: float
    top: float
    bottom: float


@runtime_checkable
class DxfEngine(Protocol):
    """Rendering engine consumed by the viewer widget."""

    @property
    def camera(self) -> Optional[EngineCamera]: ...

    def load(
        self,
        *,
        url: str,
        fonts: Optional[list[str]],
        progress_cbk: ProgressCallback,
        worker_factory: WorkerFactory,
    ) -> "Future[Any]": ...

    def clear(self) -> None: ...

    def destroy(self) -> None: ...

    def get_canvas(self) -> Optional[QWidget]: ...

    def subscribe(self, event_name: str, handler: EventHandler) -> None: ...

    def unsubscribe(self, event_name: str, handler: EventHandler) -> None: ...


@dataclass
class EngineOptions:
    """Options passed to the engine constructor.

    Attributes:
        clear_color: Background color as 0xRRGGBB
        auto_resize: Let the engine follow container size changes
        color_correction: Adjust entity colors for contrast with background
        scene_options: Nested scene options (e.g. wireframeMesh)
        extra: Unknown keys passed through to the engine as-is
    """

    clear_color: int = 0x000000
    auto_resize: bool = True
    color_correction: bool = True
    scene_options: dict[str, Any] = field(
        default_factory=lambda: {"wireframeMesh": True}
    )
    extra: dict[str, Any] = field(default_factory=dict)

    # Engine-facing key -> attribute name
    KEY_MAP: ClassVar[dict[str, str]] = {
        "clearColor": "clear_color",
        "autoResize": "auto_resize",
        "colorCorrection": "color_correction",
        "sceneOptions": "scene_options",
    }

    def to_dict(self) -> dict[str, Any]:
        """Return the engine-facing options mapping."""
        result = copy.deepcopy(self.extra)
        for key, attr in self.KEY_MAP.items():
            result[key] = copy.deepcopy(getattr(self, attr))
        return result

    def merged(self, overrides: Optional[dict[str, Any]]) -> "EngineOptions":
        """Return new options with a host options mapping deep-merged in.

        Args:
            overrides: Host options keyed by engine-facing names

        Returns:
            New EngineOptions; this instance is left unchanged
        """
        data = _deep_merge(self.to_dict(), overrides or {})
        values: dict[str, Any] = {}
        for key, attr in self.KEY_MAP.items():
            values[attr] = data.pop(key)
        return EngineOptions(extra=data, **values)


def _deep_merge(base: dict[str, Any], overrides: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge overrides into a copy of base."""
    result = copy.deepcopy(base)
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(result.get(key), dict):
            result[key] = _deep_merge(result[key], value)  # type: ignore[arg-type]
        else:
            result[key] = copy.deepcopy(value)
    return result


EngineFactory = Callable[[QWidget, EngineOptions], DxfEngine]
"""Builds an engine rendering into the given container widget."""
