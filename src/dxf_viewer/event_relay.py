"""Event relay between the engine and the viewer widget.

Republishes a fixed set of engine events under namespaced names, one
outward event per engine event, payload untouched.
"""

import logging
from typing import Any, Callable, Optional

from PySide6.QtCore import QObject, Signal

from .engine import DxfEngine

EVENT_PREFIX = "dxf-"

RELAYED_EVENTS: dict[str, str] = {
    name: EVENT_PREFIX + name
    for name in (
        "loaded",
        "cleared",
        "destroyed",
        "resized",
        "pointerdown",
        "pointerup",
        "viewChanged",
        "message",
    )
}
"""Engine event name -> outward event name."""


class EventRelay(QObject):
    """Subscribes to engine events and re-emits them as a Qt signal."""

    relayed = Signal(str, object)

    def __init__(self, parent: Optional[QObject] = None) -> None:
        super().__init__(parent)
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self._engine: Optional[DxfEngine] = None
        self._handlers: dict[str, Callable[[Any], None]] = {}

    @property
    def is_attached(self) -> bool:
        """Check if the relay is subscribed to an engine."""
        return self._engine is not None

    def attach(self, engine: DxfEngine) -> None:
        """Subscribe once to every relayed engine event.

        Args:
            engine: Engine to listen to
        """
        if self._engine is not None:
            self.logger.warning("Event relay is already attached, ignoring")
            return

        self._engine = engine
        for engine_name, outward_name in RELAYED_EVENTS.items():
            handler = self._make_handler(outward_name)
            self._handlers[engine_name] = handler
            engine.subscribe(engine_name, handler)
        self.logger.debug(f"Subscribed to {len(self._handlers)} engine events")

    def detach(self) -> None:
        """Unsubscribe from all engine events."""
        engine = self._engine
        if engine is None:
            return

        self._engine = None
        handlers = self._handlers
        self._handlers = {}
        for engine_name, handler in handlers.items():
            engine.unsubscribe(engine_name, handler)
        self.logger.debug("Unsubscribed from engine events")

    def _make_handler(self, outward_name: str) -> Callable[[Any], None]:
        def handler(payload: Any = None) -> None:
            # Engines may still hold the handler after detach
            if self._engine is None:
                return
            self.relayed.emit(outward_name, payload)

        return handler
