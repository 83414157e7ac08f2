"""Embeddable DXF viewer widget.

This module provides DxfViewerWidget, which hosts an external rendering
engine and exposes loading state, errors, pointer coordinates and engine
events to the host application.
"""

import logging
import weakref
from concurrent.futures import Executor, ThreadPoolExecutor
from typing import Any, Optional

from PySide6.QtCore import Signal
from PySide6.QtWidgets import QVBoxLayout, QWidget

from ..coord_transformer import CoordinateMapper
from ..engine import DxfEngine, EngineFactory, EngineOptions, WorkerFactory
from ..event_relay import EVENT_PREFIX, RELAYED_EVENTS, EventRelay
from ..load_controller import LoadController, ViewerError
from ..models import CameraBounds, LoadState, PointerCoordinate
from ..settings import AppSettings
from .events import ViewerEventHandlers
from .overlay import ViewerOverlay


class DxfViewerWidget(ViewerEventHandlers, QWidget):
    """Widget hosting a DXF rendering engine.

    The engine is created when the widget is constructed and released by
    shutdown() (also called on close). Engine events are re-emitted through
    engineEvent under "dxf-" prefixed names.
    """

    engineEvent = Signal(str, object)
    coordinateUpdated = Signal(object)
    stateChanged = Signal(object)

    def __init__(
        self,
        engine_factory: EngineFactory,
        settings: Optional[AppSettings] = None,
        options: Optional[dict[str, Any]] = None,
        fonts: Optional[list[str]] = None,
        worker_factory: Optional[WorkerFactory] = None,
        parent: Optional[QWidget] = None,
    ):
        """Initialize the viewer and construct its engine.

        Args:
            engine_factory: Builds the engine for a container widget
            settings: Application settings providing option and font defaults
            options: Engine options overriding the settings (engine key names)
            fonts: Font URLs; defaults to the configured font URLs
            worker_factory: Creates the parsing executor; defaults to create_worker()
            parent: Parent widget
        """
        super().__init__(parent)

        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self.settings = settings

        self._engine_factory = engine_factory
        self._options: dict[str, Any] = dict(options or {})
        if fonts is None and settings is not None:
            fonts = settings.font_urls
        self._fonts: Optional[list[str]] = list(fonts) if fonts is not None else None
        self._url: Optional[str] = None
        self._workers: "weakref.WeakSet[Executor]" = weakref.WeakSet()

        if settings is not None:
            for message in settings.validate().messages:
                self.logger.warning(f"Settings: {message}")

        # Engine renders into the container, overlay sits on top
        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        self.canvas_container = QWidget(self)
        self._container_layout = QVBoxLayout(self.canvas_container)
        self._container_layout.setContentsMargins(0, 0, 0, 0)
        layout.addWidget(self.canvas_container)

        self.overlay = ViewerOverlay(self)

        self.mapper = CoordinateMapper()

        self.relay = EventRelay(self)
        self.relay.relayed.connect(self._on_engine_event)

        self.load_controller = LoadController(
            self.get_engine, worker_factory or self.create_worker, self
        )
        self.load_controller.state_changed.connect(self._on_state_changed)
        self.load_controller.loaded.connect(self._on_loaded)

        self._engine: Optional[DxfEngine] = None
        self._canvas: Optional[QWidget] = None
        self._create_engine()

        self.logger.debug("Viewer widget initialized")

    # === ENGINE LIFECYCLE ===

    def engine_options(self) -> EngineOptions:
        """Engine options: settings defaults with the host options merged in."""
        if self.settings is not None:
            return self.settings.engine_options(self._options)
        return EngineOptions().merged(self._options)

    def _create_engine(self) -> None:
        options = self.engine_options()
        self._engine = self._engine_factory(self.canvas_container, options)
        self.relay.attach(self._engine)

        canvas = self._engine.get_canvas()
        if canvas is not None:
            if self._container_layout.indexOf(canvas) < 0:
                self._container_layout.addWidget(canvas)
            canvas.setMouseTracking(True)
            canvas.installEventFilter(self)
        self._canvas = canvas
        self.overlay.raise_()
        self.logger.info(f"Engine created with options: {options.to_dict()}")

    def get_engine(self) -> Optional[DxfEngine]:
        """Return the live engine, or None after shutdown."""
        return self._engine

    def create_worker(self) -> Executor:
        """Create the executor the engine parses drawings on."""
        worker = ThreadPoolExecutor(max_workers=1, thread_name_prefix="dxf-parser")
        self._workers.add(worker)
        return worker

    def shutdown(self) -> None:
        """Release the engine and stop relaying its events.

        Safe to call more than once. Errors raised by the engine while it
        is destroyed propagate to the caller.
        """
        engine = self._engine
        if engine is None:
            return

        self._engine = None
        self.load_controller.invalidate()
        if self._canvas is not None:
            self._canvas.removeEventFilter(self)
            self._container_layout.removeWidget(self._canvas)
            self._canvas = None
        try:
            engine.destroy()
        except Exception:
            self.logger.exception("Engine failed to shut down")
            raise
        finally:
            self.relay.detach()
            self.mapper.reset()
            for worker in list(self._workers):
                worker.shutdown(wait=False)
        self.logger.info("Engine destroyed")

    def restart_engine(self) -> None:
        """Recreate the engine with the current options and reload the document."""
        url = self._url
        self.shutdown()
        self._create_engine()
        if url is not None:
            self._start_load(url)

    # === INPUTS ===

    @property
    def url(self) -> Optional[str]:
        """Current document URL."""
        return self._url

    def set_url(self, url: Optional[str]) -> None:
        """Load a document, or clear the view when url is None."""
        self._url = url
        if url is None:
            self.clear()
        else:
            self._start_load(url)

    def reload(self) -> None:
        """Load the current document again."""
        if self._url is not None:
            self._start_load(self._url)

    def clear(self) -> None:
        """Clear the scene and reset loading state."""
        self._url = None
        self.load_controller.clear()
        self.mapper.reset()
        self.overlay.set_coordinate(None)

    @property
    def fonts(self) -> Optional[list[str]]:
        """Font URLs used for the next load."""
        return self._fonts

    def set_fonts(self, fonts: Optional[list[str]]) -> None:
        """Set font URLs used for the next load."""
        self._fonts = list(fonts) if fonts is not None else None

    @property
    def options(self) -> dict[str, Any]:
        """Host engine options."""
        return dict(self._options)

    def set_options(self, options: Optional[dict[str, Any]]) -> None:
        """Set host engine options, applied by restart_engine()."""
        self._options = dict(options or {})

    def _start_load(self, url: str) -> None:
        if self._engine is None:
            raise ViewerError("Viewer has been shut down")
        self.load_controller.load(url, self._fonts)

    # === PRESENTATION STATE ===

    @property
    def load_state(self) -> LoadState:
        """Current load state snapshot."""
        return self.load_controller.state

    @property
    def is_loading(self) -> bool:
        return self.load_state.is_loading

    @property
    def progress(self) -> Optional[float]:
        return self.load_state.progress

    @property
    def progress_indeterminate(self) -> bool:
        return self.load_state.progress_indeterminate

    @property
    def progress_label(self) -> Optional[str]:
        return self.load_state.progress_label

    @property
    def error(self) -> Optional[str]:
        return self.load_state.error

    @property
    def coordinate(self) -> Optional[PointerCoordinate]:
        """Last pointer coordinate in world units."""
        return self.mapper.coordinate

    # === REACTIONS ===

    def handle_pointer_move(self, x: float, y: float) -> Optional[PointerCoordinate]:
        """Map a pointer position over the canvas and publish it.

        Args:
            x: Pointer X in canvas pixels
            y: Pointer Y in canvas pixels

        Returns:
            Mapped coordinate, or None if the update was skipped
        """
        viewport = self._canvas if self._canvas is not None else self.canvas_container
        coordinate = self.mapper.map_pointer(x, y, viewport.width(), viewport.height())
        if coordinate is None:
            return None
        self.overlay.set_coordinate(coordinate)
        self.coordinateUpdated.emit(coordinate)
        return coordinate

    def refresh_bounds(self) -> None:
        """Re-read camera bounds from the engine."""
        if self._engine is None:
            return
        self.mapper.set_bounds(CameraBounds.from_camera(self._engine.camera))

    def _on_engine_event(self, name: str, payload: Any) -> None:
        if self.settings is not None and self.settings.logging.should_trace(
            name.removeprefix(EVENT_PREFIX)
        ):
            self.logger.debug(f"Engine event {name}: {payload!r}")
        if name == RELAYED_EVENTS["resized"]:
            self.refresh_bounds()
        self.engineEvent.emit(name, payload)

    def _on_loaded(self, bounds: Optional[CameraBounds]) -> None:
        self.mapper.set_bounds(bounds)
        self.overlay.set_coordinate(self.mapper.seed_center())

    def _on_state_changed(self, state: LoadState) -> None:
        self.overlay.update_state(state)
        self.stateChanged.emit(state)
