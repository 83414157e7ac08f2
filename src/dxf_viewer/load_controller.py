"""
Load controller for the DXF viewer.

Owns LoadState and drives one logical load at a time. Engine callbacks may
arrive on any thread; they are routed through Qt signals so every state
commit happens on the thread that owns the controller.
"""

import logging
from concurrent.futures import CancelledError, Future
from typing import Any, Callable, Optional

from PySide6.QtCore import QObject, Signal

from .engine import DxfEngine, WorkerFactory
from .models import CameraBounds, LoadState
from .progress import ProgressAggregator


class ViewerError(Exception):
    """Raised when the viewer is used in a state that does not allow it."""


class LoadController(QObject):
    """Drives engine loads and keeps LoadState consistent.

    Every load gets a generation number. Callbacks carry the generation of
    the load that produced them and are dropped if a later load() or
    clear() has happened since.
    """

    state_changed = Signal(object)
    loaded = Signal(object)
    failed = Signal(str)

    # Cross-thread delivery of engine callbacks
    _progress_received = Signal(int, str, object, object)
    _load_settled = Signal(int, object)

    def __init__(
        self,
        engine_getter: Callable[[], Optional[DxfEngine]],
        worker_factory: WorkerFactory,
        parent: Optional[QObject] = None,
    ) -> None:
        """Initialize the load controller.

        Args:
            engine_getter: Returns the live engine or None once released
            worker_factory: Passed to the engine to create its parsing executor
            parent: Parent QObject
        """
        super().__init__(parent)
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self._engine_getter = engine_getter
        self._worker_factory = worker_factory
        self._aggregator = ProgressAggregator()
        self._generation = 0
        self._state = LoadState()

        self._progress_received.connect(self._on_progress)
        self._load_settled.connect(self._on_settled)

    @property
    def state(self) -> LoadState:
        """Current load state snapshot."""
        return self._state

    @property
    def generation(self) -> int:
        """Generation number of the most recent load or clear."""
        return self._generation

    def load(
        self,
        url: str,
        fonts: Optional[list[str]] = None,
        options: Optional[dict[str, Any]] = None,
    ) -> int:
        """Start loading a document.

        Args:
            url: Document URL or path
            fonts: Font URLs used for text rendering
            options: Extra keyword arguments forwarded to engine.load()

        Returns:
            Generation number assigned to this load

        Raises:
            ValueError: If url is None
            ViewerError: If the engine has been released
        """
        if url is None:
            raise ValueError("Document URL must not be None")
        engine = self._engine_getter()
        if engine is None:
            raise ViewerError("Cannot load a document: engine is not available")

        self._generation += 1
        generation = self._generation
        self._commit(generation, LoadState(is_loading=True))
        self.logger.info(f"Loading document [{generation}]: {url}")

        def progress_cbk(phase: str, size: float, total_size: Optional[float]) -> None:
            self._progress_received.emit(generation, phase, size, total_size)

        try:
            future = engine.load(
                url=url,
                fonts=fonts,
                progress_cbk=progress_cbk,
                worker_factory=self._worker_factory,
                **(options or {}),
            )
        except Exception as e:
            self._settle(generation, e)
            return generation

        future.add_done_callback(lambda f: self._load_settled.emit(generation, f))
        return generation

    def clear(self) -> None:
        """Reset state and clear the engine scene.

        In-flight engine work is not aborted; its late callbacks are dropped.
        """
        self._generation += 1
        self._commit(self._generation, LoadState())
        engine = self._engine_getter()
        if engine is not None:
            engine.clear()
        self.logger.debug(f"Cleared [{self._generation}]")

    def invalidate(self) -> None:
        """Drop any in-flight load and reset state without touching the engine."""
        self._generation += 1
        self._commit(self._generation, LoadState())

    def _on_progress(
        self, generation: int, phase: str, size: float, total_size: Optional[float]
    ) -> None:
        # Progress after settlement would leave fields set on an idle state
        if generation != self._generation or not self._state.is_loading:
            return
        self._commit(
            generation,
            self._aggregator.on_progress(self._state, phase, size, total_size),
        )

    def _on_settled(self, generation: int, future: "Future[Any]") -> None:
        error: Optional[BaseException] = None
        try:
            future.result()
        except CancelledError:
            error = CancelledError("Load cancelled")
        except Exception as e:
            error = e
        self._settle(generation, error)

    def _settle(self, generation: int, error: Optional[BaseException]) -> None:
        """Apply the outcome of a load and run the finalizer."""
        if generation != self._generation:
            self.logger.debug(
                f"Discarding stale load result [{generation}], current is [{self._generation}]"
            )
            return

        error_text: Optional[str] = None
        if error is None:
            engine = self._engine_getter()
            bounds = CameraBounds.from_camera(engine.camera) if engine else None
            self.logger.info(f"Document loaded [{generation}], bounds: {bounds}")
            self.loaded.emit(bounds)
        else:
            error_text = str(error) or error.__class__.__name__
            self.logger.error(f"Failed to load document [{generation}]: {error_text}")

        # A slot connected to loaded may have started another load
        if generation != self._generation:
            return
        self._commit(generation, LoadState(error=error_text))
        if error_text is not None:
            self.failed.emit(error_text)

    def _commit(self, generation: int, state: LoadState) -> None:
        """Replace the state snapshot if the generation is still current."""
        if generation != self._generation:
            return
        if state == self._state:
            return
        self._state = state
        self.state_changed.emit(state)
