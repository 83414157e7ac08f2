"""Shared fixtures for dxf_viewer tests."""

import os
from collections import defaultdict
from concurrent.futures import Future
from dataclasses import dataclass
from typing import Any, Callable, Optional

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PySide6.QtWidgets import QApplication, QWidget  # noqa: E402

from dxf_viewer.engine import EngineOptions  # noqa: E402


@pytest.fixture(scope="session", autouse=True)
def qapp() -> QApplication:
    """Single offscreen QApplication for the test session."""
    app = QApplication.instance()
    if app is None:
        app = QApplication([])
    return app  # type: ignore[return-value]


@dataclass
class FakeCamera:
    left: float
    right: float
    top: float
    bottom: float


@dataclass
class LoadCall:
    url: str
    fonts: Optional[list[str]]
    progress_cbk: Callable[[str, float, Optional[float]], None]
    worker_factory: Callable[[], Any]
    future: "Future[Any]"


class FakeEngine:
    """In-process engine whose loads are settled by the test."""

    def __init__(self, container: Optional[QWidget], options: EngineOptions):
        self.container = container
        self.options = options
        self.camera: Optional[FakeCamera] = None
        self.next_camera = FakeCamera(-10.0, 10.0, 10.0, -10.0)
        self.loads: list[LoadCall] = []
        self.handlers: dict[str, list[Callable[[Any], None]]] = defaultdict(list)
        self.every_handler: dict[str, list[Callable[[Any], None]]] = defaultdict(list)
        self.clear_count = 0
        self.destroyed = False
        self.destroy_error: Optional[Exception] = None
        self.load_error: Optional[Exception] = None
        self.canvas = QWidget(container)
        self.canvas.resize(200, 200)

    def load(self, *, url, fonts, progress_cbk, worker_factory):
        if self.load_error is not None:
            raise self.load_error
        future: "Future[Any]" = Future()
        self.loads.append(LoadCall(url, fonts, progress_cbk, worker_factory, future))
        return future

    def resolve(self, index: int = -1) -> None:
        self.camera = self.next_camera
        self.loads[index].future.set_result(None)

    def reject(self, error: Exception, index: int = -1) -> None:
        self.loads[index].future.set_exception(error)

    def progress(self, phase: str, size: float, total: Optional[float], index: int = -1) -> None:
        self.loads[index].progress_cbk(phase, size, total)

    def clear(self) -> None:
        self.clear_count += 1
        self.camera = None

    def destroy(self) -> None:
        self.destroyed = True
        self.emit("destroyed", None)
        if self.destroy_error is not None:
            raise self.destroy_error

    def get_canvas(self) -> QWidget:
        return self.canvas

    def subscribe(self, event_name: str, handler: Callable[[Any], None]) -> None:
        self.handlers[event_name].append(handler)
        self.every_handler[event_name].append(handler)

    def unsubscribe(self, event_name: str, handler: Callable[[Any], None]) -> None:
        self.handlers[event_name].remove(handler)

    def emit(self, event_name: str, payload: Any) -> None:
        for handler in list(self.handlers[event_name]):
            handler(payload)

    def emit_stale(self, event_name: str, payload: Any) -> None:
        """Call every handler ever subscribed, as a leaky engine would."""
        for handler in list(self.every_handler[event_name]):
            handler(payload)


@pytest.fixture
def engine() -> FakeEngine:
    return FakeEngine(None, EngineOptions())


@pytest.fixture
def engine_factory():
    """Factory recording the engines it builds."""
    created: list[FakeEngine] = []

    def factory(container: QWidget, options: EngineOptions) -> FakeEngine:
        created.append(FakeEngine(container, options))
        return created[-1]

    factory.created = created  # type: ignore[attr-defined]
    return factory
