"""Tests for the load controller state machine."""

import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Optional

import pytest
from PySide6.QtWidgets import QApplication

from dxf_viewer.load_controller import LoadController, ViewerError
from dxf_viewer.models import CameraBounds, LoadState, ProgressPhase

from conftest import FakeEngine


class Recorder:
    """Collects every state and signal the controller emits."""

    def __init__(self, controller: LoadController):
        self.states: list[LoadState] = []
        self.loaded: list[Optional[CameraBounds]] = []
        self.failed: list[str] = []
        controller.state_changed.connect(self.states.append)
        controller.loaded.connect(self.loaded.append)
        controller.failed.connect(self.failed.append)


@pytest.fixture
def controller(engine: FakeEngine) -> LoadController:
    return LoadController(lambda: engine, lambda: ThreadPoolExecutor(max_workers=1))


@pytest.fixture
def recorder(controller: LoadController) -> Recorder:
    return Recorder(controller)


def assert_invariants(states: list[LoadState]) -> None:
    for state in states:
        if state.error is not None:
            assert not state.is_loading
        if not state.is_loading:
            assert state.progress is None
            assert state.progress_phase is None
            assert state.progress_label is None


class TestClear:
    """Test explicit reset."""

    def test_clear_on_idle_is_noop(
        self, controller: LoadController, recorder: Recorder, engine: FakeEngine
    ) -> None:
        """Test clearing an idle controller changes nothing."""
        controller.clear()
        controller.clear()
        assert controller.state == LoadState()
        assert recorder.states == []
        assert engine.clear_count == 2

    def test_clear_resets_error(
        self, controller: LoadController, engine: FakeEngine
    ) -> None:
        """Test clear drops a previous error."""
        controller.load("a.dxf")
        engine.reject(RuntimeError("boom"))
        assert controller.state.error == "boom"
        controller.clear()
        assert controller.state == LoadState()

    def test_clear_discards_in_flight_load(
        self, controller: LoadController, recorder: Recorder, engine: FakeEngine
    ) -> None:
        """Test a load settling after clear leaves the cleared state."""
        controller.load("a.dxf")
        controller.clear()
        engine.progress("fetch", 1, 2, index=0)
        engine.reject(RuntimeError("late"), index=0)
        assert controller.state == LoadState()
        assert recorder.failed == []
        assert recorder.loaded == []

    def test_invalidate_resets_without_engine_clear(
        self, controller: LoadController, recorder: Recorder, engine: FakeEngine
    ) -> None:
        """Test invalidate drops the in-flight load and leaves the engine alone."""
        controller.load("a.dxf")
        engine.progress("fetch", 1, 2)
        controller.invalidate()
        assert controller.state == LoadState()
        assert engine.clear_count == 0
        engine.resolve()
        assert controller.state == LoadState()
        assert recorder.loaded == []
        assert_invariants(recorder.states)


class TestLoad:
    """Test a single load."""

    def test_load_starts_loading(
        self, controller: LoadController, engine: FakeEngine
    ) -> None:
        """Test load sets the loading flag and passes arguments to the engine."""
        generation = controller.load("a.dxf", ["font.ttf"])
        assert generation == controller.generation
        assert controller.state == LoadState(is_loading=True)
        call = engine.loads[0]
        assert call.url == "a.dxf"
        assert call.fonts == ["font.ttf"]
        assert callable(call.worker_factory)

    def test_progress_updates_state(
        self, controller: LoadController, engine: FakeEngine
    ) -> None:
        """Test progress callbacks flow into the state."""
        controller.load("a.dxf")
        engine.progress("fetch", 50, 100)
        assert controller.state.progress == 0.5
        assert controller.state.progress_label == "Fetching file..."
        engine.progress("parse", 10, None)
        assert controller.state.progress == -1
        assert controller.state.progress_phase is ProgressPhase.PARSE
        assert controller.state.progress_label == "Parsing file..."

    def test_success_clears_progress(
        self, controller: LoadController, recorder: Recorder, engine: FakeEngine
    ) -> None:
        """Test success resets progress fields and reports bounds."""
        controller.load("a.dxf")
        engine.progress("prepare", 1, 1)
        engine.resolve()
        assert controller.state == LoadState()
        assert recorder.loaded == [CameraBounds(-10.0, 10.0, 10.0, -10.0)]
        assert_invariants(recorder.states)

    def test_failure_keeps_only_error(
        self, controller: LoadController, recorder: Recorder, engine: FakeEngine
    ) -> None:
        """Test failure resets progress fields but keeps the error text."""
        controller.load("a.dxf")
        engine.progress("parse", 5, 10)
        engine.reject(IOError("Failed to fetch a.dxf"))
        assert controller.state == LoadState(error="Failed to fetch a.dxf")
        assert recorder.failed == ["Failed to fetch a.dxf"]
        assert recorder.loaded == []
        assert_invariants(recorder.states)

    def test_error_without_message_uses_class_name(
        self, controller: LoadController, engine: FakeEngine
    ) -> None:
        """Test an empty exception message still yields text."""
        controller.load("a.dxf")
        engine.reject(TimeoutError())
        assert controller.state.error == "TimeoutError"

    def test_cancelled_future(
        self, controller: LoadController, engine: FakeEngine
    ) -> None:
        """Test a cancelled engine future is reported as a failure."""
        controller.load("a.dxf")
        engine.loads[0].future.cancel()
        assert controller.state.error == "Load cancelled"
        assert not controller.state.is_loading

    def test_synchronous_engine_error(
        self, controller: LoadController, engine: FakeEngine
    ) -> None:
        """Test an exception raised by engine.load is caught."""
        engine.load_error = ValueError("bad url")
        controller.load("a.dxf")
        assert controller.state == LoadState(error="bad url")

    def test_new_load_clears_error(
        self, controller: LoadController, engine: FakeEngine
    ) -> None:
        """Test a new load clears the previous error."""
        controller.load("a.dxf")
        engine.reject(RuntimeError("boom"))
        controller.load("b.dxf")
        assert controller.state == LoadState(is_loading=True)

    def test_late_progress_after_settlement_is_ignored(
        self, controller: LoadController, engine: FakeEngine
    ) -> None:
        """Test progress reported after completion does not reappear."""
        controller.load("a.dxf")
        engine.resolve()
        engine.progress("prepare", 1, 1)
        assert controller.state == LoadState()

    def test_none_url_rejected(self, controller: LoadController) -> None:
        """Test loading without a URL is a programming error."""
        with pytest.raises(ValueError):
            controller.load(None)  # type: ignore[arg-type]

    def test_released_engine_rejected(self) -> None:
        """Test loading without an engine raises."""
        controller = LoadController(lambda: None, lambda: ThreadPoolExecutor())
        with pytest.raises(ViewerError):
            controller.load("a.dxf")


class TestOverlappingLoads:
    """Test the generation token guard."""

    def test_stale_success_is_discarded(
        self, controller: LoadController, recorder: Recorder, engine: FakeEngine
    ) -> None:
        """Test A settling after B only reflects B."""
        controller.load("a.dxf")
        controller.load("b.dxf")
        engine.reject(RuntimeError("b failed"), index=1)
        engine.resolve(index=0)
        assert controller.state == LoadState(error="b failed")
        assert recorder.loaded == []

    def test_stale_failure_is_discarded(
        self, controller: LoadController, recorder: Recorder, engine: FakeEngine
    ) -> None:
        """Test A failing while B is in flight does not touch state."""
        controller.load("a.dxf")
        controller.load("b.dxf")
        engine.progress("fetch", 1, 4, index=1)
        engine.reject(RuntimeError("a failed"), index=0)
        assert controller.state.is_loading
        assert controller.state.error is None
        assert controller.state.progress == 0.25
        engine.resolve(index=1)
        assert controller.state == LoadState()
        assert recorder.failed == []
        assert len(recorder.loaded) == 1

    def test_stale_progress_is_discarded(
        self, controller: LoadController, engine: FakeEngine
    ) -> None:
        """Test interleaved progress from A is ignored."""
        controller.load("a.dxf")
        controller.load("b.dxf")
        engine.progress("parse", 1, 2, index=1)
        engine.progress("fetch", 9, 10, index=0)
        assert controller.state.progress == 0.5
        assert controller.state.progress_phase is ProgressPhase.PARSE

    def test_invariants_hold_through_interleaving(
        self, controller: LoadController, recorder: Recorder, engine: FakeEngine
    ) -> None:
        """Test every emitted state satisfies the state invariants."""
        controller.load("a.dxf")
        engine.progress("font", 0, None, index=0)
        controller.load("b.dxf")
        engine.reject(RuntimeError("a"), index=0)
        engine.progress("fetch", 3, 3, index=1)
        controller.clear()
        engine.resolve(index=1)
        controller.load("c.dxf")
        engine.reject(RuntimeError("c"), index=2)
        assert_invariants(recorder.states)
        assert controller.state == LoadState(error="c")


def run_in_thread(target) -> None:
    thread = threading.Thread(target=target)
    thread.start()
    thread.join(timeout=5)
    assert not thread.is_alive()


class TestCrossThread:
    """Test engine callbacks delivered from worker threads."""

    def test_worker_callbacks_applied_on_event_loop(
        self, controller: LoadController, recorder: Recorder, engine: FakeEngine
    ) -> None:
        """Test progress and completion from a thread are queued to the owner thread."""
        controller.load("a.dxf")

        def work() -> None:
            engine.progress("fetch", 1, 2)
            engine.resolve()

        run_in_thread(work)
        assert controller.state == LoadState(is_loading=True)
        assert recorder.loaded == []

        QApplication.processEvents()

        assert controller.state == LoadState()
        assert recorder.loaded == [CameraBounds(-10.0, 10.0, 10.0, -10.0)]
        assert any(state.progress == 0.5 for state in recorder.states)
        assert_invariants(recorder.states)

    def test_stale_worker_result_discarded(
        self, controller: LoadController, recorder: Recorder, engine: FakeEngine
    ) -> None:
        """Test a superseded load settling on a thread does not touch state."""
        controller.load("a.dxf")
        controller.load("b.dxf")

        run_in_thread(lambda: engine.reject(RuntimeError("a failed"), index=0))
        QApplication.processEvents()

        assert controller.state == LoadState(is_loading=True)
        assert recorder.failed == []
