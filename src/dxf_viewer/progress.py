"""Progress aggregation for engine load callbacks.

Turns raw (phase, size, total_size) reports into the progress value and
label kept in LoadState.
"""

import logging
from dataclasses import replace
from typing import Optional

from .models import INDETERMINATE_PROGRESS, LoadState, ProgressEvent, ProgressPhase


class ProgressAggregator:
    """Normalizes engine progress reports into presentation state."""

    PHASE_LABELS: dict[ProgressPhase, str] = {
        ProgressPhase.FONT: "Fetching fonts...",
        ProgressPhase.FETCH: "Fetching file...",
        ProgressPhase.PARSE: "Parsing file...",
        ProgressPhase.PREPARE: "Preparing rendering data...",
    }

    def __init__(self) -> None:
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def apply(self, state: LoadState, event: ProgressEvent) -> LoadState:
        """Return a new state with the progress report applied.

        The label changes only when the phase changes. Unknown phases keep
        the previous phase and label. The ratio is not clamped.

        Args:
            state: Current load state
            event: Progress report from the engine

        Returns:
            Updated LoadState
        """
        phase = ProgressPhase.parse(event.phase)
        changes: dict[str, object] = {}

        if phase is None:
            self.logger.debug(f"Unknown progress phase: {event.phase!r}")
        elif phase != state.progress_phase:
            changes["progress_phase"] = phase
            changes["progress_label"] = self.PHASE_LABELS[phase]

        changes["progress"] = self.ratio(event.size, event.total_size)
        return replace(state, **changes)  # type: ignore[arg-type]

    def on_progress(
        self,
        state: LoadState,
        phase: str,
        size: float,
        total_size: Optional[float],
    ) -> LoadState:
        """Shorthand for apply() with positional callback arguments."""
        return self.apply(state, ProgressEvent(phase, size, total_size))

    @staticmethod
    def ratio(size: float, total_size: Optional[float]) -> float:
        """Compute load ratio, -1 when the total is unknown."""
        # A zero total cannot produce a ratio
        if not total_size:
            return INDETERMINATE_PROGRESS
        return size / total_size
