"""
Data models for the DXF viewer control surface.

These models describe load progress, camera bounds and pointer readout.
They are plain value objects: every change produces a new instance so the
owner can replace its snapshot atomically.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, NamedTuple, Optional


class ProgressPhase(str, Enum):
    """Named stage of the engine load pipeline."""

    FONT = "font"
    """Fetching fonts."""

    FETCH = "fetch"
    """Fetching the drawing file."""

    PARSE = "parse"
    """Parsing the drawing file."""

    PREPARE = "prepare"
    """Preparing rendering data."""

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["ProgressPhase"]:
        """Return the phase for ``value`` or None if it is not recognised."""
        try:
            return cls(value)
        except ValueError:
            return None


INDETERMINATE_PROGRESS = -1.0


@dataclass(frozen=True)
class LoadState:
    """Snapshot of the loading state shown by the viewer.

    Attributes:
        is_loading: True while a load is in flight
        error: Text of the last load failure, if any
        progress: Load ratio, or -1 when the total size is unknown
        progress_phase: Last recognised load phase
        progress_label: Human readable label for the phase
    """

    is_loading: bool = False
    error: Optional[str] = None
    progress: Optional[float] = None
    progress_phase: Optional[ProgressPhase] = None
    progress_label: Optional[str] = None

    @property
    def progress_indeterminate(self) -> bool:
        """Check if progress is known to run but its ratio is not."""
        return self.progress == INDETERMINATE_PROGRESS


@dataclass(frozen=True)
class CameraBounds:
    """Orthographic camera frustum bounds in world units."""

    left: float
    right: float
    top: float
    bottom: float

    @classmethod
    def from_camera(cls, camera: Any) -> Optional["CameraBounds"]:
        """Read bounds from an engine camera.

        Args:
            camera: Object exposing left/right/top/bottom, or None

        Returns:
            CameraBounds or None if no camera is available
        """
        if camera is None:
            return None
        return cls(
            left=float(camera.left),
            right=float(camera.right),
            top=float(camera.top),
            bottom=float(camera.bottom),
        )

    @property
    def center(self) -> "PointerCoordinate":
        """World coordinate at the centre of the bounds."""
        return PointerCoordinate(
            (self.left + self.right) / 2, (self.top + self.bottom) / 2, 0.0
        )


class PointerCoordinate(NamedTuple):
    """Pointer position in world coordinates."""

    x: float
    y: float
    z: float = 0.0


@dataclass(frozen=True)
class ProgressEvent:
    """Single progress report coming from the engine."""

    phase: str
    size: float
    total_size: Optional[float] = None
