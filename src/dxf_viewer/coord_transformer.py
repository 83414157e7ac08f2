"""Coordinate transformations for pointer readout.

This module maps device pixel positions over the engine canvas to world
coordinates using the bounds of the engine's orthographic camera.
"""

import logging
from typing import Optional

from .models import CameraBounds, PointerCoordinate


class CoordinateMapper:
    """Maps device pixels to world coordinates under an orthographic camera.

    Keeps the camera bounds from the last load (or resize) and the last
    successfully mapped pointer coordinate.
    """

    def __init__(self, bounds: Optional[CameraBounds] = None):
        """Initialize the coordinate mapper.

        Args:
            bounds: Initial camera bounds, if already known
        """
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self.bounds = bounds
        self.coordinate: Optional[PointerCoordinate] = None

    @staticmethod
    def device_to_ndc(
        x: float, y: float, width: float, height: float
    ) -> tuple[float, float]:
        """Convert device pixels to normalized device coordinates.

        Device Y grows downward, normalized Y grows upward.

        Args:
            x: Pointer X in pixels from the left edge
            y: Pointer Y in pixels from the top edge
            width: Viewport width in pixels (must be non-zero)
            height: Viewport height in pixels (must be non-zero)

        Returns:
            (ndc_x, ndc_y) in [-1, 1] for points inside the viewport
        """
        ndc_x = (x / width) * 2 - 1
        ndc_y = -(y / height) * 2 + 1
        return (ndc_x, ndc_y)

    @staticmethod
    def ndc_to_world(
        ndc_x: float, ndc_y: float, bounds: CameraBounds
    ) -> PointerCoordinate:
        """Unproject normalized device coordinates through an orthographic camera."""
        world_x = bounds.left + (ndc_x + 1) * (bounds.right - bounds.left) / 2
        world_y = bounds.bottom + (ndc_y + 1) * (bounds.top - bounds.bottom) / 2
        return PointerCoordinate(world_x, world_y, 0.0)

    @classmethod
    def device_to_world(
        cls,
        x: float,
        y: float,
        width: float,
        height: float,
        bounds: Optional[CameraBounds],
    ) -> Optional[PointerCoordinate]:
        """Map a device point to world coordinates.

        Returns None when the viewport is degenerate or no camera is
        available; callers skip the update in that case.
        """
        if bounds is None or width <= 0 or height <= 0:
            return None
        ndc_x, ndc_y = cls.device_to_ndc(x, y, width, height)
        return cls.ndc_to_world(ndc_x, ndc_y, bounds)

    def set_bounds(self, bounds: Optional[CameraBounds]) -> None:
        """Replace camera bounds (after load or resize)."""
        self.bounds = bounds
        self.logger.debug(f"Camera bounds set to: {bounds}")

    def seed_center(self) -> Optional[PointerCoordinate]:
        """Set the coordinate to the centre of the current bounds."""
        if self.bounds is None:
            return None
        self.coordinate = self.bounds.center
        return self.coordinate

    def map_pointer(
        self, x: float, y: float, width: float, height: float
    ) -> Optional[PointerCoordinate]:
        """Recompute the coordinate for a pointer move.

        Args:
            x: Pointer X over the canvas in pixels
            y: Pointer Y over the canvas in pixels
            width: Canvas width in pixels
            height: Canvas height in pixels

        Returns:
            New coordinate, or None if the update was skipped (the previous
            coordinate is kept)
        """
        coordinate = self.device_to_world(x, y, width, height, self.bounds)
        if coordinate is None:
            return None
        self.coordinate = coordinate
        return coordinate

    def reset(self) -> None:
        """Forget bounds and coordinate."""
        self.bounds = None
        self.coordinate = None
