"""Event handlers for DxfViewerWidget.

This module provides event handling for the viewer widget: pointer
tracking over the engine canvas, overlay positioning on resize and engine
release on close.
"""

from PySide6.QtCore import QEvent, QObject
from PySide6.QtGui import QCloseEvent, QMouseEvent, QResizeEvent


class ViewerEventHandlers:
    """Mixin class for DxfViewerWidget event handling.

    Handles:
    - Mouse move over the engine canvas (coordinate readout)
    - Widget resize (overlay geometry)
    - Widget close (engine teardown)
    """

    def eventFilter(self, watched: QObject, event: QEvent) -> bool:
        """Track pointer moves over the engine canvas without consuming them."""
        if (
            watched is self._canvas  # type: ignore
            and event.type() == QEvent.Type.MouseMove
            and isinstance(event, QMouseEvent)
        ):
            position = event.position()
            self.handle_pointer_move(position.x(), position.y())  # type: ignore
        return super().eventFilter(watched, event)  # type: ignore

    def resizeEvent(self, event: QResizeEvent) -> None:
        """Keep the overlay covering the whole widget."""
        super().resizeEvent(event)  # type: ignore
        self.overlay.setGeometry(self.rect())  # type: ignore
        self.overlay.raise_()  # type: ignore

    def closeEvent(self, event: QCloseEvent) -> None:
        """Release the engine when the widget is closed."""
        self.shutdown()  # type: ignore
        super().closeEvent(event)  # type: ignore
