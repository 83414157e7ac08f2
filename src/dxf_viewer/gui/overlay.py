"""Overlay widget drawn on top of the engine canvas.

Shows load progress, the last load error and the pointer coordinate.
"""

import logging
from typing import Optional

import qtawesome as qta  # type: ignore
from PySide6.QtCore import Qt, QSize
from PySide6.QtWidgets import QHBoxLayout, QLabel, QProgressBar, QVBoxLayout, QWidget

from ..models import LoadState, PointerCoordinate
from ..resources import apply_style_class, style_manager


class ViewerOverlay(QWidget):
    """Transparent overlay with progress, error and coordinate readout."""

    ERROR_ICON_NAME = "mdi.alert-circle-outline"
    PROGRESS_STEPS = 1000

    def __init__(self, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

        self.setAttribute(Qt.WidgetAttribute.WA_TransparentForMouseEvents)
        apply_style_class(self, "viewer-overlay")
        style_manager.apply_style(self, "viewer")

        self._setup_ui()
        self.update_state(LoadState())
        self.set_coordinate(None)

    def _setup_ui(self) -> None:
        layout = QVBoxLayout(self)
        layout.setContentsMargins(8, 8, 8, 8)
        layout.setSpacing(4)

        # Progress block at the top
        self.progress_container = QWidget(self)
        progress_layout = QVBoxLayout(self.progress_container)
        progress_layout.setContentsMargins(0, 0, 0, 0)
        progress_layout.setSpacing(2)

        self.progress_label = QLabel(self.progress_container)
        apply_style_class(self.progress_label, "progress-label")
        progress_layout.addWidget(self.progress_label, 0, Qt.AlignmentFlag.AlignLeft)

        self.progress_bar = QProgressBar(self.progress_container)
        self.progress_bar.setTextVisible(False)
        self.progress_bar.setRange(0, self.PROGRESS_STEPS)
        apply_style_class(self.progress_bar, "load-progress")
        progress_layout.addWidget(self.progress_bar)

        layout.addWidget(self.progress_container)

        # Error block
        self.error_container = QWidget(self)
        error_layout = QHBoxLayout(self.error_container)
        error_layout.setContentsMargins(0, 0, 0, 0)
        error_layout.setSpacing(6)

        self.error_icon = QLabel(self.error_container)
        self.error_icon.setFixedSize(20, 20)
        self._setup_error_icon()
        error_layout.addWidget(self.error_icon)

        self.error_label = QLabel(self.error_container)
        self.error_label.setWordWrap(True)
        self.error_label.setTextInteractionFlags(Qt.TextInteractionFlag.TextSelectableByMouse)
        apply_style_class(self.error_label, "error-text")
        error_layout.addWidget(self.error_label, 1)

        layout.addWidget(self.error_container)
        layout.addStretch(1)

        self.coordinate_label = QLabel(self)
        apply_style_class(self.coordinate_label, "coordinate-readout")
        layout.addWidget(self.coordinate_label, 0, Qt.AlignmentFlag.AlignLeft)

    def _setup_error_icon(self) -> None:
        try:
            icon = qta.icon(self.ERROR_ICON_NAME, color="#ff6b6b")  # type: ignore[arg-type]
            self.error_icon.setPixmap(icon.pixmap(QSize(20, 20)))
        except Exception as e:
            # Icon fonts may be unavailable (headless, frozen builds)
            self.logger.warning(f"Failed to load icon {self.ERROR_ICON_NAME}: {e}")

    def update_state(self, state: LoadState) -> None:
        """Reflect a load state snapshot."""
        self.progress_container.setVisible(state.is_loading)
        self.progress_label.setText(state.progress_label or "")
        self.progress_label.setVisible(bool(state.progress_label))

        if state.progress is None:
            self.progress_bar.setRange(0, self.PROGRESS_STEPS)
            self.progress_bar.reset()
        elif state.progress_indeterminate:
            # Busy indicator
            self.progress_bar.setRange(0, 0)
        else:
            self.progress_bar.setRange(0, self.PROGRESS_STEPS)
            # Values outside the range are ignored by QProgressBar
            self.progress_bar.setValue(int(state.progress * self.PROGRESS_STEPS))

        self.error_container.setVisible(state.error is not None)
        self.error_label.setText(state.error or "")

    def set_coordinate(self, coordinate: Optional[PointerCoordinate]) -> None:
        """Show a pointer coordinate, or hide the readout."""
        if coordinate is None:
            self.coordinate_label.clear()
            self.coordinate_label.hide()
            return
        self.coordinate_label.setText(f"X: {coordinate.x:.3f}  Y: {coordinate.y:.3f}")
        self.coordinate_label.show()

