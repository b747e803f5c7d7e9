"""PyQt6 overlay backend.

Surfaces are frameless tool windows that stay on top, never take focus
and let mouse events pass through. A QApplication must exist before the
backend is used; the host keeps Qt events flowing (see
``quizlens.pipeline.pump.QtEventPump`` for the asyncio case).
"""

from __future__ import annotations

import asyncio
import logging

from PyQt6 import sip
from PyQt6.QtCore import Qt
from PyQt6.QtWidgets import QApplication, QLabel, QVBoxLayout, QWidget

from quizlens.domain.models import OverlayGeometry
from quizlens.overlay.base import OverlayBackend, OverlayError, OverlaySurface

logger = logging.getLogger(__name__)


class QtOverlaySurface(OverlaySurface):
    """One overlay window built from a QWidget holding a rich-text QLabel."""

    def __init__(self, geometry: OverlayGeometry) -> None:
        self._closed = False
        self._widget = QWidget()
        self._widget.setWindowFlags(
            Qt.WindowType.FramelessWindowHint
            | Qt.WindowType.WindowStaysOnTopHint
            | Qt.WindowType.Tool  # Keeps it out of the taskbar
            | Qt.WindowType.WindowDoesNotAcceptFocus
            | Qt.WindowType.WindowTransparentForInput
        )
        self._widget.setAttribute(Qt.WidgetAttribute.WA_TranslucentBackground, True)
        self._widget.setAttribute(Qt.WidgetAttribute.WA_ShowWithoutActivating, True)
        self._widget.setAttribute(Qt.WidgetAttribute.WA_TransparentForMouseEvents, True)
        self._widget.setFocusPolicy(Qt.FocusPolicy.NoFocus)

        self._label = QLabel(self._widget)
        self._label.setTextFormat(Qt.TextFormat.RichText)
        self._label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self._label.setAttribute(Qt.WidgetAttribute.WA_TransparentForMouseEvents, True)

        layout = QVBoxLayout(self._widget)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.addWidget(self._label)

        self._widget.move(geometry.x, geometry.y)
        self._widget.setFixedSize(geometry.width, geometry.height)

    @property
    def widget(self) -> QWidget:
        return self._widget

    @property
    def text(self) -> str:
        return self._label.text()

    async def load(self, markup: str) -> None:
        if self.is_destroyed:
            raise OverlayError("Overlay surface already closed")
        self._label.setText(markup)
        # Let Qt lay out the label before the window is mapped.
        await asyncio.sleep(0)

    def show_inactive(self) -> None:
        if self.is_destroyed:
            raise OverlayError("Overlay surface already closed")
        self._widget.show()
        self._widget.raise_()

    def close(self) -> None:
        if self.is_destroyed:
            return
        self._closed = True
        self._widget.hide()
        self._widget.close()
        self._widget.deleteLater()

    @property
    def is_destroyed(self) -> bool:
        return self._closed or sip.isdeleted(self._widget)


class QtOverlayBackend(OverlayBackend):
    """Creates ``QtOverlaySurface`` windows on the primary screen."""

    def work_area_size(self) -> tuple[int, int]:
        screen = QApplication.primaryScreen()
        if screen is None:
            raise OverlayError("No primary screen available")
        area = screen.availableGeometry()
        return area.width(), area.height()

    def create_surface(self, geometry: OverlayGeometry) -> OverlaySurface:
        if QApplication.instance() is None:
            raise OverlayError("QApplication must be created before showing an overlay")
        return QtOverlaySurface(geometry)
