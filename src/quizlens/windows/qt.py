"""PyQt6 implementation of the host window abstractions."""

from __future__ import annotations

import logging

from PyQt6 import sip
from PyQt6.QtCore import Qt
from PyQt6.QtWidgets import QApplication, QWidget

from quizlens.windows.base import AppWindow, WindowEnumerator

logger = logging.getLogger(__name__)

ORIGIN_PROPERTY = "origin"


class QtAppWindow(AppWindow):
    """Wraps a top-level QWidget.

    The origin is taken from the widget's ``"origin"`` dynamic property when
    the host sets one, otherwise from its window file path.
    """

    def __init__(self, widget: QWidget) -> None:
        self._widget = widget

    @property
    def widget(self) -> QWidget:
        return self._widget

    @property
    def origin(self) -> str:
        if self.is_destroyed():
            return ""
        value = self._widget.property(ORIGIN_PROPERTY)
        if value:
            return str(value)
        path = self._widget.windowFilePath()
        return f"file:{path}" if path else ""

    def is_visible(self) -> bool:
        return not self.is_destroyed() and self._widget.isVisible()

    def is_destroyed(self) -> bool:
        return sip.isdeleted(self._widget)

    def hide(self) -> None:
        if not self.is_destroyed():
            self._widget.hide()

    def show(self) -> None:
        if not self.is_destroyed():
            self._widget.show()


class QtWindowEnumerator(WindowEnumerator):
    """Lists the top-level widgets of the running QApplication."""

    def __init__(self, exclude_tool_windows: bool = True) -> None:
        self._exclude_tool_windows = exclude_tool_windows

    def list_windows(self) -> list[AppWindow]:
        app = QApplication.instance()
        if app is None:
            logger.debug("No QApplication running, no windows to list")
            return []
        windows: list[AppWindow] = []
        for widget in app.topLevelWidgets():
            if self._exclude_tool_windows and widget.windowType() == Qt.WindowType.Tool:
                continue
            windows.append(QtAppWindow(widget))
        return windows
