"""Host application windows, as seen by the capture cycle.

The cycle only needs to find the host's main window and toggle its
visibility around the screenshot. Window toolkits plug in by implementing
``AppWindow`` and ``WindowEnumerator``.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Iterable, Sequence

logger = logging.getLogger(__name__)

DEFAULT_MAIN_WINDOW_ORIGINS = ("localhost", "file:")


class AppWindow(ABC):
    """One top-level window of the host application."""

    @property
    @abstractmethod
    def origin(self) -> str:
        """Where the window's content comes from (URL, file path, name)."""
        ...

    @abstractmethod
    def is_visible(self) -> bool:
        ...

    @abstractmethod
    def is_destroyed(self) -> bool:
        ...

    @abstractmethod
    def hide(self) -> None:
        ...

    @abstractmethod
    def show(self) -> None:
        ...


class WindowEnumerator(ABC):
    """Lists the host application's currently open windows."""

    @abstractmethod
    def list_windows(self) -> list[AppWindow]:
        ...


def find_main_window(
    windows: Iterable[AppWindow],
    origins: Sequence[str] = DEFAULT_MAIN_WINDOW_ORIGINS,
) -> AppWindow | None:
    """Return the first live window whose origin contains one of ``origins``."""
    for window in windows:
        if window.is_destroyed():
            continue
        origin = window.origin or ""
        if any(marker in origin for marker in origins):
            return window
    return None
