"""Host window enumeration for quizlens.

Public API:
    AppWindow / WindowEnumerator -- Abstract base classes
    find_main_window -- picks the host's main window by origin
    QtWindowEnumerator -- PyQt6 implementation
"""

from quizlens.windows.base import (
    DEFAULT_MAIN_WINDOW_ORIGINS,
    AppWindow,
    WindowEnumerator,
    find_main_window,
)

__all__ = [
    "DEFAULT_MAIN_WINDOW_ORIGINS",
    "AppWindow",
    "WindowEnumerator",
    "find_main_window",
    "QtWindowEnumerator",
]


def __getattr__(name: str) -> type:
    """Lazy import for concrete implementations that require external deps."""
    if name == "QtWindowEnumerator":
        from quizlens.windows.qt import QtWindowEnumerator
        return QtWindowEnumerator
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
