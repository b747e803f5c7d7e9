"""Answer overlay for quizlens.

Public API:
    OverlayPresenter -- owns the single overlay and its dismiss timer
    OverlayBackend / OverlaySurface -- Abstract base classes
    QtOverlayBackend -- PyQt6 implementation
"""

from quizlens.overlay.base import (
    OverlayBackend,
    OverlayError,
    OverlaySurface,
    overlay_geometry,
    render_overlay_html,
)
from quizlens.overlay.presenter import OverlayPresenter

__all__ = [
    "OverlayBackend",
    "OverlayError",
    "OverlayPresenter",
    "OverlaySurface",
    "QtOverlayBackend",
    "overlay_geometry",
    "render_overlay_html",
]


def __getattr__(name: str) -> type:
    """Lazy import for concrete implementations that require external deps."""
    if name == "QtOverlayBackend":
        from quizlens.overlay.qt import QtOverlayBackend
        return QtOverlayBackend
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
