"""Screenshot capture module for quizlens.

Public API:
    ScreenshotSource -- Abstract base class
    MssScreenshotSource -- mss screen grab implementation
"""

from quizlens.capture.base import CaptureError, ScreenshotSource, noop

__all__ = ["CaptureError", "ScreenshotSource", "MssScreenshotSource", "noop"]


def __getattr__(name: str) -> type:
    """Lazy import for concrete implementations that require external deps."""
    if name == "MssScreenshotSource":
        from quizlens.capture.screen import MssScreenshotSource
        return MssScreenshotSource
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
