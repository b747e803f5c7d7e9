"""Capture cycle orchestration for quizlens.

Public API:
    CaptureOrchestrator -- runs one capture-and-answer cycle
    CycleConfig -- timing and display options for the cycle
    QtEventPump -- drives Qt events from asyncio
"""

from quizlens.pipeline.cycle import CaptureOrchestrator, CycleConfig, resolve_content

__all__ = ["CaptureOrchestrator", "CycleConfig", "QtEventPump", "resolve_content"]


def __getattr__(name: str) -> type:
    """Lazy import for concrete implementations that require external deps."""
    if name == "QtEventPump":
        from quizlens.pipeline.pump import QtEventPump
        return QtEventPump
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
