"""Domain models for quizlens.

All models use Pydantic v2 for validation and serialization.
"""

from quizlens.domain.models import (
    ANSWER_ALPHABET,
    SENTINEL_CONTENT,
    AnswerOutcome,
    CaptureSession,
    DisplayMode,
    OverlayGeometry,
    VisionQuery,
    VisionResult,
)

__all__ = [
    "ANSWER_ALPHABET",
    "SENTINEL_CONTENT",
    "AnswerOutcome",
    "CaptureSession",
    "DisplayMode",
    "OverlayGeometry",
    "VisionQuery",
    "VisionResult",
]
