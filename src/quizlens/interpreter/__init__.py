"""Vision query module for quizlens.

Sends screenshots to a vision-capable model and turns the free-text reply
into a structured answer.

Public API:
    VisionClient -- Abstract base class
    GeminiVisionClient -- Google Gemini implementation
    extract_answer / extract_preview -- reply parsers
"""

from quizlens.interpreter.answer import extract_answer, extract_preview, is_no_mcq
from quizlens.interpreter.base import MCQ_PROMPT, VisionClient, VisionError

__all__ = [
    "MCQ_PROMPT",
    "VisionClient",
    "VisionError",
    "GeminiVisionClient",
    "extract_answer",
    "extract_preview",
    "is_no_mcq",
]


def __getattr__(name: str) -> type:
    """Lazy import for concrete implementations that require external deps."""
    if name == "GeminiVisionClient":
        from quizlens.interpreter.gemini import GeminiVisionClient
        return GeminiVisionClient
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
