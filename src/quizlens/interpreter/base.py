"""Abstract base class for vision query clients.

All client implementations must conform to this interface, enabling the
capture cycle to swap model providers without changing the rest of the
pipeline. ``analyze`` never raises for recoverable problems: it reports
them through ``VisionResult.outcome`` so the caller always gets a value.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from pathlib import Path

from quizlens.domain.models import AnswerOutcome, VisionResult
from quizlens.interpreter.answer import extract_answer, extract_preview, is_no_mcq

logger = logging.getLogger(__name__)


MCQ_PROMPT = """
You are an expert at analyzing multiple choice questions (MCQs).

From the screenshot:
1. Identify ONLY the very first complete MCQ that appears from top to bottom in the image.
2. Extract the full MCQ question text and exactly four options, relabelled a) to d)
   in the order they appear, whatever labels the screenshot uses.
3. Determine the correct answer.
4. Respond in the format:
QUESTION: <question text>
OPTIONS:
a) ...
b) ...
c) ...
d) ...
ANSWER: <a, b, c or d>

If no MCQ is found, respond only with "NO_MCQ".
Do NOT include more than one MCQ in your response.
"""


class VisionClient(ABC):
    """Abstract interface for vision-capable model clients."""

    def __init__(self, model: str, prompt: str | None = None, preview_length: int = 24) -> None:
        self._model = model
        self._prompt = prompt or MCQ_PROMPT
        self._preview_length = preview_length

    @property
    def model(self) -> str:
        return self._model

    @abstractmethod
    async def analyze(self, image_path: Path) -> VisionResult:
        """Ask the model about a screenshot and return the parsed answer."""
        ...

    @abstractmethod
    async def health_check(self) -> bool:
        """Check if the provider is reachable and authenticated."""
        ...

    def _interpret_reply(self, raw_text: str, finish_reason: str | None = None) -> VisionResult:
        """Turn a successful reply into a VisionResult."""
        if is_no_mcq(raw_text):
            logger.info("Model reported no MCQ on screen")
            return VisionResult(
                outcome=AnswerOutcome.NO_MCQ,
                raw_text=raw_text,
                finish_reason=finish_reason,
            )

        token = extract_answer(raw_text)
        if token is None:
            logger.warning("No ANSWER line found in reply (finish_reason=%s)", finish_reason)
            return VisionResult(
                outcome=AnswerOutcome.PARSE_FAILED,
                raw_text=raw_text,
                finish_reason=finish_reason,
            )

        return VisionResult(
            outcome=AnswerOutcome.ANSWERED,
            token=token,
            raw_text=raw_text,
            preview=extract_preview(raw_text, token, self._preview_length),
            finish_reason=finish_reason,
        )


class VisionError(Exception):
    """Raised inside a client when a vision query fails."""

    def __init__(
        self,
        message: str,
        provider: str = "",
        status_code: int | None = None,
        raw_response: str = "",
    ) -> None:
        super().__init__(message)
        self.provider = provider
        self.status_code = status_code
        self.raw_response = raw_response
