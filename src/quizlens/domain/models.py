"""Core domain models for quizlens.

These models represent the data flowing through one capture cycle: the
session bookkeeping, the request sent to the vision model, the parsed
answer that comes back, and the geometry of the overlay that shows it.
"""

from __future__ import annotations

import enum
from datetime import datetime
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

ANSWER_ALPHABET = frozenset("abcd1234")

SENTINEL_CONTENT = "N"


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class AnswerOutcome(str, enum.Enum):
    """How a vision query ended."""

    ANSWERED = "answered"
    NO_MCQ = "no_mcq"  # Model reported there was no question on screen
    PARSE_FAILED = "parse_failed"  # Reply had no recognizable ANSWER line
    MISSING_CREDENTIAL = "missing_credential"
    SERVICE_ERROR = "service_error"  # Transport, status or payload problem


class DisplayMode(str, enum.Enum):
    """What the overlay shows for a resolved answer."""

    TOKEN = "token"
    PREVIEW = "preview"


# ---------------------------------------------------------------------------
# Vision Models
# ---------------------------------------------------------------------------


class VisionQuery(BaseModel):
    """A single-turn multimodal request: instructions plus one image."""

    model_config = ConfigDict(frozen=True)

    prompt: str = Field(description="Fixed instructional template")
    image_base64: str = Field(description="Screenshot encoded for transport")
    mime_type: str = Field(default="image/png")
    temperature: float = Field(default=0.1, ge=0.0)
    max_output_tokens: int = Field(default=512, gt=0)

    def to_request_body(self) -> dict:
        """Build the generateContent JSON body."""
        return {
            "contents": [
                {
                    "role": "user",
                    "parts": [
                        {"text": self.prompt},
                        {
                            "inlineData": {
                                "mimeType": self.mime_type,
                                "data": self.image_base64,
                            }
                        },
                    ],
                }
            ],
            "generationConfig": {
                "temperature": self.temperature,
                "maxOutputTokens": self.max_output_tokens,
            },
        }


class VisionResult(BaseModel):
    """The parsed answer derived from one vision query.

    ``token`` is only set when ``outcome`` is ANSWERED and is always a
    lowercase member of ``ANSWER_ALPHABET``.
    """

    model_config = ConfigDict(frozen=True)

    outcome: AnswerOutcome
    token: str | None = Field(default=None)
    raw_text: str | None = Field(
        default=None, description="Reply text exactly as returned (stripped)"
    )
    preview: str | None = Field(default=None, description="Short label such as 'B) 4'")
    finish_reason: str | None = Field(default=None)

    @field_validator("token")
    @classmethod
    def _token_in_alphabet(cls, value: str | None) -> str | None:
        if value is None:
            return None
        value = value.lower()
        if value not in ANSWER_ALPHABET:
            raise ValueError(f"answer token must be one of {sorted(ANSWER_ALPHABET)}, got {value!r}")
        return value

    @property
    def has_answer(self) -> bool:
        return self.token is not None

    @classmethod
    def failure(cls, outcome: AnswerOutcome, raw_text: str | None = None) -> VisionResult:
        return cls(outcome=outcome, raw_text=raw_text)


# ---------------------------------------------------------------------------
# Session / Overlay Models
# ---------------------------------------------------------------------------


class CaptureSession(BaseModel):
    """Bookkeeping for one capture cycle. Discarded after the cycle."""

    screenshot_path: Path | None = Field(default=None)
    main_window_was_visible: bool = Field(default=False)
    started_at: datetime = Field(default_factory=datetime.now)
    captured_at: datetime | None = Field(default=None)
    finished_at: datetime | None = Field(default=None)
    displayed_content: str | None = Field(default=None)
    error: str | None = Field(default=None, description="Failure that forced the sentinel, if any")


class OverlayGeometry(BaseModel):
    """Screen rectangle of the overlay surface, in pixels."""

    model_config = ConfigDict(frozen=True)

    x: int
    y: int
    width: int = Field(gt=0)
    height: int = Field(gt=0)
