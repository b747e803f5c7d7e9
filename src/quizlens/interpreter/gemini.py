"""Google Gemini vision client.

Sends the screenshot and the MCQ prompt to the ``generateContent``
endpoint over plain HTTP (httpx) and maps every failure onto a
``VisionResult`` outcome instead of raising.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Callable

import httpx
import yaml

from quizlens.config.settings import Settings, load_settings
from quizlens.domain.models import AnswerOutcome, VisionQuery, VisionResult
from quizlens.interpreter.base import VisionClient, VisionError
from quizlens.utils.imaging import encode_screenshot
from quizlens.utils.reply_log import ReplyLog

logger = logging.getLogger(__name__)


class GeminiVisionClient(VisionClient):
    """Vision client for Gemini's ``generateContent`` API.

    Settings are re-read through ``config_loader`` on every call so a key
    added while the host is running is picked up by the next cycle.

    Example usage::

        client = GeminiVisionClient()
        result = await client.analyze(Path("screenshots/shot.png"))
        if result.has_answer:
            print(result.token)
    """

    def __init__(
        self,
        config_loader: Callable[[], Settings] = load_settings,
        reply_log: ReplyLog | None = None,
        client: httpx.AsyncClient | None = None,
        prompt: str | None = None,
    ) -> None:
        settings = config_loader()
        super().__init__(
            model=settings.vision.model,
            prompt=prompt,
            preview_length=settings.overlay.preview_length,
        )
        self._config_loader = config_loader
        self._reply_log = reply_log or ReplyLog(settings.logging.reply_log_dir)
        self._client = client

    async def analyze(self, image_path: Path) -> VisionResult:
        """Query the model about ``image_path``. Never raises for API problems."""
        try:
            settings = self._config_loader()
        except (OSError, ValueError, yaml.YAMLError) as e:
            logger.error("Could not load settings: %s", e)
            return VisionResult.failure(AnswerOutcome.MISSING_CREDENTIAL)
        api_key = settings.api_key
        if not api_key:
            logger.error("No API key configured")
            return VisionResult.failure(AnswerOutcome.MISSING_CREDENTIAL)

        vision = settings.vision
        self._model = vision.model

        loop = asyncio.get_running_loop()
        try:
            image_b64 = await loop.run_in_executor(
                None, encode_screenshot, image_path, vision.max_image_dimension
            )
        except (OSError, ValueError) as e:
            logger.error("Could not encode screenshot %s: %s", image_path, e)
            return VisionResult.failure(AnswerOutcome.SERVICE_ERROR)
        query = VisionQuery(
            prompt=self._prompt,
            image_base64=image_b64,
            temperature=vision.temperature,
            max_output_tokens=vision.max_output_tokens,
        )

        try:
            raw_text, finish_reason = await self._generate(query, api_key, settings)
        except VisionError as e:
            logger.error("Vision query failed: %s", e)
            return VisionResult.failure(AnswerOutcome.SERVICE_ERROR)

        logger.debug("Model full response:\n%s", raw_text)
        self._reply_log.write(raw_text)
        return self._interpret_reply(raw_text, finish_reason)

    async def health_check(self) -> bool:
        """List models to verify the key and connectivity."""
        try:
            settings = self._config_loader()
        except (OSError, ValueError, yaml.YAMLError) as e:
            logger.warning("Could not load settings: %s", e)
            return False
        if not settings.api_key:
            return False
        try:
            async with self._http(settings) as client:
                resp = await client.get(
                    f"{settings.vision.base_url.rstrip('/')}/models",
                    params={"key": settings.api_key},
                )
                resp.raise_for_status()
            return True
        except httpx.HTTPError as e:
            logger.warning("Health check failed: %s", e)
            return False

    async def _generate(self, query: VisionQuery, api_key: str, settings: Settings) -> tuple[str, str | None]:
        """POST the query and pull the first candidate's text out of the reply."""
        url = f"{settings.vision.base_url.rstrip('/')}/models/{self._model}:generateContent"
        try:
            async with self._http(settings) as client:
                resp = await client.post(url, params={"key": api_key}, json=query.to_request_body())
                resp.raise_for_status()
                data = resp.json()
        except httpx.HTTPStatusError as e:
            raise VisionError(
                f"Gemini returned HTTP {e.response.status_code}",
                provider="gemini",
                status_code=e.response.status_code,
                raw_response=e.response.text[:500],
            ) from e
        except httpx.HTTPError as e:
            raise VisionError(f"Gemini request failed: {e}", provider="gemini") from e
        except ValueError as e:
            raise VisionError(f"Gemini returned invalid JSON: {e}", provider="gemini") from e

        candidates = data.get("candidates") if isinstance(data, dict) else None
        if not candidates:
            raise VisionError("Empty response from Gemini API", provider="gemini")

        if not isinstance(candidates, list) or not isinstance(candidates[0], dict):
            raise VisionError("Malformed candidates in Gemini response", provider="gemini")

        first = candidates[0]
        finish_reason = first.get("finishReason")
        content = first.get("content")
        parts = content.get("parts") if isinstance(content, dict) else None
        if not isinstance(parts, list) or not all(isinstance(part, dict) for part in parts):
            raise VisionError(
                f"Gemini candidate has no content (finishReason={finish_reason})",
                provider="gemini",
            )
        try:
            text = "".join(part.get("text", "") for part in parts).strip()
        except (AttributeError, TypeError) as e:
            raise VisionError("Gemini candidate text is not a string", provider="gemini") from e
        if not text:
            raise VisionError(
                f"Gemini candidate has empty text (finishReason={finish_reason})",
                provider="gemini",
            )
        if finish_reason and finish_reason != "STOP":
            logger.warning("Gemini finished with reason %s", finish_reason)
        return text, finish_reason

    def _http(self, settings: Settings) -> _ClientContext:
        return _ClientContext(self._client, settings.vision.timeout)


class _ClientContext:
    """Yields the injected client, or a short-lived one closed on exit."""

    def __init__(self, client: httpx.AsyncClient | None, timeout: float) -> None:
        self._shared = client
        self._timeout = timeout
        self._owned: httpx.AsyncClient | None = None

    async def __aenter__(self) -> httpx.AsyncClient:
        if self._shared is not None:
            return self._shared
        self._owned = httpx.AsyncClient(timeout=self._timeout)
        return self._owned

    async def __aexit__(self, exc_type: type | None, exc_val: Exception | None, exc_tb: object) -> None:
        if self._owned is not None:
            await self._owned.aclose()
            self._owned = None
