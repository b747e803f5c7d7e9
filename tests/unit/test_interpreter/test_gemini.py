"""Tests for the Gemini vision client."""

from __future__ import annotations

import json
from pathlib import Path

import httpx
import pytest

from quizlens.domain.models import AnswerOutcome
from quizlens.interpreter.gemini import GeminiVisionClient
from quizlens.utils.reply_log import ReplyLog


def _gemini_reply(text: str, finish_reason: str = "STOP") -> dict:
    return {
        "candidates": [
            {
                "content": {"parts": [{"text": text}], "role": "model"},
                "finishReason": finish_reason,
            }
        ]
    }


class _Recorder:
    """httpx.MockTransport handler that records requests."""

    def __init__(self, response: httpx.Response | Exception) -> None:
        self.response = response
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if isinstance(self.response, Exception):
            raise self.response
        return self.response


def _client(settings, handler: _Recorder, log_dir: Path) -> GeminiVisionClient:
    return GeminiVisionClient(
        config_loader=lambda: settings,
        reply_log=ReplyLog(log_dir),
        client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )


class TestGeminiAnalyze:
    @pytest.mark.asyncio
    async def test_answer_is_parsed(self, make_settings, screenshot_file: Path, sample_reply: str, tmp_path: Path) -> None:
        handler = _Recorder(httpx.Response(200, json=_gemini_reply(sample_reply)))
        client = _client(make_settings(), handler, tmp_path / "logs")

        result = await client.analyze(screenshot_file)

        assert result.outcome == AnswerOutcome.ANSWERED
        assert result.token == "b"
        assert result.preview == "B) 4"
        assert result.raw_text == sample_reply
        assert result.finish_reason == "STOP"

    @pytest.mark.asyncio
    async def test_request_shape(self, make_settings, screenshot_file: Path, sample_reply: str, tmp_path: Path) -> None:
        handler = _Recorder(httpx.Response(200, json=_gemini_reply(sample_reply)))
        client = _client(make_settings(api_key="abc123"), handler, tmp_path / "logs")

        await client.analyze(screenshot_file)

        assert len(handler.requests) == 1
        request = handler.requests[0]
        assert request.method == "POST"
        assert request.url.path.endswith("/models/gemini-2.0-flash:generateContent")
        assert request.url.params["key"] == "abc123"
        body = json.loads(request.content)
        parts = body["contents"][0]["parts"]
        assert "ANSWER:" in parts[0]["text"]
        assert parts[1]["inlineData"]["mimeType"] == "image/png"
        assert parts[1]["inlineData"]["data"]
        assert body["generationConfig"] == {"temperature": 0.1, "maxOutputTokens": 512}

    @pytest.mark.asyncio
    async def test_missing_credential_skips_network(self, make_settings, screenshot_file: Path, tmp_path: Path) -> None:
        handler = _Recorder(httpx.Response(200, json=_gemini_reply("ANSWER: a")))
        client = _client(make_settings(api_key=""), handler, tmp_path / "logs")

        result = await client.analyze(screenshot_file)

        assert result.outcome == AnswerOutcome.MISSING_CREDENTIAL
        assert result.token is None
        assert handler.requests == []

    @pytest.mark.asyncio
    async def test_no_mcq_is_logged(self, make_settings, screenshot_file: Path, tmp_path: Path) -> None:
        handler = _Recorder(httpx.Response(200, json=_gemini_reply("NO_MCQ")))
        log_dir = tmp_path / "logs"
        client = _client(make_settings(), handler, log_dir)

        result = await client.analyze(screenshot_file)

        assert result.outcome == AnswerOutcome.NO_MCQ
        assert result.token is None
        files = list(log_dir.glob("mcq_*.txt"))
        assert len(files) == 1
        assert files[0].read_text(encoding="utf-8") == "NO_MCQ"

    @pytest.mark.asyncio
    async def test_parse_failure(self, make_settings, screenshot_file: Path, tmp_path: Path) -> None:
        handler = _Recorder(httpx.Response(200, json=_gemini_reply("I think it is the second one.")))
        client = _client(make_settings(), handler, tmp_path / "logs")

        result = await client.analyze(screenshot_file)

        assert result.outcome == AnswerOutcome.PARSE_FAILED
        assert result.token is None
        assert result.raw_text == "I think it is the second one."

    @pytest.mark.asyncio
    async def test_transport_error_is_service_error(self, make_settings, screenshot_file: Path, tmp_path: Path) -> None:
        handler = _Recorder(httpx.ConnectError("connection refused"))
        log_dir = tmp_path / "logs"
        client = _client(make_settings(), handler, log_dir)

        result = await client.analyze(screenshot_file)

        assert result.outcome == AnswerOutcome.SERVICE_ERROR
        assert result.raw_text is None
        assert not log_dir.exists() or list(log_dir.iterdir()) == []

    @pytest.mark.asyncio
    async def test_http_status_error(self, make_settings, screenshot_file: Path, tmp_path: Path) -> None:
        handler = _Recorder(httpx.Response(403, json={"error": {"message": "API key not valid"}}))
        client = _client(make_settings(), handler, tmp_path / "logs")

        result = await client.analyze(screenshot_file)

        assert result.outcome == AnswerOutcome.SERVICE_ERROR

    @pytest.mark.asyncio
    async def test_empty_candidates(self, make_settings, screenshot_file: Path, tmp_path: Path) -> None:
        handler = _Recorder(httpx.Response(200, json={"candidates": []}))
        client = _client(make_settings(), handler, tmp_path / "logs")

        result = await client.analyze(screenshot_file)

        assert result.outcome == AnswerOutcome.SERVICE_ERROR

    @pytest.mark.asyncio
    async def test_candidate_without_content(self, make_settings, screenshot_file: Path, tmp_path: Path) -> None:
        handler = _Recorder(httpx.Response(200, json={"candidates": [{"finishReason": "SAFETY"}]}))
        client = _client(make_settings(), handler, tmp_path / "logs")

        result = await client.analyze(screenshot_file)

        assert result.outcome == AnswerOutcome.SERVICE_ERROR

    @pytest.mark.asyncio
    async def test_invalid_json(self, make_settings, screenshot_file: Path, tmp_path: Path) -> None:
        handler = _Recorder(httpx.Response(200, content=b"<html>oops</html>"))
        client = _client(make_settings(), handler, tmp_path / "logs")

        result = await client.analyze(screenshot_file)

        assert result.outcome == AnswerOutcome.SERVICE_ERROR

    @pytest.mark.asyncio
    async def test_unreadable_screenshot(self, make_settings, tmp_path: Path) -> None:
        handler = _Recorder(httpx.Response(200, json=_gemini_reply("ANSWER: a")))
        client = _client(make_settings(), handler, tmp_path / "logs")

        result = await client.analyze(tmp_path / "missing.png")

        assert result.outcome == AnswerOutcome.SERVICE_ERROR
        assert handler.requests == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "body",
        [
            {"candidates": "abc"},
            {"candidates": ["oops"]},
            {"candidates": [{"content": "text"}]},
            {"candidates": [{"content": {"parts": "text"}}]},
            {"candidates": [{"content": {"parts": ["text-not-object"]}}]},
            {"candidates": [{"content": {"parts": [{"text": 42}]}}]},
        ],
    )
    async def test_malformed_candidate_shapes(
        self, make_settings, screenshot_file: Path, tmp_path: Path, body: dict
    ) -> None:
        handler = _Recorder(httpx.Response(200, json=body))
        client = _client(make_settings(), handler, tmp_path / "logs")

        result = await client.analyze(screenshot_file)

        assert result.outcome == AnswerOutcome.SERVICE_ERROR
        assert result.token is None

    @pytest.mark.asyncio
    async def test_settings_load_failure(self, make_settings, screenshot_file: Path, tmp_path: Path) -> None:
        settings = make_settings()
        calls = {"n": 0}

        def loader():
            calls["n"] += 1
            if calls["n"] > 1:
                raise ValueError("bad yaml")
            return settings

        handler = _Recorder(httpx.Response(200, json=_gemini_reply("ANSWER: a")))
        client = GeminiVisionClient(
            config_loader=loader,
            reply_log=ReplyLog(tmp_path / "logs"),
            client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
        )

        result = await client.analyze(screenshot_file)

        assert result.outcome == AnswerOutcome.MISSING_CREDENTIAL
        assert handler.requests == []
        assert await client.health_check() is False


class TestGeminiHealthCheck:
    @pytest.mark.asyncio
    async def test_ok(self, make_settings, tmp_path: Path) -> None:
        handler = _Recorder(httpx.Response(200, json={"models": []}))
        client = _client(make_settings(), handler, tmp_path / "logs")
        assert await client.health_check() is True
        assert handler.requests[0].url.path.endswith("/models")

    @pytest.mark.asyncio
    async def test_rejected_key(self, make_settings, tmp_path: Path) -> None:
        handler = _Recorder(httpx.Response(400, json={}))
        client = _client(make_settings(), handler, tmp_path / "logs")
        assert await client.health_check() is False

    @pytest.mark.asyncio
    async def test_no_key(self, make_settings, tmp_path: Path) -> None:
        handler = _Recorder(httpx.Response(200, json={}))
        client = _client(make_settings(api_key=""), handler, tmp_path / "logs")
        assert await client.health_check() is False
        assert handler.requests == []
