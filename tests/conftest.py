"""Shared test fixtures for the quizlens test suite.

Provides sample model replies, a screenshot on disk, settings factories
and in-memory fakes for the overlay and window collaborators.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from unittest.mock import AsyncMock

import cv2
import numpy as np
import pytest
from pydantic import SecretStr

from quizlens.config.settings import OverlayConfig, Settings
from quizlens.domain.models import OverlayGeometry
from quizlens.overlay.base import OverlayBackend, OverlayError, OverlaySurface
from quizlens.windows.base import AppWindow, WindowEnumerator


# ---------------------------------------------------------------------------
# Reply Fixtures
# ---------------------------------------------------------------------------


SAMPLE_REPLY = "What is 2+2?\nA) 3\nB) 4\nC) 5\nD) 6\n...\nANSWER: B"


@pytest.fixture
def sample_reply() -> str:
    return SAMPLE_REPLY


@pytest.fixture
def structured_reply() -> str:
    """A reply in the exact format the prompt asks for."""
    return (
        "QUESTION: Which color is a clear daytime sky?\n"
        "OPTIONS:\n"
        "a) green grass\n"
        "b) blue sky with a few scattered clouds\n"
        "c) red\n"
        "d) yellow\n"
        "ANSWER: b"
    )


# ---------------------------------------------------------------------------
# Image / Settings Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def screenshot_file(tmp_path: Path) -> Path:
    """A small black PNG written to disk."""
    path = tmp_path / "shot.png"
    cv2.imwrite(str(path), np.zeros((40, 60, 3), dtype=np.uint8))
    return path


@pytest.fixture
def make_settings(tmp_path: Path):
    """Factory for Settings with a key and a tmp reply log directory."""

    def _make(api_key: str = "test-key", **overrides) -> Settings:
        settings = Settings(gemini_api_key=SecretStr(api_key), **overrides)
        settings.logging.reply_log_dir = tmp_path / "logs"
        return settings

    return _make


# ---------------------------------------------------------------------------
# Overlay Fakes
# ---------------------------------------------------------------------------


class FakeSurface(OverlaySurface):
    def __init__(self, geometry: OverlayGeometry, fail_load: bool = False, load_delay: float = 0.0) -> None:
        self.geometry = geometry
        self.load_delay = load_delay
        self.markup: str | None = None
        self.visible = False
        self.close_calls = 0
        self._fail_load = fail_load
        self._destroyed = False

    async def load(self, markup: str) -> None:
        if self.load_delay:
            await asyncio.sleep(self.load_delay)
        if self._fail_load:
            raise OverlayError("render failed")
        self.markup = markup

    def show_inactive(self) -> None:
        self.visible = True

    def close(self) -> None:
        self.close_calls += 1
        self.visible = False
        self._destroyed = True

    @property
    def is_destroyed(self) -> bool:
        return self._destroyed


class FakeBackend(OverlayBackend):
    def __init__(self, work_area: tuple[int, int] = (1920, 1040)) -> None:
        self.work_area = work_area
        self.surfaces: list[FakeSurface] = []
        self.fail_next_load = False
        self.load_delay = 0.0

    def work_area_size(self) -> tuple[int, int]:
        return self.work_area

    def create_surface(self, geometry: OverlayGeometry) -> OverlaySurface:
        surface = FakeSurface(geometry, fail_load=self.fail_next_load, load_delay=self.load_delay)
        self.fail_next_load = False
        self.surfaces.append(surface)
        return surface

    @property
    def visible_surfaces(self) -> list[FakeSurface]:
        return [s for s in self.surfaces if s.visible]


@pytest.fixture
def fake_backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def overlay_config() -> OverlayConfig:
    return OverlayConfig(dismiss_after=0.05)


# ---------------------------------------------------------------------------
# Window Fakes
# ---------------------------------------------------------------------------


class FakeWindow(AppWindow):
    def __init__(self, origin: str, visible: bool = True, destroyed: bool = False) -> None:
        self._origin = origin
        self.visible = visible
        self.destroyed = destroyed
        self.events: list[str] = []

    @property
    def origin(self) -> str:
        return self._origin

    def is_visible(self) -> bool:
        return self.visible

    def is_destroyed(self) -> bool:
        return self.destroyed

    def hide(self) -> None:
        self.visible = False
        self.events.append("hide")

    def show(self) -> None:
        self.visible = True
        self.events.append("show")


class FakeEnumerator(WindowEnumerator):
    def __init__(self, windows: list[AppWindow]) -> None:
        self.windows = windows

    def list_windows(self) -> list[AppWindow]:
        return list(self.windows)


@pytest.fixture
def main_window() -> FakeWindow:
    return FakeWindow("http://localhost:5173/")


# ---------------------------------------------------------------------------
# Mock Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def mock_screenshot_source(screenshot_file: Path) -> AsyncMock:
    """A mock ScreenshotSource returning the sample screenshot."""
    mock = AsyncMock()
    mock.take_screenshot.return_value = screenshot_file
    return mock


@pytest.fixture
def mock_vision_client() -> AsyncMock:
    """A mock VisionClient; tests set analyze.return_value."""
    mock = AsyncMock()
    mock.model = "mock-model"
    return mock
