"""The capture cycle that ties the whole system together.

Coordinates: hide host window -> screenshot -> vision query -> overlay
-> restore host window. The cycle always ends with something on screen:
either the parsed answer or the sentinel "N".
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime

from pydantic import BaseModel, Field

from quizlens.capture.base import ScreenshotSource, noop
from quizlens.config.settings import Settings
from quizlens.domain.models import SENTINEL_CONTENT, CaptureSession, DisplayMode, VisionResult
from quizlens.interpreter.base import VisionClient
from quizlens.overlay.presenter import OverlayPresenter
from quizlens.windows.base import (
    DEFAULT_MAIN_WINDOW_ORIGINS,
    AppWindow,
    WindowEnumerator,
    find_main_window,
)

logger = logging.getLogger(__name__)


class CycleConfig(BaseModel):
    settle_delay: float = Field(default=0.5, ge=0)
    hide_main_window: bool = Field(default=True)
    main_window_origins: list[str] = Field(default_factory=lambda: list(DEFAULT_MAIN_WINDOW_ORIGINS))
    display_mode: DisplayMode = Field(default=DisplayMode.TOKEN)

    @classmethod
    def from_settings(cls, settings: Settings) -> CycleConfig:
        return cls(
            settle_delay=settings.capture.settle_delay,
            hide_main_window=settings.capture.hide_main_window,
            main_window_origins=settings.windows.main_window_origins,
            display_mode=DisplayMode(settings.overlay.display_mode),
        )


def resolve_content(result: VisionResult | None, mode: DisplayMode = DisplayMode.TOKEN) -> str:
    """Text to show for a vision result; the sentinel when there is no answer."""
    if result is None or result.token is None:
        return SENTINEL_CONTENT
    if mode is DisplayMode.PREVIEW and result.preview:
        return result.preview
    return result.token.upper()


class CaptureOrchestrator:
    """Runs one capture-and-answer cycle per call.

    The orchestrator keeps no state between cycles; the only shared
    resource is the presenter's overlay, which ``show`` replaces. Callers
    that trigger cycles from a hotkey should not start a new cycle while
    one is in flight.
    """

    def __init__(
        self,
        screenshots: ScreenshotSource,
        client: VisionClient,
        presenter: OverlayPresenter,
        windows: WindowEnumerator | None = None,
        config: CycleConfig | None = None,
    ) -> None:
        self._screenshots = screenshots
        self._client = client
        self._presenter = presenter
        self._windows = windows
        self._config = config or CycleConfig()

    async def run_cycle(self) -> CaptureSession:
        """Capture the screen, answer the MCQ on it and show the result."""
        session = CaptureSession()
        main_window: AppWindow | None = None
        logger.info("Starting MCQ capture and analysis...")

        try:
            main_window = self._hide_main_window(session)
            await self._presenter.hide()

            await asyncio.sleep(self._config.settle_delay)

            session.screenshot_path = await self._screenshots.take_screenshot(noop, noop)
            session.captured_at = datetime.now()

            result = await self._client.analyze(session.screenshot_path)
            logger.info(
                "Vision outcome: %s (token=%s)", result.outcome.value, result.token
            )

            content = resolve_content(result, self._config.display_mode)
            if await self._presenter.show(content):
                session.displayed_content = content
        except Exception as e:
            logger.exception("Error in MCQ capture and analysis: %s", e)
            session.error = str(e) or type(e).__name__
            if await self._presenter.show(SENTINEL_CONTENT):
                session.displayed_content = SENTINEL_CONTENT
        finally:
            self._restore_main_window(main_window, session)

        session.finished_at = datetime.now()
        return session

    def _hide_main_window(self, session: CaptureSession) -> AppWindow | None:
        if self._windows is None or not self._config.hide_main_window:
            return None
        window = find_main_window(self._windows.list_windows(), self._config.main_window_origins)
        if window is None:
            logger.debug("No main window found")
            return None
        session.main_window_was_visible = window.is_visible()
        if session.main_window_was_visible:
            window.hide()
            logger.debug("Main window hidden for capture")
        return window

    @staticmethod
    def _restore_main_window(window: AppWindow | None, session: CaptureSession) -> None:
        if window is None or not session.main_window_was_visible:
            return
        try:
            if not window.is_destroyed():
                window.show()
        except Exception as e:
            logger.warning("Could not restore main window: %s", e)
