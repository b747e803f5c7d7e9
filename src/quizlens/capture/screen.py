"""Screen capture implementation using mss.

Grabs one monitor and writes it to a timestamped PNG file that the
vision client reads back.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from pathlib import Path
from typing import Callable

import cv2
import mss
from mss.exception import ScreenShotError
import numpy as np

from quizlens.capture.base import CaptureError, ScreenshotSource
from quizlens.utils.imaging import bgra_to_bgr

logger = logging.getLogger(__name__)


class MssScreenshotSource(ScreenshotSource):
    """Captures a monitor with mss.

    Runs the blocking grab and file write in a thread pool executor to avoid
    blocking the async event loop.
    """

    def __init__(self, output_dir: Path | str = "screenshots", monitor_index: int = 1) -> None:
        self._output_dir = Path(output_dir)
        self._monitor_index = monitor_index

    async def take_screenshot(
        self,
        on_before_hide: Callable[[], None],
        on_after_show: Callable[[], None],
    ) -> Path:
        """Grab the configured monitor and save it as PNG."""
        on_before_hide()
        try:
            loop = asyncio.get_running_loop()
            path = await loop.run_in_executor(None, self._capture_sync)
        finally:
            on_after_show()
        logger.info("Screenshot taken: %s", path)
        return path

    def _capture_sync(self) -> Path:
        """Synchronous grab and save (runs in thread pool)."""
        try:
            with mss.mss() as sct:
                monitors = sct.monitors
                if self._monitor_index >= len(monitors):
                    raise CaptureError(
                        f"Monitor {self._monitor_index} not available ({len(monitors) - 1} found)"
                    )
                shot = sct.grab(monitors[self._monitor_index])
                image = bgra_to_bgr(np.asarray(shot))
        except ScreenShotError as e:
            raise CaptureError(f"Screen grab failed: {e}") from e

        stamp = datetime.now().strftime("%Y%m%d_%H%M%S_%f")
        path = self._output_dir / f"screenshot_{stamp}.png"
        try:
            self._output_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise CaptureError(f"Cannot create screenshot directory {self._output_dir}: {e}") from e
        if not cv2.imwrite(str(path), image):
            raise CaptureError(f"Failed to write screenshot to {path}")
        return path
