"""Abstract base class for screenshot sources.

All screenshot implementations must conform to this interface, enabling
the capture cycle to swap between a real screen grab and file-based test
sources without changing the rest of the pipeline.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Callable

logger = logging.getLogger(__name__)


def noop() -> None:
    """Callback that does nothing."""


class ScreenshotSource(ABC):
    """Abstract interface for taking a screenshot and saving it to disk.

    Example usage::

        source = MssScreenshotSource(output_dir=Path("screenshots"))
        path = await source.take_screenshot(noop, noop)
    """

    @abstractmethod
    async def take_screenshot(
        self,
        on_before_hide: Callable[[], None],
        on_after_show: Callable[[], None],
    ) -> Path:
        """Capture the screen and return the path of the saved image.

        Args:
            on_before_hide: Called before the source hides anything of its
                            own. The capture cycle passes a no-op since it
                            manages window visibility itself.
            on_after_show: Called once anything hidden is shown again.

        Raises:
            CaptureError: If the screen cannot be captured or saved.
        """
        ...


class CaptureError(Exception):
    """Raised when a screenshot cannot be taken."""
