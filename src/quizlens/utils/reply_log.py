"""Best-effort on-disk log of raw model replies.

Each reply is written to its own timestamped text file so a wrong answer
can be inspected later. Write failures are logged and otherwise ignored.
"""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path

logger = logging.getLogger(__name__)


class ReplyLog:
    """Writes raw replies to ``<directory>/mcq_<timestamp>.txt``."""

    def __init__(self, directory: Path | str = "logs") -> None:
        self._directory = Path(directory)

    @property
    def directory(self) -> Path:
        return self._directory

    def write(self, text: str, when: datetime | None = None) -> Path | None:
        """Write ``text`` to a new file. Returns its path, or None on failure."""
        stamp = (when or datetime.now()).strftime("%Y%m%d_%H%M%S_%f")
        path = self._directory / f"mcq_{stamp}.txt"
        try:
            self._directory.mkdir(parents=True, exist_ok=True)
            path.write_text(text, encoding="utf-8")
        except OSError as e:
            logger.warning("Could not write reply log %s: %s", path, e)
            return None
        logger.debug("Reply written to %s", path)
        return path
