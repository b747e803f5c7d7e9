"""Overlay surface abstractions.

A surface is one native window showing the answer. The presenter creates
surfaces through an ``OverlayBackend`` and owns at most one at a time;
toolkits plug in by implementing both classes.
"""

from __future__ import annotations

import html
import logging
from abc import ABC, abstractmethod

from quizlens.domain.models import OverlayGeometry

logger = logging.getLogger(__name__)


OVERLAY_TEMPLATE = """<!DOCTYPE html>
<html>
<body style="margin:0;padding:0;">
<div style="background:white;color:black;font-size:20px;font-weight:bold;\
padding:6px 10px;border:1px solid #ccc;border-radius:6px;">{content}</div>
</body>
</html>
"""


class OverlaySurface(ABC):
    """A borderless, always-on-top, non-focusable window."""

    @abstractmethod
    async def load(self, markup: str) -> None:
        """Render ``markup`` into the surface before it is shown."""
        ...

    @abstractmethod
    def show_inactive(self) -> None:
        """Show the surface without taking keyboard focus."""
        ...

    @abstractmethod
    def close(self) -> None:
        """Release the native window. Safe to call more than once."""
        ...

    @property
    @abstractmethod
    def is_destroyed(self) -> bool:
        ...


class OverlayBackend(ABC):
    """Creates surfaces and reports the usable screen area."""

    @abstractmethod
    def work_area_size(self) -> tuple[int, int]:
        """Width and height of the primary screen's work area."""
        ...

    @abstractmethod
    def create_surface(self, geometry: OverlayGeometry) -> OverlaySurface:
        """Create a hidden surface at ``geometry``.

        Raises:
            OverlayError: If the native window cannot be created.
        """
        ...


class OverlayError(Exception):
    """Raised when an overlay surface cannot be created or rendered."""


def render_overlay_html(content: str) -> str:
    """Embed ``content`` as escaped text in the overlay markup."""
    return OVERLAY_TEMPLATE.format(content=html.escape(content, quote=True))


def overlay_geometry(
    content: str,
    work_area: tuple[int, int],
    margin_x: int = 20,
    margin_bottom: int = 70,
    min_width: int = 100,
    height: int = 50,
    char_width: int = 12,
    padding: int = 40,
) -> OverlayGeometry:
    """Bottom-left anchored rectangle wide enough for ``content``."""
    _, screen_height = work_area
    width = max(min_width, padding + char_width * len(content))
    return OverlayGeometry(
        x=margin_x,
        y=max(0, screen_height - margin_bottom),
        width=width,
        height=height,
    )
