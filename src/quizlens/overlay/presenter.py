"""Lifecycle of the single answer overlay.

The presenter moves between two states, Absent and Displayed. ``show``
always tears down the current surface before creating a new one, and
every surface gets an auto-dismiss timer. Timers carry the generation
they were armed in; a timer whose generation is no longer current does
nothing when it fires, so a replaced overlay can never be hidden (or
revived) by its predecessor's timer.
"""

from __future__ import annotations

import asyncio
import logging

from quizlens.config.settings import OverlayConfig
from quizlens.overlay.base import (
    OverlayBackend,
    OverlaySurface,
    overlay_geometry,
    render_overlay_html,
)

logger = logging.getLogger(__name__)


class OverlayPresenter:
    """Owns at most one overlay surface at a time.

    Example usage::

        presenter = OverlayPresenter(QtOverlayBackend(), OverlayConfig())
        await presenter.show("B")
        ...
        await presenter.cleanup()
    """

    def __init__(self, backend: OverlayBackend, config: OverlayConfig | None = None) -> None:
        self._backend = backend
        self._config = config or OverlayConfig()
        self._surface: OverlaySurface | None = None
        self._content: str | None = None
        self._generation = 0
        self._timer: asyncio.TimerHandle | None = None

    @property
    def is_displayed(self) -> bool:
        return self._surface is not None

    @property
    def current_content(self) -> str | None:
        return self._content

    @property
    def generation(self) -> int:
        return self._generation

    async def show(self, content: str) -> bool:
        """Replace any current overlay with one showing ``content``.

        Returns False if the surface could not be created or rendered; in
        that case no surface is left behind.
        """
        await self.hide()

        cfg = self._config
        surface: OverlaySurface | None = None
        try:
            geometry = overlay_geometry(
                content,
                self._backend.work_area_size(),
                margin_x=cfg.margin_x,
                margin_bottom=cfg.margin_bottom,
                min_width=cfg.min_width,
                height=cfg.height,
                char_width=cfg.char_width,
                padding=cfg.padding,
            )
            surface = self._backend.create_surface(geometry)
            self._surface = surface
            self._content = content
            generation = self._generation

            await surface.load(render_overlay_html(content))
            if generation != self._generation:
                # Replaced or hidden while the content was loading.
                return False
            surface.show_inactive()
        except asyncio.CancelledError:
            self._discard(surface)
            raise
        except Exception as e:
            logger.error("Error showing answer overlay: %s", e)
            self._discard(surface)
            return False

        self._arm_timer(generation)
        logger.info("Overlay showing %r for %.1fs", content, cfg.dismiss_after)
        return True

    async def hide(self) -> None:
        """Close the current overlay, if any. Idempotent."""
        self._teardown()

    async def cleanup(self) -> None:
        """Release the overlay at application shutdown."""
        self._teardown()

    def _teardown(self) -> None:
        self._generation += 1
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        surface, self._surface = self._surface, None
        self._content = None
        if surface is None:
            return
        self._close(surface)

    def _arm_timer(self, generation: int) -> None:
        loop = asyncio.get_running_loop()
        self._timer = loop.call_later(self._config.dismiss_after, self._on_timer, generation)

    def _on_timer(self, generation: int) -> None:
        if generation != self._generation:
            logger.debug("Stale dismiss timer (generation %d) ignored", generation)
            return
        self._timer = None
        logger.debug("Overlay dismissed after %.1fs", self._config.dismiss_after)
        self._teardown()

    def _discard(self, surface: OverlaySurface | None) -> None:
        """Drop a half-built surface without disturbing a newer one."""
        if surface is None:
            return
        if self._surface is surface:
            self._surface = None
            self._content = None
            self._generation += 1
        self._close(surface)

    @staticmethod
    def _close(surface: OverlaySurface) -> None:
        try:
            if not surface.is_destroyed:
                surface.close()
        except Exception as e:
            logger.warning("Error closing overlay surface: %s", e)
