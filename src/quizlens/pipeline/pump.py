from __future__ import annotations

import asyncio
import logging

from PyQt6.QtWidgets import QApplication

log = logging.getLogger(__name__)


class QtEventPump:
    """
    Periodically drains Qt's event queue from an asyncio task.

    Lets a capture cycle and its overlay run inside ``asyncio.run`` without
    handing the main thread to ``QApplication.exec()``.
    """

    def __init__(self, *, app: QApplication, tick_ms: int = 16) -> None:
        self._app = app
        self._tick = max(5, int(tick_ms)) / 1000.0
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.get_running_loop().create_task(self._run())

    async def stop(self) -> None:
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        self._app.processEvents()

    async def _run(self) -> None:
        while True:
            try:
                self._app.processEvents()
            except Exception:
                log.exception("Qt event processing failed")
            await asyncio.sleep(self._tick)

    async def __aenter__(self) -> QtEventPump:
        self.start()
        return self

    async def __aexit__(self, exc_type: type | None, exc_val: Exception | None, exc_tb: object) -> None:
        await self.stop()
