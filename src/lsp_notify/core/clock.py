# src/lsp_notify/core/clock.py

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable

logger = logging.getLogger(__name__)


class AsyncioScheduler:
    """
    Scheduler port backed by an asyncio event loop.

    Callbacks run on the loop thread, one at a time, so the registry never needs a lock.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def schedule_after(self, delay_seconds: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
        delay = max(0.0, float(delay_seconds))
        return self.loop.call_later(delay, self._run, callback)

    @staticmethod
    def _run(callback: Callable[[], None]) -> None:
        try:
            callback()
        except Exception:
            logger.exception("Deferred callback failed: %r", callback)
