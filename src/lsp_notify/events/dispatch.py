# src/lsp_notify/events/dispatch.py

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)

PROGRESS = "$/progress"
SHOW_MESSAGE = "window/showMessage"
SYNC_RESPONSE = "$/syncResponse"


@dataclass(slots=True, frozen=True)
class EventContext:
    """Where an inbound protocol event came from."""

    client_id: Any
    method: str | None = None


EventHandler = Callable[[Any, Any, EventContext], None]
# (source, payload, context). source is the transport's error slot; handlers may ignore it.


class EventBus:
    """
    Ordered subscriber lists per protocol method.

    Subscribers run in registration order. A failing subscriber is logged and does not
    stop the ones after it.
    """

    def __init__(self) -> None:
        self._subscribers: dict[str, list[EventHandler]] = {}

    def subscribe(self, method: str, handler: EventHandler) -> None:
        self._subscribers.setdefault(method, []).append(handler)

    def unsubscribe(self, method: str, handler: EventHandler) -> None:
        handlers = self._subscribers.get(method)
        if handlers and handler in handlers:
            handlers.remove(handler)

    def subscribers(self, method: str) -> list[EventHandler]:
        return list(self._subscribers.get(method, []))

    def dispatch(self, method: str, source: Any, payload: Any, ctx: EventContext) -> int:
        """Deliver one event; returns how many subscribers completed without raising."""
        handlers = self.subscribers(method)
        if not handlers:
            logger.debug("No subscribers for %s", method)
            return 0

        ok = 0
        for handler in handlers:
            try:
                handler(source, payload, ctx)
                ok += 1
            except Exception:
                logger.exception("Subscriber failed method=%s client=%s", method, ctx.client_id)
        return ok
