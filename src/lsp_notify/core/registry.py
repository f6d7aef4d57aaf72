# src/lsp_notify/core/registry.py

from __future__ import annotations

import logging
from collections.abc import Hashable

from .display import DisplayAdapter
from .models import Client, Severity

logger = logging.getLogger(__name__)


class NotificationRegistry:
    """
    Aggregate view over every backend client and its tasks.

    One registry per display surface. Every mutation is followed by request_update(),
    which is the only place that talks to the display adapter.
    """

    def __init__(self, display: DisplayAdapter) -> None:
        self.display = display
        self.clients: dict[Hashable, Client] = {}

    def get_or_create_client(self, client_id: Hashable, name: str | None = None) -> Client:
        client = self.clients.get(client_id)
        if client is None:
            client = Client(name=name or str(client_id))
            self.clients[client_id] = client
            logger.debug("Client registered id=%s name=%s", client_id, client.name)
        return client

    def get_client(self, client_id: Hashable) -> Client | None:
        return self.clients.get(client_id)

    def remove_client(self, client_id: Hashable) -> None:
        if self.clients.pop(client_id, None) is not None:
            logger.debug("Client removed id=%s", client_id)

    def client_count(self) -> int:
        return len(self.clients)

    def aggregate_severity(self) -> Severity:
        return max((c.aggregate_severity() for c in self.clients.values()), default=Severity.INFO)

    def render(self) -> str:
        if not self.clients:
            return "Complete"
        return "\n\n".join(c.render() for c in self.clients.values())

    def request_update(self) -> None:
        """
        Redraw after a mutation.

        1. open the notification if none is shown (only when there is something to show)
        2. clients left: push the body at the aggregate severity
        3. no clients left: final render, spinner stops, handle is released
        """
        count = self.client_count()
        if not self.display.is_open:
            if count == 0:
                return
            self.display.open()

        if count > 0:
            self.display.push(self.render(), self.aggregate_severity())
        else:
            self.display.finalize(self.render())
