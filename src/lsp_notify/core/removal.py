# src/lsp_notify/core/removal.py

from __future__ import annotations

import logging
from collections.abc import Hashable

from .models import Client
from .ports import Scheduler
from .registry import NotificationRegistry

logger = logging.getLogger(__name__)


class RemovalScheduler:
    """
    Two-stage delayed removal: the task after task_timeout, then its client after
    client_timeout if the client still has no tasks at that point.

    Timers are never cancelled; each one re-checks the registry when it fires.
    """

    def __init__(
            self,
            registry: NotificationRegistry,
            scheduler: Scheduler,
            *,
            task_timeout: float,
            client_timeout: float,
    ) -> None:
        self._registry = registry
        self._scheduler = scheduler
        self._task_timeout = task_timeout
        self._client_timeout = client_timeout

    def schedule_task_removal(self, client_id: Hashable, task_id: Hashable) -> None:
        self._scheduler.schedule_after(
            self._task_timeout,
            lambda: self._remove_task(client_id, task_id),
        )

    def _remove_task(self, client_id: Hashable, task_id: Hashable) -> None:
        client = self._registry.get_client(client_id)
        if client is None:
            return

        client.remove_task(task_id)
        logger.debug("Task removed client=%s task=%s", client_id, task_id)
        self._registry.request_update()

        if client.task_count() == 0:
            self._scheduler.schedule_after(
                self._client_timeout,
                lambda: self._remove_client(client_id, client),
            )

    def _remove_client(self, client_id: Hashable, client: Client) -> None:
        # A task may have appeared during the grace period, or the client may have been
        # removed and registered again under the same id.
        if self._registry.get_client(client_id) is not client or client.task_count() != 0:
            return
        self._registry.remove_client(client_id)
        self._registry.request_update()
