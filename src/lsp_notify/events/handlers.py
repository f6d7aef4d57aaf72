# src/lsp_notify/events/handlers.py

from __future__ import annotations

"""
Protocol event handlers.

Three independent entry points translate backend events into registry mutations:
- progress ($/progress): named tasks with optional percentage
- sync ($/syncResponse): per-file status records
- message (window/showMessage): one-shot text, bypasses the registry

Every handler first checks the exclusion set by backend name.
"""

import logging
import posixpath
import re
from collections.abc import Iterable
from typing import Any

from ..core.display import DisplayAdapter
from ..core.models import Readiness, Severity
from ..core.ports import BackendHost
from ..core.readiness import ReadinessTracker
from ..core.registry import NotificationRegistry
from ..core.removal import RemovalScheduler
from .dispatch import PROGRESS, SHOW_MESSAGE, SYNC_RESPONSE, EventBus, EventContext

logger = logging.getLogger(__name__)

MARKDOWN_LINK_REGEX = re.compile(r"\[([^\]]+)\]\(([^)]+)\)")

SYNC_KIND_READY = 1
SYNC_KIND_WARN = 3
SYNC_KIND_ERROR = 4

PROGRESS_KINDS = frozenset({"begin", "report", "end"})


def clean_status_message(raw: Any) -> str:
    """Flatten markdown links: "[text](url)" -> "text url"."""
    return MARKDOWN_LINK_REGEX.sub(r"\1 \2", str(raw or ""))


def resource_basename(resource_id: str) -> str:
    return posixpath.basename(resource_id.rstrip("/")) or resource_id


def sync_kind_to_state(kind: Any) -> tuple[Readiness, Severity]:
    if kind == SYNC_KIND_READY:
        return Readiness.READY, Severity.INFO
    if kind == SYNC_KIND_WARN:
        return Readiness.PENDING, Severity.WARN
    if kind == SYNC_KIND_ERROR:
        return Readiness.PENDING, Severity.ERROR
    return Readiness.PENDING, Severity.INFO


def _as_dict(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


class EventHandlers:
    def __init__(
            self,
            *,
            registry: NotificationRegistry,
            removal: RemovalScheduler,
            readiness: ReadinessTracker,
            display: DisplayAdapter,
            host: BackendHost,
            excludes: Iterable[str] = (),
    ) -> None:
        self._registry = registry
        self._removal = removal
        self._readiness = readiness
        self._display = display
        self._host = host
        self._excludes = frozenset(excludes)

    def register(self, bus: EventBus) -> None:
        bus.subscribe(PROGRESS, self.handle_progress)
        bus.subscribe(SYNC_RESPONSE, self.handle_sync)
        bus.subscribe(SHOW_MESSAGE, self.handle_message)

    def _client_name(self, ctx: EventContext) -> str | None:
        """Backend name, or None when the backend is excluded."""
        name = self._host.client_name(ctx.client_id) or str(ctx.client_id)
        if name in self._excludes:
            logger.debug("Ignoring event from excluded backend %s", name)
            return None
        return name

    def _resources(self, ctx: EventContext) -> list[str]:
        return list(self._host.resources_for_client(ctx.client_id) or [])

    def handle_progress(self, source: Any, payload: Any, ctx: EventContext) -> None:
        name = self._client_name(ctx)
        if name is None:
            return

        payload = _as_dict(payload)
        value = _as_dict(payload.get("value"))
        task_id = payload.get("token")
        kind = value.get("kind")
        if kind not in PROGRESS_KINDS:
            logger.debug("Unknown progress kind %r from %s", kind, name)
            return

        client = self._registry.get_or_create_client(ctx.client_id, name)
        task = client.get_or_create_task(task_id, value.get("title"), value.get("message"))

        if kind == "begin":
            if value.get("percentage") is not None:
                task.report(task.message, value.get("percentage"))
        elif kind == "report":
            for resource_id in self._resources(ctx):
                self._readiness.mark_pending(resource_id)
            task.report(value.get("message"), value.get("percentage"))
        elif kind == "end":
            for resource_id in self._resources(ctx):
                self._readiness.mark_ready(resource_id)
            task.message = value.get("message") or "Complete"
            self._removal.schedule_task_removal(ctx.client_id, task_id)

        self._registry.request_update()

    def handle_sync(self, source: Any, payload: Any, ctx: EventContext) -> None:
        name = self._client_name(ctx)
        if name is None:
            return

        statuses = _as_dict(payload).get("fileStatuses")
        if not isinstance(statuses, dict):
            return

        new_client = self._registry.get_client(ctx.client_id) is None
        client = self._registry.get_or_create_client(ctx.client_id, name)

        for resource_id in self._resources(ctx):
            file_status = statuses.get(resource_id)
            if file_status is None:
                self._readiness.mark_unattached(resource_id)
                continue

            file_status = _as_dict(file_status)
            message = clean_status_message(file_status.get("statusMessage"))
            status, severity = sync_kind_to_state(file_status.get("kind"))
            logger.debug("%s: %s", resource_basename(resource_id), message)

            if status == Readiness.READY:
                first_fire = self._readiness.mark_ready(resource_id)
                existing = client.tasks.get(resource_id)
                # Readiness is shared across clients; this client's own task decides whether
                # it still needs completing. A removed task is not resurrected.
                if new_client or first_fire or (existing is not None and existing.status != Readiness.READY):
                    task = client.get_or_create_task(resource_id, resource_basename(resource_id))
                    task.update(Readiness.READY, Severity.INFO, "Complete")
                    self._removal.schedule_task_removal(ctx.client_id, resource_id)
            else:
                task = client.get_or_create_task(resource_id, resource_basename(resource_id))
                task.update(status, severity, message)
                self._readiness.mark_pending(resource_id)

        self._registry.request_update()

    def handle_message(self, source: Any, payload: Any, ctx: EventContext) -> None:
        if self._client_name(ctx) is None:
            return
        payload = _as_dict(payload)
        message = str(payload.get("message") or "")
        self._display.notify_once(message, Severity.from_message_type(payload.get("type")))
