# src/lsp_notify/cli/replay.py

"""
Event replay.

Feeds a JSON-lines recording of backend events through the subscriber lists, so a
surface can be tried without an editor. One event per line:

    {"type": "attach", "client_id": 1, "name": "pyright", "resources": ["/src/app.py"]}
    {"type": "progress", "client_id": 1, "delay": 0.2, "params": {"token": "t1", "value": {...}}}
    {"type": "sync", "client_id": 1, "params": {"fileStatuses": {"/src/app.py": {...}}}}
    {"type": "message", "client_id": 1, "params": {"type": 2, "message": "..."}}

"delay" is in seconds, relative to the previous event.
"""

from __future__ import annotations

import asyncio
import json
import logging
import time
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from ..events.dispatch import PROGRESS, SHOW_MESSAGE, SYNC_RESPONSE, EventBus, EventContext
from ..notifier import Notifier

logger = logging.getLogger(__name__)

METHODS = {
    "progress": PROGRESS,
    "sync": SYNC_RESPONSE,
    "message": SHOW_MESSAGE,
}


@dataclass(slots=True)
class ReplayHost:
    """BackendHost fed by "attach" records."""

    names: dict[Any, str] = field(default_factory=dict)
    resources: dict[Any, list[str]] = field(default_factory=dict)

    def attach(self, client_id: Any, name: str, resources: Iterable[str]) -> None:
        self.names[client_id] = name
        self.resources.setdefault(client_id, [])
        for r in resources:
            if r not in self.resources[client_id]:
                self.resources[client_id].append(r)

    def client_name(self, client_id: Any) -> str | None:
        return self.names.get(client_id)

    def resources_for_client(self, client_id: Any) -> list[str]:
        return list(self.resources.get(client_id, []))


@dataclass(slots=True, frozen=True)
class ReplayEvent:
    type: str
    client_id: Any
    delay: float = 0.0
    params: Any = None
    name: str | None = None
    resources: tuple[str, ...] = ()


def parse_event_line(line: str) -> ReplayEvent | None:
    """Parse one JSON line. Blank lines and '#' comments yield None; bad records raise ValueError."""
    line = line.strip()
    if not line or line.startswith("#"):
        return None

    data = json.loads(line)
    if not isinstance(data, dict):
        raise ValueError("Expected JSON object")

    kind = str(data.get("type", "")).strip().lower()
    if kind != "attach" and kind not in METHODS:
        raise ValueError(f"Unknown event type: {kind!r}")

    try:
        delay = max(0.0, float(data.get("delay") or 0.0))
    except (TypeError, ValueError):
        delay = 0.0

    resources = data.get("resources") or []
    if not isinstance(resources, list):
        resources = []

    return ReplayEvent(
        type=kind,
        client_id=data.get("client_id"),
        delay=delay,
        params=data.get("params"),
        name=data.get("name"),
        resources=tuple(str(r) for r in resources),
    )


def apply_event(event: ReplayEvent, *, notifier: Notifier, bus: EventBus, host: ReplayHost) -> None:
    if event.type == "attach":
        host.attach(event.client_id, event.name or str(event.client_id), event.resources)
        for resource_id in event.resources:
            notifier.on_attach(resource_id)
        return

    method = METHODS[event.type]
    bus.dispatch(method, None, event.params, EventContext(client_id=event.client_id, method=method))


async def replay(
        lines: Iterable[str],
        *,
        notifier: Notifier,
        bus: EventBus,
        host: ReplayHost,
        speed: float = 1.0,
        max_wait: float = 30.0,
) -> int:
    """
    Replay events, then wait for the notification to close.

    Returns the number of events applied. Malformed lines are logged and skipped.
    """
    speed = max(0.01, float(speed))
    applied = 0

    for lineno, line in enumerate(lines, start=1):
        try:
            event = parse_event_line(line)
        except ValueError as e:
            logger.warning("Skipping line %d: %s", lineno, e)
            continue
        if event is None:
            continue

        if event.delay:
            await asyncio.sleep(event.delay / speed)
        apply_event(event, notifier=notifier, bus=bus, host=host)
        applied += 1

    deadline = time.monotonic() + max(0.0, float(max_wait))
    while not notifier.is_idle:
        if time.monotonic() >= deadline:
            logger.warning("Notification still open after %.1fs, giving up", max_wait)
            break
        await asyncio.sleep(0.05)

    return applied
