# src/lsp_notify/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The core depends on Protocols instead of concrete implementations.
This keeps display surfaces, timers and the editor host swappable and makes testing easier.
"""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Protocol

from .models import Severity

ReadyCallback = Callable[[str], None]
# Called with the resource id when it becomes ready.


@dataclass(slots=True, frozen=True)
class NotifyOptions:
    """
    Per-call display options.

    - replace: handle returned by an earlier notify() call; ask the surface to update it in place
    - timeout: seconds to keep the notification visible; None keeps it until replaced
    - height: line count hint so replaceable surfaces can resize to fit the body
    - silent: do not show anything to the user (capability probe)
    """

    title: str | None = None
    icon: str | None = None
    timeout: float | None = None
    replace: Any = None
    hide_from_history: bool = False
    height: int | None = None
    silent: bool = False


class NotificationSurface(Protocol):
    """
    Host-side display.

    notify() returns a handle usable as NotifyOptions.replace, or None when the surface
    cannot replace. message=None means "keep the current body" (icon-only update).
    Surfaces without replace support raise when NotifyOptions.replace is set.
    """

    def notify(
            self,
            message: str | None,
            severity: Severity | None = None,
            options: NotifyOptions | None = None,
    ) -> Any: ...


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    """Deferred callbacks (grace periods, spinner ticks)."""

    def schedule_after(self, delay_seconds: float, callback: Callable[[], None]) -> TimerHandle: ...


class BackendHost(Protocol):
    """
    Editor-side knowledge about attached backends.

    Resource ids are document paths/URIs, the same keys backends use in sync payloads.
    """

    def client_name(self, client_id: Any) -> str | None: ...
    def resources_for_client(self, client_id: Any) -> list[str]: ...
