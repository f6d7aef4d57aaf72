# src/lsp_notify/notifier.py

from __future__ import annotations

import logging

from .core.display import DisplayAdapter
from .core.models import Readiness
from .core.options import NotifierOptions
from .core.ports import BackendHost, NotificationSurface, ReadyCallback, Scheduler
from .core.readiness import ReadinessTracker
from .core.registry import NotificationRegistry
from .core.removal import RemovalScheduler
from .events.dispatch import EventBus
from .events.handlers import EventHandlers

logger = logging.getLogger(__name__)


class Notifier:
    """
    Everything that belongs to one display surface, wired together.

    Usage:
        notifier = Notifier(surface, scheduler, host, options)
        notifier.attach(bus)
        notifier.on_ready(lambda resource_id: ...)
        notifier.on_attach("/src/app.py")
        notifier.get_status("/src/app.py")
    """

    def __init__(
            self,
            surface: NotificationSurface,
            scheduler: Scheduler,
            host: BackendHost,
            options: NotifierOptions | None = None,
    ) -> None:
        self.options = options or NotifierOptions()
        self.display = DisplayAdapter(surface, scheduler, self.options)
        self.registry = NotificationRegistry(self.display)
        self.removal = RemovalScheduler(
            self.registry,
            scheduler,
            task_timeout=self.options.task_timeout,
            client_timeout=self.options.client_timeout,
        )
        self.readiness = ReadinessTracker()
        self.handlers = EventHandlers(
            registry=self.registry,
            removal=self.removal,
            readiness=self.readiness,
            display=self.display,
            host=host,
            excludes=self.options.excludes,
        )

    def attach(self, bus: EventBus) -> None:
        """Subscribe the progress, sync and message handlers to a bus."""
        self.handlers.register(bus)
        logger.info("Notifier attached (replace=%s)", self.display.supports_replace)

    def on_ready(self, callback: ReadyCallback) -> None:
        self.readiness.subscribe(callback)

    def on_attach(self, resource_id: str) -> None:
        self.readiness.on_attach(resource_id)

    def get_status(self, resource_id: str) -> Readiness:
        return self.readiness.get_status(resource_id)

    @property
    def is_idle(self) -> bool:
        return self.registry.client_count() == 0 and not self.display.is_open
