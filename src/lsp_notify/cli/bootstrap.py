# src/lsp_notify/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- picks the notification surface from settings,
- wires surface, scheduler and host into a Notifier,
- subscribes it to an EventBus.
"""

from __future__ import annotations

import logging
from typing import TextIO

from ..config import Settings, get_settings
from ..connectors.console_connector import ConsoleSurface, TerminalSurface
from ..core.clock import AsyncioScheduler
from ..core.ports import BackendHost, NotificationSurface, Scheduler
from ..events.dispatch import EventBus
from ..notifier import Notifier

logger = logging.getLogger(__name__)


def create_local_surface(settings: Settings | None = None, *, stream: TextIO | None = None) -> NotificationSurface:
    """Console or terminal surface. Matrix needs a running loop, see create_surface()."""
    if settings is None:
        settings = get_settings()
    if settings.surface == "console":
        return ConsoleSurface(stream, default_title=settings.title)
    return TerminalSurface(stream, default_title=settings.title)


async def create_surface(settings: Settings | None = None, *, stream: TextIO | None = None) -> NotificationSurface:
    """
    Build the configured surface.

    If Matrix is selected but cannot be set up, falls back to the terminal so events
    are still visible.
    """
    if settings is None:
        settings = get_settings()

    if settings.surface == "matrix":
        from ..connectors.matrix_client import create_matrix_client
        from ..connectors.matrix_surface import MatrixSurface

        if not settings.matrix_room:
            logger.error("Matrix surface selected but LSP_NOTIFY_MATRIX_ROOM is not set")
        else:
            client = await create_matrix_client(settings)
            if client is not None:
                return MatrixSurface(client, settings.matrix_room, default_title=settings.title)
        logger.warning("Falling back to terminal surface")
        return TerminalSurface(stream, default_title=settings.title)

    return create_local_surface(settings, stream=stream)


def create_notifier(
        surface: NotificationSurface,
        host: BackendHost,
        *,
        settings: Settings | None = None,
        scheduler: Scheduler | None = None,
        bus: EventBus | None = None,
) -> tuple[Notifier, EventBus]:
    """
    Create a Notifier bound to `surface` and subscribe it to `bus` (a new one if None).

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    """
    if settings is None:
        settings = get_settings()
    if scheduler is None:
        scheduler = AsyncioScheduler()
    if bus is None:
        bus = EventBus()

    notifier = Notifier(surface, scheduler, host, settings.notifier_options())
    notifier.attach(bus)
    return notifier, bus
