# src/lsp_notify/core/readiness.py

from __future__ import annotations

import logging

from .models import Readiness
from .ports import ReadyCallback

logger = logging.getLogger(__name__)


class ReadinessTracker:
    """
    Per-resource readiness, independent of whether the resource has a visible task.

    Ready callbacks fire once per transition into READY, in registration order.
    """

    def __init__(self) -> None:
        self._status: dict[str, Readiness] = {}
        self._callbacks: list[ReadyCallback] = []

    def subscribe(self, callback: ReadyCallback) -> None:
        self._callbacks.append(callback)

    def get_status(self, resource_id: str) -> Readiness:
        return self._status.get(resource_id, Readiness.UNATTACHED)

    def on_attach(self, resource_id: str) -> None:
        """Start tracking a resource as pending, unless it already has a status."""
        self._status.setdefault(resource_id, Readiness.PENDING)

    def mark_pending(self, resource_id: str) -> None:
        self._status[resource_id] = Readiness.PENDING

    def mark_unattached(self, resource_id: str) -> None:
        self._status[resource_id] = Readiness.UNATTACHED

    def mark_ready(self, resource_id: str) -> bool:
        """Set READY; returns True (and fires callbacks) if the resource was not ready before."""
        first_fire = self.get_status(resource_id) != Readiness.READY
        self._status[resource_id] = Readiness.READY
        if first_fire:
            logger.debug("Resource ready: %s", resource_id)
            self._fire_ready(resource_id)
        return first_fire

    def _fire_ready(self, resource_id: str) -> None:
        for callback in list(self._callbacks):
            try:
                callback(resource_id)
            except Exception:
                logger.exception("Ready callback failed resource=%s", resource_id)
