"""
Language-server progress notifications.

Components:
- core/models.py: Task, Client, Severity, Readiness
- core/registry.py: aggregate view over all clients, single redraw entry point
- core/removal.py: delayed task/client removal with fire-time re-checks
- core/display.py: replaceable vs append-only rendering, spinner loop
- core/readiness.py: per-resource readiness + ready callbacks
- events/: protocol event handlers and per-method subscriber lists
- notifier.py: wires the above for one display surface
"""

from .core.models import Readiness, Severity
from .core.options import IconConfig, NotifierOptions, ReplaceMode
from .events.dispatch import EventBus, EventContext
from .notifier import Notifier

__all__ = [
    "EventBus",
    "EventContext",
    "IconConfig",
    "Notifier",
    "NotifierOptions",
    "Readiness",
    "ReplaceMode",
    "Severity",
]
