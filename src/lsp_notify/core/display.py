# src/lsp_notify/core/display.py

from __future__ import annotations

"""
Display adapter.

Owns the single notification shown for all backends:
- opens it on the first update (closed -> open),
- pushes bodies, either replacing one notification in place or line-by-line,
- runs the spinner while a replaceable notification is open,
- emits a final "done" render and releases the handle (open -> closed).

Surface failures are logged and swallowed here; the caller's state is never touched.
"""

import logging
import math
from typing import Any

from .models import Severity
from .options import NotifierOptions, ReplaceMode
from .ports import NotificationSurface, NotifyOptions, Scheduler, TimerHandle

logger = logging.getLogger(__name__)

PROBE_MESSAGE = "lsp notify: test replace support"
OPENING_MESSAGE = "Opening"
FINAL_HEIGHT = 3


def probe_replace(surface: NotificationSurface) -> bool:
    """
    Check once whether the surface can update a notification in place.

    Sends a silent test notification and tries to replace it.
    Any exception (or no handle at all) means "append-only".
    """
    probe = NotifyOptions(hide_from_history=True, timeout=0.001, silent=True)
    try:
        handle = surface.notify(PROBE_MESSAGE, Severity.INFO, probe)
        if handle is None:
            return False
        surface.notify(
            PROBE_MESSAGE,
            Severity.INFO,
            NotifyOptions(replace=handle, hide_from_history=True, timeout=0.001, silent=True),
        )
    except Exception as e:
        logger.info("Surface cannot replace notifications, using append-only mode: %r", e)
        return False
    return True


def wrapped_line_count(body: str, width: int) -> int:
    width = max(1, int(width))
    return sum(max(1, math.ceil(len(line) / width)) for line in body.split("\n"))


class DisplayAdapter:
    def __init__(
            self,
            surface: NotificationSurface,
            scheduler: Scheduler,
            options: NotifierOptions,
    ) -> None:
        self._surface = surface
        self._scheduler = scheduler
        self._options = options

        if options.replace_mode == ReplaceMode.ALWAYS:
            self.supports_replace = True
        elif options.replace_mode == ReplaceMode.NEVER:
            self.supports_replace = False
        else:
            self.supports_replace = probe_replace(surface)
        logger.debug("Display adapter ready (supports_replace=%s)", self.supports_replace)

        self._open = False
        self._handle: Any = None
        self.spinner_frame = 0
        self._spinner_generation = 0
        self._spinner_timer: TimerHandle | None = None

    @property
    def is_open(self) -> bool:
        return self._open

    @property
    def handle(self) -> Any:
        return self._handle

    @property
    def spinner_running(self) -> bool:
        return self._spinner_timer is not None

    # ---- state transitions ----

    def open(self) -> None:
        if self._open:
            return
        self._open = True
        handle = self._call(
            OPENING_MESSAGE,
            Severity.INFO,
            NotifyOptions(
                title=self._options.title,
                icon=self._options.icons.spinner_frame(0),
                timeout=None,
            ),
        )
        self._handle = handle if self.supports_replace else None
        logger.debug("Notification opened")

        self.spinner_frame = 0
        if self.supports_replace and self._options.icons.has_spinner:
            self._spinner_generation += 1
            self._schedule_tick(self._spinner_generation)

    def push(self, body: str, severity: Severity) -> None:
        if self.supports_replace:
            height = FINAL_HEIGHT + wrapped_line_count(body, self._options.window_width)
            handle = self._call(body, severity, NotifyOptions(replace=self._handle, height=height))
            if handle is not None:
                self._handle = handle
            return

        # Append-only: one standalone message per line, so the host never piles up a
        # multi-line message that needs confirmation.
        for line in body.splitlines():
            if line.strip():
                self._call(line, Severity.INFO)

    def finalize(self, body: str) -> None:
        done_icon = self._options.icons.done()
        timeout = self._options.done_timeout
        if self.supports_replace:
            self._call(
                body,
                Severity.INFO,
                NotifyOptions(replace=self._handle, icon=done_icon, timeout=timeout, height=FINAL_HEIGHT),
            )
        else:
            for line in body.splitlines():
                if line.strip():
                    self._call(line, Severity.INFO, NotifyOptions(icon=done_icon, timeout=timeout))

        self._open = False
        self._handle = None
        self._stop_spinner()
        logger.debug("Notification closed")

    def notify_once(self, message: str, severity: Severity) -> None:
        """One-shot message that bypasses the aggregate notification."""
        self._call(message, severity, NotifyOptions(title=self._options.title))

    # ---- spinner ----

    def _schedule_tick(self, generation: int) -> None:
        self._spinner_timer = self._scheduler.schedule_after(
            self._options.spinner_interval,
            lambda: self._tick(generation),
        )

    def _tick(self, generation: int) -> None:
        # Ticks from an earlier open/close cycle die here instead of forking a second loop.
        if not self._open or generation != self._spinner_generation:
            return
        self.spinner_frame = (self.spinner_frame + 1) % len(self._options.icons.spinner_frames)
        handle = self._call(
            None,
            None,
            NotifyOptions(
                icon=self._options.icons.spinner_frame(self.spinner_frame),
                replace=self._handle,
                hide_from_history=True,
            ),
        )
        if handle is not None:
            self._handle = handle
        self._schedule_tick(generation)

    def _stop_spinner(self) -> None:
        self._spinner_generation += 1
        self.spinner_frame = 0
        timer, self._spinner_timer = self._spinner_timer, None
        if timer is not None:
            timer.cancel()

    # ---- surface boundary ----

    def _call(self, message: str | None, severity: Severity | None, options: NotifyOptions | None = None) -> Any:
        try:
            return self._surface.notify(message, severity, options or NotifyOptions())
        except Exception:
            logger.warning("Notification surface call failed", exc_info=True)
            return None
