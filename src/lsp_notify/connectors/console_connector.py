# src/lsp_notify/connectors/console_connector.py

from __future__ import annotations

import itertools
import logging
import sys
from dataclasses import dataclass
from datetime import datetime
from typing import Any, TextIO

from ..core.models import Severity
from ..core.ports import NotifyOptions

logger = logging.getLogger(__name__)

CLEAR_PREV_LINE = "\033[1A\033[2K"


class ReplaceNotSupportedError(RuntimeError):
    pass


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _level_tag(severity: Severity | None) -> str:
    if severity is None or severity == Severity.INFO:
        return ""
    return f"[{severity.name}]"


def _is_tty(stream: TextIO) -> bool:
    try:
        return bool(stream.isatty())
    except Exception:
        return False


class ConsoleSurface:
    """
    Append-only surface: every notification is a new timestamped line.

    Cannot update anything it already printed, so replace requests raise.
    """

    def __init__(self, stream: TextIO | None = None, *, default_title: str = "LSP") -> None:
        self._stream = stream
        self._default_title = default_title

    @property
    def stream(self) -> TextIO:
        return self._stream or sys.stdout

    def notify(
            self,
            message: str | None,
            severity: Severity | None = None,
            options: NotifyOptions | None = None,
    ) -> Any:
        options = options or NotifyOptions()
        if options.replace is not None:
            raise ReplaceNotSupportedError("console output cannot be replaced")
        if options.silent or message is None:
            return None

        title = options.title or self._default_title
        icon = f"{options.icon} " if options.icon else ""
        print(f"[{_ts_local()}] [{title}]{_level_tag(severity)} {icon}{message}", file=self.stream, flush=True)
        return None


@dataclass(slots=True)
class _Block:
    handle: int
    title: str
    message: str = ""
    severity: Severity = Severity.INFO
    icon: str | None = None
    lines_drawn: int = 0

    def lines(self) -> list[str]:
        icon = f"{self.icon} " if self.icon else ""
        header = f"{icon}{self.title}{_level_tag(self.severity)}"
        return [header, *self.message.split("\n")]


class TerminalSurface:
    """
    Replaceable surface for an interactive terminal.

    Only the most recent block can be replaced: it is erased with ANSI cursor-up/clear-line
    sequences and drawn again. On a non-TTY stream replacements are appended instead, and
    icon-only updates (message=None) are skipped.
    """

    def __init__(self, stream: TextIO | None = None, *, default_title: str = "LSP") -> None:
        self._stream = stream
        self._default_title = default_title
        self._ids = itertools.count(1)
        self._last: _Block | None = None

    @property
    def stream(self) -> TextIO:
        return self._stream or sys.stdout

    def notify(
            self,
            message: str | None,
            severity: Severity | None = None,
            options: NotifyOptions | None = None,
    ) -> Any:
        options = options or NotifyOptions()

        if options.silent:
            return options.replace if options.replace is not None else next(self._ids)

        replacing = (
            options.replace is not None
            and self._last is not None
            and self._last.handle == options.replace
        )
        if replacing:
            block = self._last
        else:
            if message is None:
                return None
            block = _Block(handle=next(self._ids), title=options.title or self._default_title)

        if message is not None:
            block.message = message
        if severity is not None:
            block.severity = severity
        if options.icon is not None:
            block.icon = options.icon
        if options.title:
            block.title = options.title

        tty = _is_tty(self.stream)
        if replacing and not tty and message is None:
            return block.handle

        out = self.stream
        if replacing and tty and block.lines_drawn:
            out.write(CLEAR_PREV_LINE * block.lines_drawn + "\r")

        lines = block.lines()
        out.write("\n".join(lines) + "\n")
        out.flush()
        block.lines_drawn = len(lines)

        self._last = block
        return block.handle
