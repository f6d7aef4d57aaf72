# src/lsp_notify/core/models.py

from __future__ import annotations

from collections.abc import Hashable
from dataclasses import dataclass, field
from enum import IntEnum, StrEnum
from typing import Any


class Severity(IntEnum):
    """
    Display severity of a task, a client or the whole notification.

    Ordering matters: aggregation takes the maximum, so INFO < WARN < ERROR.
    """

    INFO = 0
    WARN = 1
    ERROR = 2

    @classmethod
    def from_message_type(cls, raw: Any) -> Severity:
        """Map an LSP MessageType (1=error, 2=warning, 3=info, 4=log) to a severity."""
        if raw == 1:
            return cls.ERROR
        if raw == 2:
            return cls.WARN
        # info, log/hint and anything unknown
        return cls.INFO


class Readiness(StrEnum):
    """Per-resource readiness as seen by the host."""

    UNATTACHED = "unattached"
    PENDING = "pending"
    READY = "ready"


def _format_percentage(percentage: float) -> str:
    return f"{percentage:g}%"


@dataclass(slots=True)
class Task:
    """
    One unit of reported work (a progress token) or one tracked resource status.

    percentage is only set by progress-style tasks; sync-style tasks never carry one.
    """

    title: str | None = None
    message: str | None = None
    percentage: float | None = None
    severity: Severity = Severity.INFO
    status: Readiness = Readiness.UNATTACHED

    @classmethod
    def create(cls, title: str | None = None, message: str | None = None) -> Task:
        return cls(title=title, message=message if message is not None else "")

    def update(
        self,
        status: Readiness,
        severity: Severity,
        message: str | None,
        percentage: float | None = None,
    ) -> None:
        self.status = status
        self.severity = severity
        self.message = message
        self.percentage = percentage

    def report(self, message: str | None, percentage: Any = None) -> None:
        """Progress update: new message and (clamped) percentage, status untouched."""
        self.message = message
        self.percentage = _clamp_percentage(percentage)

    def format(self) -> str:
        pct = f"{_format_percentage(self.percentage):<5}" if self.percentage is not None else ""
        sep = " - " if self.title and self.message else ""
        return f"  {pct}{self.title or ''}{sep}{self.message or ''}"


def _clamp_percentage(raw: Any) -> float | None:
    if raw is None or isinstance(raw, bool):
        return None
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return None
    value = min(100.0, max(0.0, value))
    return int(value) if value.is_integer() else value


@dataclass(slots=True)
class Client:
    """A backend and the tasks it currently shows."""

    name: str
    tasks: dict[Hashable, Task] = field(default_factory=dict)

    def get_or_create_task(
        self,
        task_id: Hashable,
        title: str | None = None,
        message: str | None = None,
    ) -> Task:
        task = self.tasks.get(task_id)
        if task is None:
            task = Task.create(title, message)
            self.tasks[task_id] = task
        return task

    def remove_task(self, task_id: Hashable) -> None:
        self.tasks.pop(task_id, None)

    def task_count(self) -> int:
        return len(self.tasks)

    def aggregate_severity(self) -> Severity:
        return max((t.severity for t in self.tasks.values()), default=Severity.INFO)

    def render(self) -> str:
        lines = [self.name]
        if self.tasks:
            lines.extend(t.format() for t in self.tasks.values())
        else:
            lines.append("  Complete")
        return "\n".join(lines)
