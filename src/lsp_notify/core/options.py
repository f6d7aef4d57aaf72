# src/lsp_notify/core/options.py

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

DEFAULT_SPINNER_FRAMES: tuple[str, ...] = ("⣾", "⣽", "⣻", "⢿", "⡿", "⣟", "⣯", "⣷")
DEFAULT_DONE_ICON = "✓"


class ReplaceMode(StrEnum):
    """How to decide whether the surface can update a notification in place."""

    AUTO = "auto"  # probe the surface once
    ALWAYS = "always"
    NEVER = "never"

    @classmethod
    def parse(cls, raw: Any) -> ReplaceMode:
        if not raw:
            return cls.AUTO
        try:
            return cls(str(raw).strip().lower())
        except ValueError:
            return cls.AUTO


@dataclass(slots=True, frozen=True)
class IconConfig:
    spinner_enabled: bool = True
    done_enabled: bool = True
    spinner_frames: tuple[str, ...] = DEFAULT_SPINNER_FRAMES
    done_icon: str = DEFAULT_DONE_ICON

    @property
    def has_spinner(self) -> bool:
        return self.spinner_enabled and bool(self.spinner_frames)

    def spinner_frame(self, index: int) -> str | None:
        if not self.has_spinner:
            return None
        return self.spinner_frames[index % len(self.spinner_frames)]

    def done(self) -> str | None:
        return self.done_icon if self.done_enabled and self.done_icon else None


@dataclass(slots=True, frozen=True)
class NotifierOptions:
    """Core tuning. Durations are in seconds."""

    excludes: frozenset[str] = frozenset()
    replace_mode: ReplaceMode = ReplaceMode.AUTO
    task_timeout: float = 2.0
    client_timeout: float = 1.0
    done_timeout: float = 1.0
    spinner_interval: float = 0.1
    window_width: int = 60
    title: str = "LSP"
    icons: IconConfig = field(default_factory=IconConfig)
