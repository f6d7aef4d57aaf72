# src/lsp_notify/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app (normal "settings layer").
- No secrets required at import time.
- Malformed values fall back to defaults instead of failing the import.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import List

from dotenv import load_dotenv

from .core.options import (
    DEFAULT_DONE_ICON,
    DEFAULT_SPINNER_FRAMES,
    IconConfig,
    NotifierOptions,
    ReplaceMode,
)

ENV_PREFIX = "LSP_NOTIFY"

SURFACES = ("console", "terminal", "matrix")

load_dotenv(override=False)


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_list(name: str, default: List[str]) -> List[str]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return list(default)
    parts = [p.strip() for p in raw.replace(",", " ").split() if p.strip()]
    return parts


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    log_level: str
    data_dir: Path

    # ---- Display ----
    surface: str
    replace_mode: ReplaceMode
    title: str
    window_width: int

    # ---- Icons ----
    icons_enabled: bool
    spinner_enabled: bool
    done_icon_enabled: bool

    # ---- Backends ----
    excludes: List[str]

    # ---- Timing (seconds) ----
    task_timeout: float
    client_timeout: float
    done_timeout: float
    spinner_interval: float

    # ---- Matrix surface ----
    matrix_homeserver: str
    matrix_user_id: str
    matrix_password: str
    matrix_room: str
    matrix_store_path: Path

    @staticmethod
    def from_env() -> "Settings":
        log_level = _env(_k("LOG_LEVEL"), "WARNING")
        data_dir = _env_path(_k("DATA_DIR"), Path(".local/lsp-notify"))

        surface = _env(_k("SURFACE"), "terminal").strip().lower()
        if surface not in SURFACES:
            surface = "terminal"

        icons_enabled = _env_bool(_k("ICONS"), True)

        return Settings(
            log_level=log_level,
            data_dir=data_dir,
            surface=surface,
            replace_mode=ReplaceMode.parse(_env(_k("REPLACE_MODE"), "auto")),
            title=_env(_k("TITLE"), "LSP"),
            window_width=max(1, _env_int(_k("WINDOW_WIDTH"), 60)),
            icons_enabled=icons_enabled,
            spinner_enabled=icons_enabled and _env_bool(_k("SPINNER"), True),
            done_icon_enabled=icons_enabled and _env_bool(_k("DONE_ICON"), True),
            excludes=_env_list(_k("EXCLUDES"), []),
            task_timeout=max(0.0, _env_float(_k("TASK_TIMEOUT"), 2.0)),
            client_timeout=max(0.0, _env_float(_k("CLIENT_TIMEOUT"), 1.0)),
            done_timeout=max(0.0, _env_float(_k("DONE_TIMEOUT"), 1.0)),
            spinner_interval=max(0.02, _env_float(_k("SPINNER_INTERVAL"), 0.1)),
            matrix_homeserver=_env(_k("MATRIX_HOMESERVER"), "").strip(),
            matrix_user_id=_env(_k("MATRIX_USER_ID"), "").strip(),
            matrix_password=_env(_k("MATRIX_PASSWORD"), "").strip(),
            matrix_room=_env(_k("MATRIX_ROOM"), "").strip(),
            matrix_store_path=_env_path(_k("MATRIX_STORE_PATH"), data_dir / "matrix_store"),
        )

    def notifier_options(self) -> NotifierOptions:
        return NotifierOptions(
            excludes=frozenset(self.excludes),
            replace_mode=self.replace_mode,
            task_timeout=self.task_timeout,
            client_timeout=self.client_timeout,
            done_timeout=self.done_timeout,
            spinner_interval=self.spinner_interval,
            window_width=self.window_width,
            title=self.title,
            icons=IconConfig(
                spinner_enabled=self.spinner_enabled,
                done_enabled=self.done_icon_enabled,
                spinner_frames=DEFAULT_SPINNER_FRAMES,
                done_icon=DEFAULT_DONE_ICON,
            ),
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
