# tests/test_cli.py

from __future__ import annotations

import io
import json
from dataclasses import replace
from pathlib import Path

import pytest

from lsp_notify.cli import main as cli_main
from lsp_notify.cli.bootstrap import create_local_surface, create_notifier
from lsp_notify.config import Settings
from lsp_notify.connectors.console_connector import ConsoleSurface, TerminalSurface
from lsp_notify.core.options import ReplaceMode
from lsp_notify.events.dispatch import PROGRESS, SHOW_MESSAGE, SYNC_RESPONSE

from .fakes import FakeHost, VirtualScheduler


@pytest.fixture()
def base_settings(tmp_path: Path) -> Settings:
    return replace(
        Settings.from_env(),
        surface="console",
        data_dir=tmp_path,
        task_timeout=0.01,
        client_timeout=0.01,
        replace_mode=ReplaceMode.AUTO,
        excludes=[],
    )


def test_create_local_surface_follows_settings(base_settings) -> None:
    assert isinstance(create_local_surface(base_settings), ConsoleSurface)
    assert isinstance(create_local_surface(replace(base_settings, surface="terminal")), TerminalSurface)


def test_create_notifier_wires_handlers(base_settings) -> None:
    surface = ConsoleSurface(io.StringIO())
    notifier, bus = create_notifier(surface, FakeHost(), settings=base_settings, scheduler=VirtualScheduler())

    assert notifier.display.supports_replace is False
    assert notifier.options.task_timeout == 0.01
    for method in (PROGRESS, SYNC_RESPONSE, SHOW_MESSAGE):
        assert len(bus.subscribers(method)) == 1


def test_main_replays_a_recording(base_settings, tmp_path, monkeypatch, capsys) -> None:
    recording = tmp_path / "events.jsonl"
    records = [
        {"type": "attach", "client_id": 1, "name": "pyright", "resources": ["/src/app.py"]},
        {"type": "progress", "client_id": 1, "params": {"token": "t1", "value": {"kind": "report", "title": "Indexing", "percentage": 30}}},
        {"type": "progress", "client_id": 1, "params": {"token": "t1", "value": {"kind": "end"}}},
        {"type": "message", "client_id": 1, "params": {"type": 1, "message": "server crashed"}},
    ]
    recording.write_text("\n".join(json.dumps(r) for r in records), "utf-8")

    monkeypatch.setattr(cli_main, "get_settings", lambda: base_settings)
    monkeypatch.setattr(cli_main, "setup_logging", lambda **kwargs: None)

    assert cli_main.main(["replay", str(recording), "--max-wait", "2"]) == 0

    out = capsys.readouterr().out
    assert "[LSP] pyright" in out
    assert "30%  Indexing - Complete" in out
    assert "[LSP][ERROR] server crashed" in out


def test_main_missing_recording(base_settings, tmp_path, monkeypatch) -> None:
    monkeypatch.setattr(cli_main, "get_settings", lambda: base_settings)
    monkeypatch.setattr(cli_main, "setup_logging", lambda **kwargs: None)

    assert cli_main.main(["replay", str(tmp_path / "missing.jsonl")]) == 2
