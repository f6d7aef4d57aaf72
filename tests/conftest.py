# tests/conftest.py

from __future__ import annotations

from collections.abc import Callable
from dataclasses import replace

import pytest

from lsp_notify.core.options import IconConfig, NotifierOptions, ReplaceMode
from lsp_notify.events.dispatch import EventBus
from lsp_notify.notifier import Notifier

from .fakes import FakeHost, FakeSurface, VirtualScheduler


@pytest.fixture()
def options() -> NotifierOptions:
    """
    Deterministic options for unit tests.

    Spinner is off so surface call logs only contain body updates; spinner tests
    build their own options.
    """
    return NotifierOptions(
        task_timeout=2.0,
        client_timeout=1.0,
        done_timeout=1.0,
        spinner_interval=0.1,
        window_width=60,
        icons=IconConfig(spinner_enabled=False),
    )


@pytest.fixture()
def scheduler() -> VirtualScheduler:
    return VirtualScheduler()


@pytest.fixture()
def surface() -> FakeSurface:
    return FakeSurface()


@pytest.fixture()
def host() -> FakeHost:
    h = FakeHost()
    h.add(1, "pyright", "/src/app.py", "/src/util.py")
    h.add(2, "ruff", "/src/app.py")
    return h


@pytest.fixture()
def make_notifier(
    surface: FakeSurface,
    scheduler: VirtualScheduler,
    host: FakeHost,
    options: NotifierOptions,
) -> Callable[..., Notifier]:
    def _make(**overrides) -> Notifier:
        return Notifier(surface, scheduler, host, replace(options, **overrides))

    return _make


@pytest.fixture()
def notifier(make_notifier) -> Notifier:
    return make_notifier(replace_mode=ReplaceMode.AUTO)


@pytest.fixture()
def bus(notifier: Notifier) -> EventBus:
    b = EventBus()
    notifier.attach(b)
    return b
