# tests/test_display.py

from __future__ import annotations

from lsp_notify.core.display import (
    FINAL_HEIGHT,
    OPENING_MESSAGE,
    DisplayAdapter,
    probe_replace,
    wrapped_line_count,
)
from lsp_notify.core.models import Severity
from lsp_notify.core.options import IconConfig, NotifierOptions, ReplaceMode
from lsp_notify.notifier import Notifier

from .fakes import AppendOnlySurface, FakeHost, FakeSurface, VirtualScheduler


def _spinner_options(**overrides) -> NotifierOptions:
    return NotifierOptions(icons=IconConfig(spinner_frames=("a", "b", "c"), done_icon="D"), **overrides)


def test_probe_detects_replace_support() -> None:
    assert probe_replace(FakeSurface()) is True


def test_probe_failure_means_append_only() -> None:
    surface = AppendOnlySurface()
    assert probe_replace(surface) is False
    # the probe never shows anything to the user
    assert surface.visible == []


def test_probe_without_handle_means_append_only() -> None:
    class NoHandleSurface(FakeSurface):
        def notify(self, message, severity=None, options=None):
            super().notify(message, severity, options)
            return None

    assert probe_replace(NoHandleSurface()) is False


def test_replace_mode_override_skips_probe() -> None:
    surface = FakeSurface()
    adapter = DisplayAdapter(surface, VirtualScheduler(), NotifierOptions(replace_mode=ReplaceMode.NEVER))
    assert adapter.supports_replace is False
    assert surface.calls == []

    adapter = DisplayAdapter(AppendOnlySurface(), VirtualScheduler(), NotifierOptions(replace_mode=ReplaceMode.ALWAYS))
    assert adapter.supports_replace is True


def test_append_only_surface_gets_one_message_per_line() -> None:
    surface = AppendOnlySurface()
    host = FakeHost()
    host.add(1, "pyright")
    notifier = Notifier(surface, VirtualScheduler(), host, NotifierOptions())
    assert notifier.display.supports_replace is False

    client = notifier.registry.get_or_create_client(1, "pyright")
    client.get_or_create_task("t1", "Indexing", "a.py")
    client.get_or_create_task("t2", "Checking", "")
    notifier.registry.request_update()

    assert surface.bodies == [OPENING_MESSAGE, "pyright", "  Indexing - a.py", "  Checking"]
    assert all(c.options.replace is None for c in surface.calls)
    assert all(c.severity == Severity.INFO for c in surface.visible)


def test_append_only_surface_never_runs_the_spinner() -> None:
    scheduler = VirtualScheduler()
    adapter = DisplayAdapter(AppendOnlySurface(), scheduler, _spinner_options())
    adapter.open()
    assert scheduler.pending() == 0
    assert not adapter.spinner_running


def test_spinner_ticks_push_icon_only_updates() -> None:
    surface = FakeSurface()
    scheduler = VirtualScheduler()
    adapter = DisplayAdapter(surface, scheduler, _spinner_options())

    adapter.open()
    opening = surface.visible[-1]
    assert opening.message == OPENING_MESSAGE
    assert opening.options.icon == "a"
    assert opening.options.timeout is None

    scheduler.advance(0.35)
    ticks = surface.visible[1:]
    assert [t.options.icon for t in ticks] == ["b", "c", "a"]
    assert all(t.message is None and t.severity is None for t in ticks)
    assert all(t.options.replace == adapter.handle for t in ticks)
    assert adapter.spinner_frame == 0


def test_finalize_stops_the_spinner_without_leaking_timers() -> None:
    surface = FakeSurface()
    scheduler = VirtualScheduler()
    adapter = DisplayAdapter(surface, scheduler, _spinner_options(done_timeout=1.5))

    adapter.open()
    scheduler.advance(0.2)
    adapter.finalize("Complete")

    final = surface.visible[-1]
    assert final.message == "Complete"
    assert final.options.icon == "D"
    assert final.options.timeout == 1.5
    assert final.options.height == FINAL_HEIGHT
    assert scheduler.pending() == 0

    calls = len(surface.calls)
    scheduler.advance(5.0)
    assert len(surface.calls) == calls


def test_reopen_runs_exactly_one_spinner_loop() -> None:
    surface = FakeSurface()
    scheduler = VirtualScheduler()
    adapter = DisplayAdapter(surface, scheduler, _spinner_options())

    adapter.open()
    adapter.finalize("Complete")
    adapter.open()
    start = len(surface.calls)

    scheduler.advance(0.5)
    assert len(surface.calls) - start == 5


def test_disabled_icons_send_no_icon_and_no_spinner() -> None:
    surface = FakeSurface()
    scheduler = VirtualScheduler()
    options = NotifierOptions(icons=IconConfig(spinner_enabled=False, done_enabled=False))
    adapter = DisplayAdapter(surface, scheduler, options)

    adapter.open()
    adapter.finalize("Complete")
    assert scheduler.pending() == 0
    assert all(c.options.icon is None for c in surface.visible)


def test_push_sends_height_hint_for_wrapped_lines() -> None:
    surface = FakeSurface()
    adapter = DisplayAdapter(surface, VirtualScheduler(), NotifierOptions(window_width=10))
    adapter.open()
    adapter.push("pyright\n" + "x" * 25, Severity.WARN)

    push = surface.visible[-1]
    assert push.severity == Severity.WARN
    assert push.options.height == FINAL_HEIGHT + 1 + 3


def test_wrapped_line_count_counts_blank_lines() -> None:
    assert wrapped_line_count("a\n\nb", 60) == 3
    assert wrapped_line_count("x" * 61, 60) == 2


def test_surface_failures_are_swallowed() -> None:
    surface = FakeSurface()
    scheduler = VirtualScheduler()
    adapter = DisplayAdapter(surface, scheduler, _spinner_options())
    surface.fail = True

    adapter.open()
    adapter.push("body", Severity.INFO)
    scheduler.advance(0.3)
    adapter.notify_once("hello", Severity.ERROR)
    adapter.finalize("Complete")

    assert not adapter.is_open
    assert scheduler.pending() == 0


def test_failed_replace_keeps_previous_handle() -> None:
    surface = FakeSurface()
    adapter = DisplayAdapter(surface, VirtualScheduler(), NotifierOptions(icons=IconConfig(spinner_enabled=False)))
    adapter.open()
    handle = adapter.handle

    surface.fail = True
    adapter.push("body", Severity.INFO)
    assert adapter.handle == handle


def test_notify_once_carries_title_and_severity() -> None:
    surface = FakeSurface()
    adapter = DisplayAdapter(surface, VirtualScheduler(), NotifierOptions(title="Servers"))
    adapter.notify_once("server crashed", Severity.ERROR)

    call = surface.visible[-1]
    assert call.message == "server crashed"
    assert call.severity == Severity.ERROR
    assert call.options.title == "Servers"
    assert call.options.replace is None
