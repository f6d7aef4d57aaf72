# tests/test_matrix_surface.py

from __future__ import annotations

import pytest
from nio import RoomSendError, RoomSendResponse

from lsp_notify.connectors.matrix_surface import MatrixHandle, MatrixSurface
from lsp_notify.core.display import probe_replace
from lsp_notify.core.models import Severity
from lsp_notify.core.ports import NotifyOptions


class FakeMatrixClient:
    """Captures room_send calls and hands out sequential event ids."""

    def __init__(self) -> None:
        self.sent: list[dict] = []
        self.fail_next = False
        self.closed = False

    async def room_send(self, room_id, message_type, content, ignore_unverified_devices=False):
        self.sent.append({"room_id": room_id, "message_type": message_type, "content": content})
        if self.fail_next:
            self.fail_next = False
            return RoomSendError("rate limited")
        return RoomSendResponse(f"$ev{len(self.sent)}", room_id)

    async def close(self) -> None:
        self.closed = True


def test_probe_is_silent_and_reports_replace_support() -> None:
    client = FakeMatrixClient()
    assert probe_replace(MatrixSurface(client, "!room:x")) is True
    assert client.sent == []


def test_replace_with_foreign_handle_raises() -> None:
    surface = MatrixSurface(FakeMatrixClient(), "!room:x")
    with pytest.raises(TypeError):
        surface.notify("x", Severity.INFO, NotifyOptions(replace=42))


@pytest.mark.asyncio
async def test_first_notify_posts_then_replacements_edit() -> None:
    client = FakeMatrixClient()
    surface = MatrixSurface(client, "!room:x")

    handle = surface.notify("Opening", Severity.INFO, NotifyOptions(title="LSP"))
    assert isinstance(handle, MatrixHandle)
    await surface.flush()
    assert handle.event_id == "$ev1"
    assert client.sent[0]["content"] == {"msgtype": "m.notice", "body": "LSP\nOpening"}

    surface.notify("pyright\n  Indexing", Severity.WARN, NotifyOptions(replace=handle))
    await surface.flush()

    edit = client.sent[1]["content"]
    assert edit["m.relates_to"] == {"rel_type": "m.replace", "event_id": "$ev1"}
    assert edit["m.new_content"]["body"] == "LSP [WARN]\npyright\n  Indexing"
    assert edit["body"].startswith("* ")

    await surface.aclose()
    assert client.closed


@pytest.mark.asyncio
async def test_icon_only_updates_are_not_sent_and_bursts_coalesce() -> None:
    client = FakeMatrixClient()
    surface = MatrixSurface(client, "!room:x")

    handle = surface.notify("Opening", Severity.INFO)
    await surface.flush()

    surface.notify(None, None, NotifyOptions(replace=handle, icon="b"))
    await surface.flush()
    assert len(client.sent) == 1

    surface.notify("one", Severity.INFO, NotifyOptions(replace=handle))
    surface.notify("two", Severity.INFO, NotifyOptions(replace=handle))
    surface.notify("three", Severity.INFO, NotifyOptions(replace=handle, icon="✓"))
    await surface.flush()

    assert len(client.sent) == 2
    assert client.sent[1]["content"]["m.new_content"]["body"] == "✓ LSP\nthree"
    await surface.aclose()


@pytest.mark.asyncio
async def test_failed_send_is_logged_and_next_update_posts_again() -> None:
    client = FakeMatrixClient()
    client.fail_next = True
    surface = MatrixSurface(client, "!room:x")

    handle = surface.notify("Opening", Severity.INFO)
    await surface.flush()
    assert handle.event_id is None

    surface.notify("pyright", Severity.INFO, NotifyOptions(replace=handle))
    await surface.flush()
    assert handle.event_id == "$ev2"
    assert "m.relates_to" not in client.sent[1]["content"]
    await surface.aclose()


def test_notify_outside_running_loop_raises() -> None:
    surface = MatrixSurface(FakeMatrixClient(), "!room:x")
    with pytest.raises(RuntimeError):
        surface.notify("Opening", Severity.INFO)
