# src/lsp_notify/connectors/matrix_surface.py

from __future__ import annotations

"""
Matrix room as a replaceable notification surface.

The first notify() posts an m.notice; later replacements are sent as m.replace edits of
that event. Sends go through one asyncio queue, so an edit is only sent after the original
event id is known. Updates that arrive while a send is pending are coalesced: the worker
renders the latest state when it gets to the handle.

Icon-only updates (spinner frames) are kept locally and never sent, to stay well below
homeserver rate limits.
"""

import asyncio
import contextlib
import itertools
import logging
from dataclasses import dataclass
from typing import Any

from nio import AsyncClient, RoomSendResponse

from ..core.models import Severity
from ..core.ports import NotifyOptions

logger = logging.getLogger(__name__)

MSGTYPE = "m.notice"


@dataclass(slots=True, eq=False)
class MatrixHandle:
    local_id: int
    title: str
    body: str = ""
    severity: Severity = Severity.INFO
    icon: str | None = None
    event_id: str | None = None
    queued: bool = False

    def render(self) -> str:
        icon = f"{self.icon} " if self.icon else ""
        level = "" if self.severity == Severity.INFO else f" [{self.severity.name}]"
        return f"{icon}{self.title}{level}\n{self.body}"


def edit_content(event_id: str, text: str) -> dict[str, Any]:
    return {
        "msgtype": MSGTYPE,
        "body": f"* {text}",
        "m.new_content": {"msgtype": MSGTYPE, "body": text},
        "m.relates_to": {"rel_type": "m.replace", "event_id": event_id},
    }


class MatrixSurface:
    def __init__(self, client: AsyncClient, room_id: str, *, default_title: str = "LSP") -> None:
        self._client = client
        self._room_id = room_id
        self._default_title = default_title
        self._ids = itertools.count(1)
        self._queue: asyncio.Queue[MatrixHandle] | None = None
        self._worker: asyncio.Task[None] | None = None

    def notify(
            self,
            message: str | None,
            severity: Severity | None = None,
            options: NotifyOptions | None = None,
    ) -> Any:
        options = options or NotifyOptions()

        if options.replace is not None:
            if not isinstance(options.replace, MatrixHandle):
                raise TypeError(f"Not a Matrix notification handle: {options.replace!r}")
            handle = options.replace
        else:
            if message is None:
                return None
            handle = MatrixHandle(local_id=next(self._ids), title=options.title or self._default_title)

        if options.silent:
            return handle

        changed = handle.event_id is None and options.replace is None
        if message is not None and message != handle.body:
            handle.body = message
            changed = True
        if severity is not None and severity != handle.severity:
            handle.severity = severity
            changed = True
        if options.icon is not None:
            handle.icon = options.icon
        if options.title and options.title != handle.title:
            handle.title = options.title
            changed = True

        if changed:
            self._enqueue(handle)
        return handle

    def _enqueue(self, handle: MatrixHandle) -> None:
        if handle.queued:
            return
        if self._queue is None:
            # Needs the running loop; outside of it this raises and the caller logs it.
            loop = asyncio.get_running_loop()
            self._queue = asyncio.Queue()
            self._worker = loop.create_task(self._run())
        handle.queued = True
        self._queue.put_nowait(handle)

    async def _run(self) -> None:
        assert self._queue is not None
        while True:
            handle = await self._queue.get()
            handle.queued = False
            try:
                await self._send(handle)
            except Exception:
                logger.exception("Matrix send failed room=%s", self._room_id)
            finally:
                self._queue.task_done()

    async def _send(self, handle: MatrixHandle) -> None:
        text = handle.render()
        if handle.event_id is None:
            content: dict[str, Any] = {"msgtype": MSGTYPE, "body": text}
        else:
            content = edit_content(handle.event_id, text)

        resp = await self._client.room_send(
            room_id=self._room_id,
            message_type="m.room.message",
            content=content,
            ignore_unverified_devices=True,
        )
        if not isinstance(resp, RoomSendResponse):
            logger.warning("Matrix room_send failed: %r", resp)
            return
        if handle.event_id is None:
            handle.event_id = resp.event_id

    async def flush(self) -> None:
        """Wait until everything queued so far has been sent."""
        if self._queue is not None:
            await self._queue.join()

    async def aclose(self) -> None:
        await self.flush()
        if self._worker is not None:
            self._worker.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._worker
            self._worker = None
        await self._client.close()
