# src/lsp_notify/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds the surface and notifier, then replays a recorded
event stream (file or stdin) until the notification closes.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from dataclasses import replace
from pathlib import Path

from ..cli.bootstrap import create_notifier, create_surface
from ..cli.replay import ReplayHost, replay
from ..config import SURFACES, Settings, get_settings
from ..logging_setup import setup_logging

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lsp-notify",
        description="Aggregate language-server progress into one live notification.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    rp = sub.add_parser("replay", help="Replay a JSON-lines event recording.")
    rp.add_argument("file", nargs="?", default="-", help="Recording path, '-' for stdin (default).")
    rp.add_argument("--surface", choices=SURFACES, default=None, help="Override LSP_NOTIFY_SURFACE.")
    rp.add_argument("--speed", type=float, default=1.0, help="Playback speed multiplier.")
    rp.add_argument("--max-wait", type=float, default=30.0, help="Seconds to wait for the notification to close.")
    return parser


async def _run_replay(args: argparse.Namespace, settings: Settings) -> int:
    surface = await create_surface(settings)
    host = ReplayHost()
    notifier, bus = create_notifier(surface, host, settings=settings)
    notifier.on_ready(lambda resource_id: logger.info("Ready: %s", resource_id))

    if args.file == "-":
        lines = sys.stdin.read().splitlines()
    else:
        lines = Path(args.file).read_text("utf-8").splitlines()

    try:
        applied = await replay(
            lines,
            notifier=notifier,
            bus=bus,
            host=host,
            speed=args.speed,
            max_wait=args.max_wait,
        )
    finally:
        aclose = getattr(surface, "aclose", None)
        if aclose is not None:
            await aclose()

    logger.info("Replayed %d events", applied)
    return 0


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    settings = get_settings()

    if args.surface:
        # Settings is frozen; build a copy with the override.
        settings = replace(settings, surface=args.surface)

    level_name = str(getattr(settings, "log_level", "WARNING")).upper()
    console_level = getattr(logging, level_name, logging.WARNING)
    setup_logging(log_dir=settings.data_dir, console_level=console_level)

    try:
        return asyncio.run(_run_replay(args, settings))
    except FileNotFoundError as e:
        logger.error("Recording not found: %s", e.filename)
        return 2
    except KeyboardInterrupt:
        logger.info("Interrupted.")
        return 130


if __name__ == "__main__":
    sys.exit(main())
