#!/usr/bin/env python3
"""Background service that keeps one directory sorted by file type.

Every top-level entry of the watched root is moved into a category folder
(``images/``, ``documents/``, ...). Folders and unknown extensions go to
``others/``. One pass runs at startup; after that, bursts of filesystem
changes are debounced into single passes.
"""

from __future__ import annotations

import argparse
import asyncio
import signal
import sys
from pathlib import Path
from typing import Optional

from loguru import logger

sys.path.insert(0, str(Path(__file__).parent.parent))

from app.utils.config import Settings, get_settings
from app.utils.helpers import normalise_path
from app.utils.log_config import configure_logging
from domains.file_sorting.engine import SortingEngine
from domains.file_sorting.watchers.filesystem import RootChangeHandler, RootWatcher

STOP_SIGNALS = ("SIGINT", "SIGTERM", "SIGHUP")


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse CLI arguments."""

    parser = argparse.ArgumentParser(
        description="Watch a directory and sort its entries into category folders.",
    )
    parser.add_argument(
        "--root",
        type=Path,
        default=None,
        help="Directory to keep sorted (default: WATCH_ROOT or the current directory).",
    )
    parser.add_argument(
        "--eager-provision",
        action="store_true",
        default=None,
        help="Create every category folder before the first pass.",
    )
    parser.add_argument(
        "--debounce-ms",
        type=int,
        default=None,
        help="Quiet period after the last change before a pass runs (default: 1500).",
    )
    parser.add_argument(
        "--log-file",
        default=None,
        help="Control log file name inside the root (default: runtime.log).",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Minimum log level (default: INFO).",
    )
    parser.add_argument(
        "--once",
        action="store_true",
        help="Run a single pass and exit instead of watching.",
    )

    return parser.parse_args(argv)


def apply_overrides(settings: Settings, args: argparse.Namespace) -> Settings:
    """Return a copy of ``settings`` with explicit CLI flags applied."""

    overrides = {
        "watch_root": args.root,
        "eager_provision": args.eager_provision,
        "debounce_interval_ms": args.debounce_ms,
        "log_file": args.log_file,
        "log_level": args.log_level,
    }
    return settings.model_copy(update={k: v for k, v in overrides.items() if v is not None})


def build_engine(settings: Settings, root: Path) -> SortingEngine:
    """Create the sorting engine described by ``settings``."""

    return SortingEngine(
        root,
        control_files=settings.get_control_files(),
        base_delay=settings.retry_base_delay_ms / 1000,
        max_retries=settings.retry_max_retries,
    )


async def serve(settings: Settings, root: Path, once: bool = False) -> int:
    """Boot the engine and block until a termination signal arrives."""

    engine = build_engine(settings, root)
    options = settings.get_run_options(startup=True)

    if once:
        logger.info("Service started")
        if options.eager_provision:
            await engine.provisioner.provision_all(engine.taxonomy.names)
        await engine.run_once(options.model_copy(update={"eager_provision": False}))
        await logger.complete()
        return 0

    watcher = await engine.boot(options)
    handler = RootChangeHandler(watcher, ignored_names=settings.get_control_files())
    root_watcher = RootWatcher(root, handler)
    root_watcher.start_watching()

    loop = asyncio.get_running_loop()
    stop_event = asyncio.Event()
    received: list[str] = []

    def _signal_handler(signame: str):  # noqa: D401
        received.append(signame)
        stop_event.set()

    for signame in STOP_SIGNALS:
        signum = getattr(signal, signame, None)
        if signum is None:
            continue
        try:
            loop.add_signal_handler(signum, _signal_handler, signame)
        except NotImplementedError:
            signal.signal(
                signum,
                lambda s, f, name=signame: loop.call_soon_threadsafe(_signal_handler, name),
            )

    try:
        await stop_event.wait()
    finally:
        watcher.cancel()
        root_watcher.stop_watching()

    logger.info(f"Service stopped ({received[0] if received else 'unknown'})")
    await logger.complete()
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    """Entry point for the CLI script."""

    args = parse_args(argv)
    settings = apply_overrides(get_settings(), args)
    root = normalise_path(settings.watch_root)

    if not root.is_dir():
        logger.error(f"Watch root is not a directory: {root}")
        return 1

    configure_logging(root, settings.log_file, settings.log_level)

    try:
        return asyncio.run(serve(settings, root, once=args.once))
    except KeyboardInterrupt:
        logger.info("Service stopped (KeyboardInterrupt)")
        return 0


if __name__ == "__main__":  # pragma: no cover - CLI bridge
    sys.exit(main())
