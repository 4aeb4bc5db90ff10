"""
Sorting engine for File Sorting domain.

Runs full scan-and-relocate passes over the watched root and boots the
debounced run loop.
"""

import asyncio
from collections import Counter
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, Optional

from loguru import logger

from app.models.schemas import RunOptions, RunSummary
from domains.file_sorting.errors import ScanError
from domains.file_sorting.provisioner import FolderProvisioner
from domains.file_sorting.relocator import Mover, Relocator
from domains.file_sorting.retry import Sleeper
from domains.file_sorting.snapshot import build_skip_set, scan_directory
from domains.file_sorting.taxonomy import Taxonomy, default_taxonomy
from domains.file_sorting.watchers.debounce import DebouncedWatcher


class SortingEngine:
    """Scan-and-relocate orchestrator for one root."""

    def __init__(
        self,
        root: Path,
        taxonomy: Optional[Taxonomy] = None,
        control_files: Iterable[str] = (),
        base_delay: float = 0.5,
        max_retries: int = 5,
        move: Optional[Mover] = None,
        sleep: Optional[Sleeper] = None,
    ):
        """
        Initialize sorting engine.

        Args:
            root: Watched root directory
            taxonomy: Category table (defaults to the bundled one)
            control_files: Service-owned names that are never moved
            base_delay: First retry wait in seconds
            max_retries: Retry waits before an entry is abandoned
            move: Rename function, replaceable for tests
            sleep: Backoff sleep, replaceable for tests
        """
        self.root = Path(root)
        self.taxonomy = taxonomy or default_taxonomy()
        self.skip = build_skip_set(control_files, self.taxonomy.names)
        self.provisioner = FolderProvisioner(self.root)
        self.relocator = Relocator(
            self.root,
            self.taxonomy,
            self.provisioner,
            base_delay=base_delay,
            max_retries=max_retries,
            move=move,
            sleep=sleep,
        )

    async def run_once(self, options: RunOptions) -> RunSummary:
        """
        Perform one full pass: scan, optionally provision, relocate everything.

        Args:
            options: Run options

        Returns:
            Summary of terminal states reached
        """
        summary = RunSummary(started=datetime.now(timezone.utc))

        try:
            snapshot = await asyncio.to_thread(scan_directory, self.root, self.skip)
        except ScanError as e:
            logger.error(f"Failed to get directory files: {e}")
            summary.scan_failed = True
            summary.finished = datetime.now(timezone.utc)
            return summary

        if options.eager_provision:
            await self.provisioner.provision_all(self.taxonomy.names)

        # Work list is fixed before relocations start discarding names
        files = sorted(snapshot.files)
        folders = sorted(snapshot.folders)

        results = await asyncio.gather(
            *(self.relocator.relocate(name, False, snapshot) for name in files),
            *(self.relocator.relocate(name, True, snapshot) for name in folders),
        )

        summary.outcomes = dict(Counter(r.state.value for r in results))
        summary.finished = datetime.now(timezone.utc)

        if results:
            logger.debug(f"Run finished: {summary.outcomes}")

        return summary

    async def boot(self, options: RunOptions) -> DebouncedWatcher:
        """
        Start the service: eager provisioning, one immediate run, then hand
        back the debounced watcher that schedules all later runs.

        Args:
            options: Startup options

        Returns:
            Watcher bound to the running event loop
        """
        logger.info("Service started")

        if options.eager_provision:
            await self.provisioner.provision_all(self.taxonomy.names)

        await self.run_once(options.model_copy(update={"startup": True, "eager_provision": False}))

        return DebouncedWatcher(
            self.run_once,
            options.model_copy(update={"startup": False, "eager_provision": False}),
            loop=asyncio.get_running_loop(),
        )
