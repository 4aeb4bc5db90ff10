"""
Relocation of single entries for File Sorting domain.

Moves one top-level entry into its category folder. Three races are
handled explicitly:

- destination already occupied: leave the source alone, never overwrite
- destination folder missing: provision it, then retry
- source locked by another process: retry after backoff

Anything else is retried like a transient failure and eventually abandoned.
"""

import asyncio
import errno
import os
from pathlib import Path
from typing import Callable, Optional

from loguru import logger

from app.models.schemas import RelocationResult, RelocationState
from domains.file_sorting.errors import MoveConflict, MoveTransient, ProvisionError, SortingError
from domains.file_sorting.provisioner import FolderProvisioner
from domains.file_sorting.retry import RetryScheduler, Sleeper
from domains.file_sorting.snapshot import Snapshot
from domains.file_sorting.taxonomy import Taxonomy

Mover = Callable[[str, str], None]

BUSY_ERRNOS = {errno.EBUSY, errno.ETXTBSY}
# ERROR_SHARING_VIOLATION, ERROR_LOCK_VIOLATION
BUSY_WINERRORS = {32, 33}


class SourceVanished(SortingError):
    """Source disappeared before it could be moved."""

    pass


def is_busy_error(error: OSError) -> bool:
    """Check whether ``error`` means the source is locked by someone else."""
    if error.errno in BUSY_ERRNOS:
        return True
    return getattr(error, "winerror", None) in BUSY_WINERRORS


class Relocator:
    """Moves entries of one root into their category folders."""

    def __init__(
        self,
        root: Path,
        taxonomy: Taxonomy,
        provisioner: FolderProvisioner,
        base_delay: float = 0.5,
        max_retries: int = 5,
        move: Optional[Mover] = None,
        sleep: Optional[Sleeper] = None,
    ):
        self.root = Path(root)
        self.taxonomy = taxonomy
        self.provisioner = provisioner
        self.base_delay = base_delay
        self.max_retries = max_retries
        self._move = move or os.rename
        self._sleep = sleep

    def move_once(self, name: str, category: str) -> None:
        """
        Perform one move syscall for ``name``.

        Raises:
            MoveConflict: Destination is already occupied
            MoveTransient: Destination folder missing, or source busy
            SourceVanished: Source no longer exists
            OSError: Any other filesystem failure
        """
        source = self.root / name
        folder = self.root / category
        destination = folder / name

        if not os.path.lexists(source):
            raise SourceVanished(f"{name} is no longer in {self.root}")

        # rename() replaces existing files on POSIX
        if os.path.lexists(destination):
            raise MoveConflict(f"{category}/{name} already exists")

        try:
            self._move(str(source), str(destination))

        except FileNotFoundError as e:
            if not folder.is_dir():
                raise MoveTransient(f"{category}/ is missing", MoveTransient.MISSING_FOLDER) from e
            if not os.path.lexists(source):
                raise SourceVanished(f"{name} is no longer in {self.root}") from e
            raise

        except OSError as e:
            if e.errno in (errno.EEXIST, errno.ENOTEMPTY):
                raise MoveConflict(f"{category}/{name} already exists") from e
            if is_busy_error(e):
                raise MoveTransient(f"{name} is busy", MoveTransient.BUSY) from e
            raise

    async def relocate(
        self,
        name: str,
        is_folder: bool = False,
        snapshot: Optional[Snapshot] = None,
    ) -> RelocationResult:
        """
        Drive one entry to a terminal state.

        Args:
            name: Entry name directly under the root
            is_folder: Whether the entry is a directory
            snapshot: Snapshot to drop the entry from once moved

        Returns:
            Terminal relocation result
        """
        category = self.taxonomy.categorize(name, is_folder)
        result = RelocationResult(name=name, category=category, state=RelocationState.RESOLVED)
        logger.debug(f"Resolved: {name} -> {category}/")

        async def attempt():
            result.attempts += 1
            result.state = RelocationState.ATTEMPTING

            try:
                await asyncio.to_thread(self.move_once, name, category)

            except MoveConflict:
                result.state = RelocationState.SKIPPED_EXISTS
                logger.error(f"Not moving {name}: {category}/{name} already exists")
                return

            except SourceVanished:
                result.state = RelocationState.VANISHED
                logger.warning(f"Not moving {name}: it is no longer in the root")
                return

            except MoveTransient as e:
                if e.reason == MoveTransient.MISSING_FOLDER:
                    result.state = RelocationState.NEEDS_FOLDER
                    logger.warning(f"Folder {category}/ missing, creating it before retrying {name}")
                    try:
                        await self.provisioner.ensure_async(category)
                    except ProvisionError as pe:
                        logger.error(str(pe))
                else:
                    result.state = RelocationState.BUSY
                    logger.warning(f"File busy, will retry: {name}")
                raise

            except OSError as e:
                logger.error(f"Error moving file: {name} ({e})")
                raise

            result.state = RelocationState.MOVED
            if snapshot is not None:
                (snapshot.folders if is_folder else snapshot.files).discard(name)
            logger.success(f"Moved: {name} to {category}/")

        scheduler = RetryScheduler(self.base_delay, self.max_retries, sleep=self._sleep)
        if not await scheduler.run(attempt):
            result.state = RelocationState.ABANDONED
            cause = scheduler.exhausted.last_error if scheduler.exhausted else None
            logger.error(f"Max retries reached for operation: moving {name} to {category}/ ({cause})")

        return result
