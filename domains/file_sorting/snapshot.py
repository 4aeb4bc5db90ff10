"""
Directory snapshot for File Sorting domain.

Lists the immediate children of the watched root once and partitions them
into files and folders using entry metadata.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable

from loguru import logger

from domains.file_sorting.errors import ScanError


@dataclass(slots=True)
class Snapshot:
    """Entry names captured from one listing of the root."""

    files: set[str] = field(default_factory=set)
    folders: set[str] = field(default_factory=set)

    def clear(self) -> None:
        """Empty both sets."""
        self.files.clear()
        self.folders.clear()

    def __len__(self) -> int:
        return len(self.files) + len(self.folders)


def build_skip_set(control_files: Iterable[str], category_names: Iterable[str]) -> frozenset[str]:
    """Names that are never classified: service control files plus every category folder."""
    return frozenset(control_files) | frozenset(category_names)


def scan_directory(root: Path, skip: Iterable[str] = ()) -> Snapshot:
    """
    Snapshot the top level of ``root``.

    Symlinks are classified by what they point to; anything that is neither a
    regular file nor a directory (sockets, fifos, dangling links) is left out.

    Args:
        root: Watched root directory
        skip: Entry names to exclude

    Returns:
        Fresh snapshot of files and folders

    Raises:
        ScanError: If the root cannot be listed
    """
    skip = frozenset(skip)
    snapshot = Snapshot()

    try:
        with os.scandir(root) as entries:
            for entry in entries:
                if entry.name in skip:
                    continue
                try:
                    if entry.is_dir():
                        snapshot.folders.add(entry.name)
                    elif entry.is_file():
                        snapshot.files.add(entry.name)
                except OSError as e:
                    logger.debug(f"Could not stat {entry.name}: {e}")

    except OSError as e:
        raise ScanError(f"Error reading directory {root}: {e}") from e

    return snapshot
