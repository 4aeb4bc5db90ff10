"""
Category folder provisioning for File Sorting domain.

Creates category folders directly under the watched root. Creation is
idempotent: a folder that already exists counts as success, including one
created concurrently by another attempt.
"""

import asyncio
from pathlib import Path
from typing import Iterable

from loguru import logger

from domains.file_sorting.errors import ProvisionError


class FolderProvisioner:
    """Ensures category folders exist under one root."""

    def __init__(self, root: Path):
        self.root = Path(root)
        self.announced = False

    def ensure(self, category: str) -> bool:
        """
        Ensure ``<root>/<category>`` exists as a directory.

        Args:
            category: Category folder name

        Returns:
            True if the folder was created by this call, False if it already existed

        Raises:
            ProvisionError: On any filesystem failure other than pre-existence
        """
        folder = self.root / category

        try:
            folder.mkdir()
        except FileExistsError:
            if folder.is_dir():
                return False
            raise ProvisionError(f"Error creating folder: {category}/ exists and is not a directory")
        except OSError as e:
            raise ProvisionError(f"Error creating folder: {category}/ ({e})") from e

        logger.info(f"Created folder: {category}/")
        return True

    async def ensure_async(self, category: str) -> bool:
        """Run :meth:`ensure` off the event loop."""
        return await asyncio.to_thread(self.ensure, category)

    async def provision_all(self, categories: Iterable[str]) -> int:
        """
        Eagerly create every category folder.

        Failures are logged and do not stop the remaining folders.

        Returns:
            Number of folders created
        """
        results = await asyncio.gather(
            *(self.ensure_async(c) for c in categories),
            return_exceptions=True,
        )

        created = 0
        for result in results:
            if isinstance(result, ProvisionError):
                logger.error(str(result))
            elif isinstance(result, BaseException):
                raise result
            elif result:
                created += 1

        if not self.announced:
            logger.info("Category folders created")
            self.announced = True

        return created
