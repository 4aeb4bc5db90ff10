#!/usr/bin/env python3
"""
File system watcher for File Sorting domain.

Monitors the top level of the watched root and resets the debounce timer on
rename-class changes. Event payloads are not trusted beyond filtering out the
service's own control files; every run rescans the root from scratch.
"""

from pathlib import Path
from typing import Iterable, Optional

from loguru import logger
from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from domains.file_sorting.watchers.debounce import DebouncedWatcher


class RootChangeHandler(FileSystemEventHandler):
    """Event handler that turns create/delete/move events into timer resets."""

    def __init__(self, watcher: DebouncedWatcher, ignored_names: Iterable[str] = ()):
        """
        Initialize event handler.

        Args:
            watcher: Debounced watcher to reset
            ignored_names: Entry names whose events never trigger a run
        """
        super().__init__()
        self.watcher = watcher
        self.ignored_names = frozenset(ignored_names)

    def should_process(self, event: FileSystemEvent) -> bool:
        """
        Check if event should trigger a run.

        Args:
            event: Watchdog event

        Returns:
            True unless every path in the event is a control file
        """
        paths = [event.src_path, getattr(event, "dest_path", None)]
        names = {Path(p).name for p in paths if p}
        return bool(names - self.ignored_names)

    def _notify(self, event: FileSystemEvent):
        if not self.should_process(event):
            return

        logger.debug(f"Change: {event.event_type} {event.src_path}")
        self.watcher.reset_threadsafe()

    def on_created(self, event: FileSystemEvent):
        """Handle file/directory creation."""
        self._notify(event)

    def on_deleted(self, event: FileSystemEvent):
        """Handle file/directory deletion."""
        self._notify(event)

    def on_moved(self, event: FileSystemEvent):
        """Handle file/directory move/rename."""
        self._notify(event)


class RootWatcher:
    """Watchdog observer bound to one root, non-recursive."""

    def __init__(self, root: Path, handler: RootChangeHandler):
        self.root = Path(root)
        self.handler = handler
        self.observer: Optional[Observer] = None

    def start_watching(self):
        """Start watching the root."""
        self.observer = Observer()
        self.observer.schedule(self.handler, str(self.root), recursive=False)
        self.observer.daemon = True
        self.observer.start()
        logger.info(f"Watching for file changes in {self.root}")

    def stop_watching(self):
        """Stop watching."""
        if self.observer is None:
            return
        self.observer.stop()
        self.observer.join()
        self.observer = None
        logger.info("File system observer stopped")
