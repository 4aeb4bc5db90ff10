from pathlib import Path

import pytest

pytest.importorskip("watchdog", reason="watchdog dependency is required for handler tests")

from domains.file_sorting.watchers.filesystem import RootChangeHandler


class FakeWatcher:
    def __init__(self):
        self.resets = 0

    def reset_threadsafe(self):
        self.resets += 1


class Event:
    def __init__(self, src: Path, dest: Path | None = None, event_type: str = "created"):
        self.src_path = str(src)
        self.dest_path = str(dest) if dest else ""
        self.event_type = event_type
        self.is_directory = False


@pytest.fixture
def watcher() -> FakeWatcher:
    return FakeWatcher()


def test_rename_class_events_reset_timer(tmp_path, watcher):
    handler = RootChangeHandler(watcher, ignored_names=["runtime.log"])

    handler.on_created(Event(tmp_path / "new.txt"))
    handler.on_deleted(Event(tmp_path / "gone.txt", event_type="deleted"))
    handler.on_moved(Event(tmp_path / "a.txt", tmp_path / "b.txt", event_type="moved"))

    assert watcher.resets == 3


def test_modifications_are_ignored(tmp_path, watcher):
    handler = RootChangeHandler(watcher)

    handler.on_modified(Event(tmp_path / "growing.iso", event_type="modified"))

    assert watcher.resets == 0


def test_control_file_events_are_ignored(tmp_path, watcher):
    handler = RootChangeHandler(watcher, ignored_names=["runtime.log"])

    handler.on_created(Event(tmp_path / "runtime.log"))

    assert watcher.resets == 0


def test_move_onto_a_sortable_name_counts(tmp_path, watcher):
    handler = RootChangeHandler(watcher, ignored_names=["runtime.log"])

    handler.on_moved(Event(tmp_path / "runtime.log", tmp_path / "old.log", event_type="moved"))

    assert watcher.resets == 1
