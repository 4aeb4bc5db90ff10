"""
Service-level tests for the sorting service.

They run the real watchdog observer and the real CLI entry point against a
temporary directory and check the observable outcome: where entries end up
and what the control log says.
"""

import asyncio
import re
import sys

import pytest
from loguru import logger

from app.models.schemas import RunOptions
from domains.file_sorting.engine import SortingEngine
from domains.file_sorting.watchers.filesystem import RootChangeHandler, RootWatcher
from scripts.tidyroot_service import main, parse_args

LOG_LINE = re.compile(r"^\[\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}Z\] .+$")


@pytest.fixture
def restore_logger():
    """main() replaces loguru sinks; put a plain stderr sink back afterwards."""
    yield
    logger.remove()
    logger.add(sys.stderr)


async def wait_for(predicate, timeout: float = 5.0):
    deadline = asyncio.get_running_loop().time() + timeout
    while not predicate():
        if asyncio.get_running_loop().time() > deadline:
            return False
        await asyncio.sleep(0.05)
    return True


def test_new_files_are_sorted_after_debounce(tmp_path):
    (tmp_path / "early.png").write_bytes(b"png")

    async def scenario():
        engine = SortingEngine(tmp_path, control_files=["runtime.log"])
        watcher = await engine.boot(RunOptions(debounce_interval_ms=100))
        assert (tmp_path / "images" / "early.png").exists()

        root_watcher = RootWatcher(tmp_path, RootChangeHandler(watcher, ["runtime.log"]))
        root_watcher.start_watching()
        try:
            (tmp_path / "late.pdf").write_bytes(b"%PDF")
            (tmp_path / "album").mkdir()
            moved = await wait_for(
                lambda: (tmp_path / "documents" / "late.pdf").exists()
                and (tmp_path / "others" / "album").is_dir()
            )
        finally:
            watcher.cancel()
            root_watcher.stop_watching()
            await watcher.wait_idle()
        return moved

    assert asyncio.run(scenario()) is True
    assert not (tmp_path / "late.pdf").exists()


def test_once_mode_sorts_and_writes_control_log(tmp_path, restore_logger):
    (tmp_path / "notes.txt").write_text("notes")
    (tmp_path / "setup.exe").write_bytes(b"MZ")

    exit_code = main(["--root", str(tmp_path), "--once"])

    assert exit_code == 0
    logger.remove()
    assert (tmp_path / "documents" / "notes.txt").exists()
    assert (tmp_path / "programs" / "setup.exe").exists()
    assert (tmp_path / "runtime.log").exists()

    lines = (tmp_path / "runtime.log").read_text().splitlines()
    assert lines
    assert all(LOG_LINE.match(line) for line in lines)
    assert any(line.endswith("Moved: notes.txt to documents/") for line in lines)


def test_once_mode_with_eager_provision(tmp_path, restore_logger):
    exit_code = main(["--root", str(tmp_path), "--once", "--eager-provision", "--log-file", "sorter.log"])

    assert exit_code == 0
    assert (tmp_path / "fonts").is_dir()
    assert (tmp_path / "others").is_dir()
    assert (tmp_path / "sorter.log").exists()
    assert not (tmp_path / "others" / "sorter.log").exists()


def test_once_mode_provisions_before_scanning(tmp_path, restore_logger, monkeypatch):
    from domains.file_sorting import engine as engine_module

    folders_at_scan = []
    real_scan = engine_module.scan_directory

    def recording_scan(root, skip=()):
        folders_at_scan.append(sorted(p.name for p in root.iterdir() if p.is_dir()))
        return real_scan(root, skip)

    monkeypatch.setattr(engine_module, "scan_directory", recording_scan)
    (tmp_path / "notes.txt").write_text("notes")

    assert main(["--root", str(tmp_path), "--once", "--eager-provision"]) == 0
    logger.remove()

    assert len(folders_at_scan) == 1
    assert "documents" in folders_at_scan[0]
    assert "others" in folders_at_scan[0]
    assert (tmp_path / "documents" / "notes.txt").exists()
    assert "Retrying in" not in (tmp_path / "runtime.log").read_text()


def test_default_settings_leave_the_service_in_place(tmp_path, restore_logger):
    (tmp_path / "photo.JPG").write_bytes(b"jpg")
    (tmp_path / "notes.txt").write_text("notes")
    (tmp_path / "tool").mkdir()
    (tmp_path / "service.js").write_text("// service")
    (tmp_path / "tidyroot_service.py").write_text("# entry point")
    (tmp_path / "pyproject.toml").write_text("[project]")
    for package in ("app", "domains", "scripts"):
        (tmp_path / package).mkdir()

    assert main(["--root", str(tmp_path), "--once"]) == 0
    logger.remove()

    assert (tmp_path / "images" / "photo.JPG").exists()
    assert (tmp_path / "documents" / "notes.txt").exists()
    assert (tmp_path / "others" / "tool").is_dir()
    for name in ("service.js", "tidyroot_service.py", "pyproject.toml"):
        assert (tmp_path / name).is_file()
    for package in ("app", "domains", "scripts"):
        assert (tmp_path / package).is_dir()
    assert sorted(p.name for p in (tmp_path / "others").iterdir()) == ["tool"]
    assert not (tmp_path / "code").exists()


def test_missing_root_exits_with_error(tmp_path):
    assert main(["--root", str(tmp_path / "nope"), "--once"]) == 1


def test_parse_args_defaults_leave_settings_alone():
    args = parse_args([])

    assert args.root is None
    assert args.eager_provision is None
    assert args.debounce_ms is None
    assert args.once is False
