import logging

import pytest

from studentdb.__main__ import main
from studentdb.app.launcher import StudentLauncher
from studentdb.core.config import StoreConfig
from studentdb.services.repository import StudentRepository
from studentdb.storage.store import StudentStore


def test_bootstrap_lists_after_first_insert(tmp_path):
    launcher = StudentLauncher(tmp_path, config=StoreConfig())
    assert launcher.run() == 0
    assert launcher.repository.is_shutdown
    assert len(launcher.created) == 2
    names = [r.name for r in launcher.listed]
    assert "Alice" in names
    assert names == sorted(names)
    assert StudentStore.get_instance().count() == 2


def test_bootstrap_reports_faults(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("")
    launcher = StudentLauncher(blocker, config=StoreConfig())
    assert launcher.run() == 1
    assert launcher.listed == []
    assert launcher.created == []
    assert len(launcher.faults) == 2


def test_bootstrap_gives_up_when_chain_never_settles(tmp_path, monkeypatch):
    repo = StudentRepository(tmp_path, config=StoreConfig())
    monkeypatch.setattr(repo, "create_async", lambda record, callback=None: None)
    launcher = StudentLauncher(repository=repo, settle_timeout=0.05)
    assert launcher.run() == 1
    assert repo.is_shutdown


@pytest.fixture
def restore_logging():
    root = logging.getLogger()
    package = logging.getLogger("studentdb")
    saved = (list(root.handlers), root.level, list(package.handlers), package.level)
    yield
    for logger in (root, package):
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()
    root_handlers, root_level, package_handlers, package_level = saved
    for handler in root_handlers:
        root.addHandler(handler)
    for handler in package_handlers:
        package.addHandler(handler)
    root.setLevel(root_level)
    package.setLevel(package_level)


def test_main_runs_bootstrap_and_writes_logs(tmp_path, restore_logging):
    data_dir = tmp_path / "data"
    log_dir = tmp_path / "logs"
    assert main([str(data_dir), "--log-dir", str(log_dir), "--quiet"]) == 0
    assert (data_dir / StoreConfig().name).exists()
    text = (log_dir / "studentdb.log").read_text(encoding="utf-8")
    assert "Student added with ID" in text
    assert "Retrieved" in text
    assert StudentStore._instance is None
