import logging
import sys

import pytest

from studentdb.core.logging_config import get_log_directory, setup_logging


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


def test_setup_creates_rotating_logs(tmp_path, restore_logging):
    log_dir = setup_logging(log_dir=tmp_path / "logs", console_level=logging.CRITICAL)
    assert log_dir == tmp_path / "logs"

    logging.getLogger("studentdb.storage.store").debug("debug detail")
    logging.getLogger("studentdb.services.repository").error("store fault")
    for handler in logging.getLogger("studentdb").handlers + logging.getLogger().handlers:
        handler.flush()

    app_log = (log_dir / "studentdb.log").read_text(encoding="utf-8")
    error_log = (log_dir / "errors.log").read_text(encoding="utf-8")
    assert "debug detail" in app_log
    assert "store fault" in app_log
    assert "store fault" in error_log
    assert "debug detail" not in error_log


def test_repeated_setup_does_not_duplicate_handlers(tmp_path, restore_logging):
    setup_logging(log_dir=tmp_path, console_level=logging.CRITICAL)
    setup_logging(log_dir=tmp_path, console_level=logging.CRITICAL)
    assert len(logging.getLogger("studentdb").handlers) == 2
    assert len(logging.getLogger().handlers) == 1


def test_log_directory_follows_xdg(monkeypatch, tmp_path):
    if sys.platform in ("win32", "darwin"):
        pytest.skip("XDG layout applies to Linux only")
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path))
    assert get_log_directory("Roster") == tmp_path / "Roster" / "logs"
