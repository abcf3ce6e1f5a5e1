import threading
from pathlib import Path

import pytest

from studentdb.core import config as _config
from studentdb.core.config import StoreConfig
from studentdb.storage.store import StudentStore


class RecordingCallback:
    """Collects every branch invocation and the thread it ran on."""

    def __init__(self):
        self.successes = []
        self.errors = []
        self.threads = []
        self.done = threading.Event()
        self._lock = threading.Lock()

    def on_success(self, result):
        with self._lock:
            self.successes.append(result)
            self.threads.append(threading.current_thread())
        self.done.set()

    def on_error(self, fault):
        with self._lock:
            self.errors.append(fault)
            self.threads.append(threading.current_thread())
        self.done.set()

    def wait(self, timeout=5.0):
        assert self.done.wait(timeout), "callback never fired"
        return self

    @property
    def calls(self):
        return len(self.successes) + len(self.errors)

    @property
    def result(self):
        assert not self.errors, f"unexpected fault: {self.errors!r}"
        assert len(self.successes) == 1
        return self.successes[0]


@pytest.fixture(autouse=True)
def _reset_process_state(monkeypatch):
    for key in ("STUDENTDB_NAME", "STUDENTDB_VERSION", "STUDENTDB_POOL_SIZE"):
        monkeypatch.delenv(key, raising=False)
    _config.reload()
    yield
    StudentStore.reset_instance()
    _config.reload()


@pytest.fixture
def config():
    return StoreConfig()


@pytest.fixture
def store(tmp_path: Path, config):
    s = StudentStore.open(tmp_path, config)
    yield s
    s.close()


@pytest.fixture
def callback():
    return RecordingCallback()


@pytest.fixture
def make_callback():
    return RecordingCallback
