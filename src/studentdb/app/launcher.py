"""Bootstrap sequence exercising the repository the way the app shell does."""

from __future__ import annotations

import logging
import os
import threading

from studentdb.core.config import StoreConfig
from studentdb.core.models import Record
from studentdb.services.repository import StudentRepository
from studentdb.services.types import FunctionCallback

log = logging.getLogger(__name__)

__all__ = ["StudentLauncher"]


class StudentLauncher:
    """Insert the seed students and list the table once the first insert lands.

    The listing is chained from the first insert's callback, so it always sees
    that row; the second insert is independent and may or may not be included.
    """

    SEED = (("Alice", True), ("Bob", False))

    def __init__(
        self,
        location: str | os.PathLike[str] | None = None,
        *,
        config: StoreConfig | None = None,
        repository: StudentRepository | None = None,
        settle_timeout: float = 30.0,
    ) -> None:
        self.repository = repository or StudentRepository(location, config=config)
        self.settle_timeout = settle_timeout
        self.listed: list[Record] = []
        self.created: list[int] = []
        self.faults: list[BaseException] = []
        self._lock = threading.Lock()
        self._chain_done = threading.Event()

    # ------------------------------------------------------------------
    def _record_fault(self, what: str, fault: BaseException, *, ends_chain: bool = False) -> None:
        log.error(f"Error {what}: {fault}")
        with self._lock:
            self.faults.append(fault)
        if ends_chain:
            self._chain_done.set()

    def _add_student(self, name: str, load_all_after: bool) -> None:
        def on_success(new_id: int) -> None:
            log.info(f"Student added with ID: {new_id}")
            with self._lock:
                self.created.append(new_id)
            if load_all_after:
                self._load_all_students()

        def on_error(fault: BaseException) -> None:
            self._record_fault("adding student", fault, ends_chain=load_all_after)

        self.repository.create_async(Record(name=name), FunctionCallback(on_success, on_error))

    def _load_all_students(self) -> None:
        def on_success(students: list[Record]) -> None:
            log.info(f"Retrieved {len(students)} students:")
            for student in students:
                log.info(str(student))
            with self._lock:
                self.listed = list(students)
            self._chain_done.set()

        def on_error(fault: BaseException) -> None:
            self._record_fault("loading students", fault, ends_chain=True)

        self.repository.read_all_async(FunctionCallback(on_success, on_error))

    # ------------------------------------------------------------------
    def run(self) -> int:
        """Run the sequence, drain the pool and return a process exit code."""

        for name, load_all_after in self.SEED:
            self._add_student(name, load_all_after)
        if not self._chain_done.wait(self.settle_timeout):
            log.error(f"Bootstrap did not settle within {self.settle_timeout}s")
            self.repository.shutdown(wait=False)
            return 1
        self.repository.shutdown(wait=True)
        return 1 if self.faults else 0
