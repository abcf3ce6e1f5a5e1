"""
Asynchronous repository over the shared :class:`StudentStore`.

Every operation is queued on a fixed worker pool owned by the repository and
returns immediately with a :class:`concurrent.futures.Future`. The matching
store call runs on a worker thread; its result or fault is delivered to the
callback on that same worker thread, after which the future resolves.

Usage:
    repo = StudentRepository(data_dir)
    repo.create_async(Record(name="Alice"), FunctionCallback(print, print))
    repo.shutdown()
"""

from __future__ import annotations

import asyncio
import logging
import os
import threading
from collections.abc import Callable
from concurrent.futures import Future, ThreadPoolExecutor
from typing import TypeVar

from studentdb.core.config import StoreConfig, load_config
from studentdb.core.models import Record
from studentdb.services.types import Callback, Failure, Success, deliver
from studentdb.storage.errors import ClosedFault, StoreFault
from studentdb.storage.store import StudentStore

log = logging.getLogger(__name__)

__all__ = ["StudentRepository"]

T = TypeVar("T")


class StudentRepository:
    """Non-blocking CRUD façade; one worker pool per instance."""

    def __init__(
        self,
        location: str | os.PathLike[str] | None = None,
        *,
        config: StoreConfig | None = None,
        store: StudentStore | None = None,
    ) -> None:
        if config is None:
            config = store.config if store is not None else load_config()
        self.location = location
        self.config = config
        self._store = store
        self._injected = store is not None
        self._store_lock = threading.Lock()
        self._submit_lock = threading.Lock()
        self._shutdown = False
        self._worker = threading.local()
        self._executor = ThreadPoolExecutor(
            max_workers=config.pool_size,
            thread_name_prefix="studentdb-worker",
            initializer=self._mark_worker,
        )

    # ------------------------------------------------------------------ #
    # Dispatch                                                           #
    # ------------------------------------------------------------------ #
    @property
    def is_shutdown(self) -> bool:
        return self._shutdown

    def _mark_worker(self) -> None:
        self._worker.active = True

    def _in_worker(self) -> bool:
        return getattr(self._worker, "active", False)

    def _usable(self, store: StudentStore | None) -> bool:
        # A shared handle closed by reset_instance() is fetched again
        return store is not None and (self._injected or not store.closed)

    def _acquire_store(self) -> StudentStore:
        # Runs on a worker; an open failure is retried by the next operation
        store = self._store
        if self._usable(store):
            return store
        with self._store_lock:
            if not self._usable(self._store):
                self._store = StudentStore.get_instance(self.location, self.config)
            return self._store

    def _run(
        self,
        operation: str,
        work: Callable[[StudentStore], T],
        callback: Callback[T] | None,
    ) -> T:
        try:
            result = work(self._acquire_store())
        except StoreFault as fault:
            log.warning(f"{operation} failed: {fault}")
            deliver(callback, Failure(fault))
            raise
        except Exception as exc:
            log.exception(f"{operation} raised an unexpected error")
            deliver(callback, Failure(exc))
            raise
        deliver(callback, Success(result))
        return result

    def _submit(
        self,
        operation: str,
        work: Callable[[StudentStore], T],
        callback: Callback[T] | None,
    ) -> Future[T]:
        with self._submit_lock:
            if self._shutdown:
                raise ClosedFault(f"{operation}: repository has been shut down")
            try:
                future = self._executor.submit(self._run, operation, work, callback)
            except RuntimeError as exc:
                raise ClosedFault(f"{operation}: worker pool is not accepting work") from exc
        log.debug(f"Queued {operation}")
        return future

    # ------------------------------------------------------------------ #
    # Callback API                                                       #
    # ------------------------------------------------------------------ #
    def create_async(self, record: Record, callback: Callback[int] | None = None) -> Future[int]:
        """Insert ``record``; delivers the new id."""

        return self._submit("create", lambda store: store.create(record), callback)

    def read_async(
        self, record_id: int, callback: Callback[Record | None] | None = None
    ) -> Future[Record | None]:
        """Look up one record; delivers ``None`` when nothing matches."""

        return self._submit("read", lambda store: store.read_by_id(record_id), callback)

    def read_all_async(
        self, callback: Callback[list[Record]] | None = None
    ) -> Future[list[Record]]:
        """Delivers every record ordered by name."""

        return self._submit("read_all", lambda store: store.read_all(), callback)

    def update_async(self, record: Record, callback: Callback[int] | None = None) -> Future[int]:
        """Rename the row matching ``record.id``; delivers rows affected (0 or 1)."""

        return self._submit("update", lambda store: store.update(record), callback)

    def delete_async(self, record_id: int, callback: Callback[bool] | None = None) -> Future[bool]:
        """Delivers whether a row was removed."""

        return self._submit("delete", lambda store: store.delete(record_id), callback)

    def count_async(self, callback: Callback[int] | None = None) -> Future[int]:
        return self._submit("count", lambda store: store.count(), callback)

    # ------------------------------------------------------------------ #
    # Awaitable API                                                      #
    # ------------------------------------------------------------------ #
    @staticmethod
    async def _wait(future: Future[T], timeout: float | None) -> T:
        wrapped = asyncio.wrap_future(future)
        if timeout is None:
            return await wrapped
        # Shielded: a timeout abandons the wait, never the queued operation
        return await asyncio.wait_for(asyncio.shield(wrapped), timeout)

    async def create(self, record: Record, *, timeout: float | None = None) -> int:
        return await self._wait(self.create_async(record), timeout)

    async def read(self, record_id: int, *, timeout: float | None = None) -> Record | None:
        return await self._wait(self.read_async(record_id), timeout)

    async def read_all(self, *, timeout: float | None = None) -> list[Record]:
        return await self._wait(self.read_all_async(), timeout)

    async def update(self, record: Record, *, timeout: float | None = None) -> int:
        return await self._wait(self.update_async(record), timeout)

    async def delete(self, record_id: int, *, timeout: float | None = None) -> bool:
        return await self._wait(self.delete_async(record_id), timeout)

    async def count(self, *, timeout: float | None = None) -> int:
        return await self._wait(self.count_async(), timeout)

    # ------------------------------------------------------------------ #
    # Lifecycle                                                          #
    # ------------------------------------------------------------------ #
    def shutdown(self, wait: bool = False) -> None:
        """Stop accepting work; queued and in-flight operations still complete.

        ``wait=True`` blocks until the pool has drained. Called from a callback,
        which runs on one of this pool's workers, the wait is skipped since a
        worker cannot join itself.
        """

        if wait and self._in_worker():
            log.debug("shutdown(wait=True) called from a worker; not waiting")
            wait = False
        with self._submit_lock:
            first = not self._shutdown
            self._shutdown = True
        if first:
            log.info("Repository shutting down; draining queued operations")
        else:
            log.debug("Repository already shut down")
        self._executor.shutdown(wait=wait)

    def __enter__(self) -> StudentRepository:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.shutdown(wait=True)

    def __repr__(self) -> str:
        state = "shutdown" if self._shutdown else "open"
        return f"StudentRepository(location={self.location!r}, pool_size={self.config.pool_size}, {state})"
