"""Callback contract and outcome types for asynchronous store operations."""

from __future__ import annotations

import logging
from collections.abc import Callable
from concurrent.futures import Future
from dataclasses import dataclass
from typing import Any, ClassVar, Generic, NoReturn, Protocol, TypeVar, Union, runtime_checkable

log = logging.getLogger(__name__)

__all__ = [
    "Callback",
    "FunctionCallback",
    "Success",
    "Failure",
    "Outcome",
    "deliver",
    "outcome_of",
]

T = TypeVar("T")
T_contra = TypeVar("T_contra", contravariant=True)


@runtime_checkable
class Callback(Protocol[T_contra]):
    """Two-branch receiver; exactly one branch fires per submitted operation."""

    def on_success(self, result: T_contra) -> None: ...

    def on_error(self, fault: BaseException) -> None: ...


@dataclass(frozen=True)
class FunctionCallback(Generic[T]):
    """Adapt plain callables to :class:`Callback`.

    Without an ``error`` handler, faults are logged at ERROR level.
    """

    success: Callable[[T], Any]
    error: Callable[[BaseException], Any] | None = None

    def on_success(self, result: T) -> None:
        self.success(result)

    def on_error(self, fault: BaseException) -> None:
        if self.error is None:
            log.error(f"Unhandled store fault: {fault!r}")
            return
        self.error(fault)


@dataclass(frozen=True)
class Success(Generic[T]):
    value: T
    ok: ClassVar[bool] = True

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True)
class Failure:
    fault: BaseException
    ok: ClassVar[bool] = False

    def unwrap(self) -> NoReturn:
        raise self.fault


Outcome = Union[Success[T], Failure]


def deliver(callback: Callback[Any] | None, outcome: Outcome[Any]) -> None:
    """Invoke the branch of ``callback`` matching ``outcome``.

    An exception raised by the branch is logged and never re-routed to the
    other branch.
    """

    if callback is None:
        return
    try:
        if isinstance(outcome, Success):
            callback.on_success(outcome.value)
        else:
            callback.on_error(outcome.fault)
    except Exception:
        branch = "on_success" if outcome.ok else "on_error"
        log.exception(f"Callback {callback!r} raised from {branch}")


def outcome_of(future: Future[T], timeout: float | None = None) -> Outcome[T]:
    """Wait for ``future`` and fold its result or fault into an :data:`Outcome`."""

    fault = future.exception(timeout=timeout)
    if fault is not None:
        return Failure(fault)
    return Success(future.result())
