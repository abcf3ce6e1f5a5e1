"""Asynchronous services layered over the student store."""

from importlib import import_module
from typing import Any

__all__ = [
    "StudentRepository",
    "Callback",
    "FunctionCallback",
    "Success",
    "Failure",
    "outcome_of",
    "service_types",
]

_LAZY_EXPORTS: dict[str, tuple[str, str]] = {
    "StudentRepository": ("studentdb.services.repository", "StudentRepository"),
    "Callback": ("studentdb.services.types", "Callback"),
    "FunctionCallback": ("studentdb.services.types", "FunctionCallback"),
    "Success": ("studentdb.services.types", "Success"),
    "Failure": ("studentdb.services.types", "Failure"),
    "outcome_of": ("studentdb.services.types", "outcome_of"),
}


def __getattr__(name: str) -> Any:
    if name == "service_types":
        module = import_module("studentdb.services.types")
        globals()[name] = module
        return module

    target = _LAZY_EXPORTS.get(name)
    if target is None:
        raise AttributeError(f"module 'studentdb.services' has no attribute {name!r}")

    module_name, attr_name = target
    module = import_module(module_name)
    value = getattr(module, attr_name)
    globals()[name] = value
    return value
