"""Application bootstrap helpers."""

from importlib import import_module

__all__ = ["StudentLauncher"]


def __getattr__(name: str):
    if name == "StudentLauncher":
        module = import_module("studentdb.app.launcher")
        value = module.StudentLauncher
    else:
        raise AttributeError(f"module 'studentdb.app' has no attribute {name!r}")
    globals()[name] = value
    return value
