"""Query helpers for users and reports.

Submodules load on first attribute access so `ecovive.crud.report` can be
imported by the proximity index without pulling in the user helpers.
"""

from importlib import import_module

__all__ = ["user", "report"]


def __getattr__(name):
    if name in __all__:
        return import_module(f".{name}", __name__)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
