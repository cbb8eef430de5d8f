# ecovive/api/__init__.py
# This file makes the api directory a Python package.

from . import catalog
from . import reports
from . import users

__all__ = [
    "catalog",
    "reports",
    "users",
]
