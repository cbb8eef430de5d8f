# ecovive/services/errors.py
"""
Error taxonomy shared by the service layer.

Routers translate these into HTTP responses; services never raise
HTTPException themselves.
"""


class EcoViveError(Exception):
    """Base class for all service-layer failures."""


class ValidationError(EcoViveError, ValueError):
    """Malformed input. Raised before any state change."""


class InvalidTransition(EcoViveError, ValueError):
    """Status change not allowed from the report's current status."""

    def __init__(self, current, target, message=None):
        self.current = current
        self.target = target
        super().__init__(
            message
            or f"Cannot move report from {_name(current)} to {_name(target)}"
        )


class NotFound(EcoViveError, LookupError):
    """Unknown report or user id."""


class StorageError(EcoViveError):
    """Persistence or blob store failure. Propagated without retry."""


def _name(status) -> str:
    return getattr(status, "value", str(status))
