__all__ = [
    "get_password_hash",
    "verify_password",
    "utcnow",
]


def __getattr__(name):
    if name in {"get_password_hash", "verify_password"}:
        from . import security as _security
        return getattr(_security, name)
    if name == "utcnow":
        from .clock import utcnow
        return utcnow
    raise AttributeError(f"module 'ecovive.utils' has no attribute '{name}'")
