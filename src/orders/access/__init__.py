"""Identity adapter factory.

Provides get_identity() / set_identity() to swap implementations. The
directory-backed adapter is the only one shipped; tests may install their own.
"""

from orders import settings
from orders.access.directory_adapter import DirectoryIdentity
from orders.access.port import IdentityPort

_current_identity: IdentityPort | None = None


def get_identity() -> IdentityPort:
    """Return the current identity adapter. Defaults to DirectoryIdentity."""
    global _current_identity
    if _current_identity is None:
        if settings.IDENTITY_ADAPTER != "directory":
            raise ValueError(f"Unknown identity adapter: {settings.IDENTITY_ADAPTER}")
        _current_identity = DirectoryIdentity()
    return _current_identity


def set_identity(identity: IdentityPort) -> None:
    global _current_identity
    _current_identity = identity


def reset_identity() -> None:
    global _current_identity
    _current_identity = None
