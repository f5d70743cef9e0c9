"""Exceptions raised by the orders context beyond Protean's own.

Input problems use ``protean.exceptions.ValidationError`` and missing records
use ``protean.exceptions.ObjectNotFoundError``, as everywhere else. The
classes here cover order-state conflicts, stale writes, store failures and
authentication.
"""

from protean.exceptions import ValidationError


class OrderStateError(ValidationError):
    """The order's current status does not allow the requested change."""


class StaleOrderError(ValidationError):
    """The order changed since the caller last read it."""


class PersistenceError(Exception):
    """The order store rejected or could not complete a write."""


class AuthenticationError(Exception):
    """No usable principal could be resolved from the bearer token."""


class AuthorizationError(Exception):
    """The principal is not allowed to perform the operation."""


def describe(exc: Exception) -> str:
    """Flatten an exception into a one-line human readable message."""
    messages = getattr(exc, "messages", None)
    if isinstance(messages, dict):
        parts = []
        for field, errors in messages.items():
            if isinstance(errors, (list, tuple)):
                parts.extend(str(e) for e in errors)
            else:
                parts.append(f"{field}: {errors}")
        if parts:
            return "; ".join(parts)
    if messages:
        return str(messages)
    if exc.args:
        return str(exc.args[0])
    return exc.__class__.__name__
