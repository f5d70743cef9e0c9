"""Identity port (abstract interface).

Resolves an opaque bearer token into the principal making a request. The
order routes depend only on this contract, so the directory-backed adapter
can be swapped for an external identity provider without touching them.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum


class PrincipalKind(Enum):
    ADMIN = "admin"
    USER = "user"
    RESTAURANT = "restaurant"
    DRIVER = "driver"


@dataclass(frozen=True)
class Principal:
    """An authenticated caller.

    ``role_name`` is what route guards compare against: the admin's role for
    admins (``admin`` or ``super_admin``), otherwise the kind itself.
    """

    kind: str
    id: str
    role_name: str
    can_manage_orders: bool = True

    @property
    def is_admin(self) -> bool:
        return self.kind == PrincipalKind.ADMIN.value


class IdentityPort(ABC):
    """Abstract identity resolver."""

    @abstractmethod
    def resolve(self, token: str) -> Principal:
        """Return the principal for ``token``.

        Raises ``orders.errors.AuthenticationError`` when the token is
        malformed, unknown, or belongs to a disabled account.
        """
        ...
