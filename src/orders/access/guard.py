"""FastAPI dependencies that turn the Authorization header into a Principal."""

from fastapi import Header

from orders.access import get_identity
from orders.access.port import Principal, PrincipalKind
from orders.errors import AuthenticationError, AuthorizationError


def _bearer(authorization: str) -> str:
    scheme, _, token = (authorization or "").partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise AuthenticationError("No token provided")
    return token.strip()


def _allowed(principal: Principal, roles: tuple[str, ...]) -> bool:
    if principal.role_name in roles:
        return True
    # super_admin satisfies any route open to admins
    return principal.is_admin and PrincipalKind.ADMIN.value in roles


def require_roles(*roles: str, manages_orders: bool = False):
    """Build a dependency admitting only principals whose role is in ``roles``.

    With ``manages_orders`` set, restaurants that are not yet approved are
    turned away even though they can sign in.
    """

    async def dependency(authorization: str = Header(default="")) -> Principal:
        principal = get_identity().resolve(_bearer(authorization))
        if not _allowed(principal, roles):
            raise AuthorizationError("Access denied: insufficient permissions")
        if manages_orders and not principal.can_manage_orders:
            raise AuthorizationError("Restaurant is not approved to manage orders")
        return principal

    return dependency
