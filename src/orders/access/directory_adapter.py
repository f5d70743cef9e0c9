"""Identity adapter backed by the orders directory.

Tokens are ``<account id>.<signature>`` where the signature is an HMAC of the
id under ``settings.TOKEN_SECRET``. The id alone does not say what kind of
account it is, so the directories are searched in a fixed order: admins,
customers, restaurants, drivers. The first hit wins.
"""

import hashlib
import hmac

import structlog
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from orders import settings
from orders.access.port import IdentityPort, Principal, PrincipalKind
from orders.directory.customer import Customer
from orders.directory.restaurant import Restaurant
from orders.directory.staff import Admin, Driver
from orders.errors import AuthenticationError

logger = structlog.get_logger(__name__)


def _sign(subject_id: str, secret: str) -> str:
    return hmac.new(secret.encode(), subject_id.encode(), hashlib.sha256).hexdigest()


class DirectoryIdentity(IdentityPort):
    def __init__(self, secret: str | None = None) -> None:
        self.secret = secret or settings.TOKEN_SECRET

    def issue_token(self, subject_id: str) -> str:
        subject_id = str(subject_id)
        return f"{subject_id}.{_sign(subject_id, self.secret)}"

    def _subject_of(self, token: str) -> str:
        subject_id, _, signature = (token or "").rpartition(".")
        if not subject_id or not hmac.compare_digest(signature, _sign(subject_id, self.secret)):
            raise AuthenticationError("Invalid token")
        return subject_id

    @staticmethod
    def _lookup(cls, subject_id):
        try:
            return current_domain.repository_for(cls).get(subject_id)
        except ObjectNotFoundError:
            return None

    def resolve(self, token: str) -> Principal:
        subject_id = self._subject_of(token)

        admin = self._lookup(Admin, subject_id)
        if admin is not None:
            if not admin.is_active:
                raise AuthenticationError("Admin account is deactivated")
            return Principal(kind=PrincipalKind.ADMIN.value, id=subject_id, role_name=admin.role)

        customer = self._lookup(Customer, subject_id)
        if customer is not None:
            if customer.is_blocked:
                raise AuthenticationError("User account is blocked")
            if not customer.is_active:
                raise AuthenticationError("User account is deactivated")
            return Principal(kind=PrincipalKind.USER.value, id=subject_id, role_name=PrincipalKind.USER.value)

        restaurant = self._lookup(Restaurant, subject_id)
        if restaurant is not None:
            if not restaurant.is_active:
                raise AuthenticationError("Restaurant account is deactivated")
            return Principal(
                kind=PrincipalKind.RESTAURANT.value,
                id=subject_id,
                role_name=PrincipalKind.RESTAURANT.value,
                can_manage_orders=bool(restaurant.is_approved),
            )

        driver = self._lookup(Driver, subject_id)
        if driver is not None:
            if not driver.is_active:
                raise AuthenticationError("Driver account is deactivated")
            return Principal(kind=PrincipalKind.DRIVER.value, id=subject_id, role_name=PrincipalKind.DRIVER.value)

        logger.info("token_subject_unknown", subject_id=subject_id)
        raise AuthenticationError("Invalid token")
