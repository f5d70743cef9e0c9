"""Admin and driver directory records.

Orders never reference these directly; they exist so that a bearer token can
be resolved to any of the four principal kinds.
"""

from enum import Enum

from protean.fields import Boolean, String

from orders.domain import orders


class AdminRole(Enum):
    ADMIN = "admin"
    SUPER_ADMIN = "super_admin"


@orders.aggregate
class Admin:
    name = String(max_length=100)
    email = String(required=True, max_length=254)
    role = String(choices=AdminRole, default=AdminRole.ADMIN.value)
    is_active = Boolean(default=True)


@orders.aggregate
class Driver:
    first_name = String(max_length=50)
    last_name = String(max_length=50)
    phone = String(max_length=20)
    is_active = Boolean(default=True)
    is_approved = Boolean(default=False)
