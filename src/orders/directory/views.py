"""Read-side projections over directory records.

These are computed on demand for responses and never persisted.
"""

from orders.directory.customer import Customer
from orders.directory.menu_item import MenuItem
from orders.directory.restaurant import Restaurant


def full_name(customer: Customer) -> str:
    if not customer.first_name and not customer.last_name:
        return "User"
    if not customer.first_name:
        return customer.last_name
    if not customer.last_name:
        return customer.first_name
    return f"{customer.first_name} {customer.last_name}"


def customer_profile(customer: Customer) -> dict:
    return {
        "id": str(customer.id),
        "first_name": customer.first_name,
        "last_name": customer.last_name,
        "full_name": full_name(customer),
        "email": customer.email,
        "phone": customer.phone,
        "city": customer.city,
        "is_active": customer.is_active,
        "created_at": customer.created_at.isoformat() if customer.created_at else None,
    }


def restaurant_profile(restaurant: Restaurant) -> dict:
    return {
        "id": str(restaurant.id),
        "business_name": restaurant.business_name,
        "display_name": restaurant.display_name(),
        "first_name": restaurant.first_name,
        "last_name": restaurant.last_name,
        "email": restaurant.email,
        "phone": restaurant.phone,
        "city": restaurant.city,
        "category": restaurant.category,
        "is_active": restaurant.is_active,
        "is_approved": restaurant.is_approved,
    }


def availability_status(item: MenuItem) -> str:
    """``inactive`` for retired items, otherwise the stock availability."""
    if not item.is_active:
        return "inactive"
    return item.availability
