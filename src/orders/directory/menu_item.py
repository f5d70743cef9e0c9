"""Menu item directory record: what a cart line points back to."""

from enum import Enum

from protean.fields import Boolean, Float, Identifier, String

from orders.domain import orders


class Availability(Enum):
    IN_STOCK = "in-stock"
    OUT_OF_STOCK = "out-of-stock"
    LIMITED = "limited"


@orders.aggregate
class MenuItem:
    restaurant_id = Identifier(required=True)
    name = String(required=True, max_length=100)
    description = String(max_length=500)
    price = Float(required=True, min_value=0.0)
    image = String(max_length=500)
    category = String(max_length=50)
    availability = String(choices=Availability, default=Availability.IN_STOCK.value)
    is_active = Boolean(default=True)
