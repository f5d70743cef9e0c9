"""Domain events for the Cart aggregate."""

from protean.fields import Float, Identifier, Integer, String

from orders.domain import orders


@orders.event(part_of="Cart")
class CartItemAdded:
    """A menu item was added to the cart, or its quantity topped up."""

    __version__ = 1

    cart_id = Identifier(required=True)
    item_id = Identifier(required=True)
    name = String(required=True)
    quantity = Integer(required=True)
    subtotal = Float(required=True)


@orders.event(part_of="Cart")
class CartItemQuantityUpdated:
    __version__ = 1

    cart_id = Identifier(required=True)
    item_id = Identifier(required=True)
    previous_quantity = Integer(required=True)
    new_quantity = Integer(required=True)
    subtotal = Float(required=True)


@orders.event(part_of="Cart")
class CartItemRemoved:
    __version__ = 1

    cart_id = Identifier(required=True)
    item_id = Identifier(required=True)
    subtotal = Float(required=True)


@orders.event(part_of="Cart")
class CartCleared:
    """Every line was dropped, either by the customer or after checkout."""

    __version__ = 1

    cart_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    restaurant_id = Identifier(required=True)
