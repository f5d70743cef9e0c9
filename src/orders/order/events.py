"""Domain events for the Order aggregate.

Events carry flat, serialisable values. Line items travel as a JSON string
in ``OrderPlaced`` the same way they would on a message broker.
"""

from protean.fields import DateTime, Float, Identifier, Integer, String, Text

from orders.domain import orders


@orders.event(part_of="Order")
class OrderPlaced:
    """A new order was placed, from a cart or by a privileged caller."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    customer_id = Identifier(required=True)
    restaurant_id = Identifier(required=True)
    items = Text(required=True)  # JSON: [{item_id, name, price, quantity, item_total}]
    subtotal = Float(required=True)
    total_amount = Float(required=True)
    ordered_at = DateTime(required=True)


@orders.event(part_of="Order")
class OrderStatusChanged:
    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    previous_status = String(required=True)
    new_status = String(required=True)
    changed_at = DateTime(required=True)


@orders.event(part_of="Order")
class OrderCancelled:
    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    previous_status = String(required=True)
    reason = String()
    cancelled_by = String(required=True)
    cancelled_at = DateTime(required=True)


@orders.event(part_of="Order")
class OrderRefunded:
    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    refund_amount = Float(required=True)
    reason = String(required=True)
    refunded_by = Identifier()
    refunded_at = DateTime(required=True)


@orders.event(part_of="Order")
class OrderDisputeHandled:
    """An admin resolved, escalated or closed a dispute on the order."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    action = String(required=True)
    new_status = String(required=True)
    resolution = String(required=True)
    resolved_by = Identifier()
    resolved_at = DateTime(required=True)


@orders.event(part_of="Order")
class OrderArchived:
    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    archived_at = DateTime(required=True)


@orders.event(part_of="Order")
class OrderItemAdded:
    __version__ = 1

    order_id = Identifier(required=True)
    line_id = Identifier(required=True)
    item_id = Identifier(required=True)
    name = String(required=True)
    price = Float(required=True)
    quantity = Integer(required=True)


@orders.event(part_of="Order")
class OrderItemRemoved:
    __version__ = 1

    order_id = Identifier(required=True)
    line_id = Identifier(required=True)


@orders.event(part_of="Order")
class OrderItemQuantityUpdated:
    __version__ = 1

    order_id = Identifier(required=True)
    line_id = Identifier(required=True)
    previous_quantity = Integer(required=True)
    new_quantity = Integer(required=True)
