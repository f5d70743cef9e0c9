"""Read-side shapes for orders.

Plain functions over the aggregate; nothing here is persisted. Responses are
built from these dicts so every route renders an order the same way.
"""

from orders.order.order import Order


def item_count(order: Order) -> int:
    return sum(item.quantity for item in order.items)


def _iso(value):
    return value.isoformat() if value else None


def order_detail(order: Order) -> dict:
    address = order.delivery_address
    return {
        "id": str(order.id),
        "order_number": order.order_number,
        "customer_id": str(order.customer_id),
        "customer_name": order.customer_name,
        "restaurant_id": str(order.restaurant_id),
        "restaurant_name": order.restaurant_name,
        "items": [
            {
                "id": str(item.id),
                "item_id": str(item.item_id),
                "name": item.name,
                "description": item.description or "",
                "price": item.price,
                "quantity": item.quantity,
                "image": item.image or "",
                "category": item.category,
                "item_total": item.item_total,
            }
            for item in order.items
        ],
        "item_count": item_count(order),
        "subtotal": order.subtotal,
        "total_amount": order.total_amount,
        "delivery_address": {
            "street": address.street,
            "city": address.city,
            "state": address.state,
            "postal_code": address.postal_code,
            "country": address.country,
        }
        if address
        else None,
        "special_instructions": order.special_instructions,
        "status": order.status,
        "estimated_delivery": order.estimated_delivery,
        "ordered_at": _iso(order.ordered_at),
        "cancellation_reason": order.cancellation_reason,
        "cancelled_by": order.cancelled_by,
        "cancelled_at": _iso(order.cancelled_at),
        "refund_amount": order.refund_amount,
        "refund_reason": order.refund_reason,
        "refunded_by": str(order.refunded_by) if order.refunded_by else None,
        "refunded_at": _iso(order.refunded_at),
        "dispute_status": order.dispute_status,
        "dispute_resolution": order.dispute_resolution,
        "dispute_resolved_by": str(order.dispute_resolved_by) if order.dispute_resolved_by else None,
        "dispute_resolved_at": _iso(order.dispute_resolved_at),
        "admin_note": order.admin_note,
        "is_archived": order.is_archived,
        "revision": order.revision,
        "created_at": _iso(order.created_at),
        "updated_at": _iso(order.updated_at),
    }
