"""Order aggregate (CQRS): a placed food order and its lifecycle.

The order snapshots everything it needs at placement time (customer and
restaurant names, item names and prices) so later catalogue edits never
change what was ordered. It is never deleted; archiving only sets a flag.

State Machine:
    pending → confirmed → preparing → ready → out_for_delivery → delivered
    any non-final state → cancelled
    delivered → refunded                     (ProcessRefund only)
    any state → dispute_resolved / dispute_escalated / dispute_closed
                                             (HandleDispute only)

Every mutation bumps ``revision``. Callers may pass the revision they last
read as ``expected_revision`` to reject lost updates.
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import (
    Boolean,
    DateTime,
    Float,
    HasMany,
    Identifier,
    Integer,
    String,
    ValueObject,
)

from orders import settings
from orders.domain import orders
from orders.errors import OrderStateError, StaleOrderError
from orders.order.events import (
    OrderArchived,
    OrderCancelled,
    OrderDisputeHandled,
    OrderItemAdded,
    OrderItemQuantityUpdated,
    OrderItemRemoved,
    OrderPlaced,
    OrderRefunded,
    OrderStatusChanged,
)
from orders.order.totals import calculate_totals


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PREPARING = "preparing"
    READY = "ready"
    OUT_FOR_DELIVERY = "out_for_delivery"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"
    REFUNDED = "refunded"
    DISPUTE_RESOLVED = "dispute_resolved"
    DISPUTE_ESCALATED = "dispute_escalated"
    DISPUTE_CLOSED = "dispute_closed"


class CancellationActor(Enum):
    CUSTOMER = "customer"
    RESTAURANT = "restaurant"
    SYSTEM = "system"


class DisputeAction(Enum):
    RESOLVE = "resolve"
    ESCALATE = "escalate"
    CLOSE = "close"


# Transitions reachable through UpdateOrderStatus
_VALID_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.CONFIRMED, OrderStatus.CANCELLED},
    OrderStatus.CONFIRMED: {OrderStatus.PREPARING, OrderStatus.CANCELLED},
    OrderStatus.PREPARING: {OrderStatus.READY, OrderStatus.CANCELLED},
    OrderStatus.READY: {OrderStatus.OUT_FOR_DELIVERY, OrderStatus.CANCELLED},
    OrderStatus.OUT_FOR_DELIVERY: {OrderStatus.DELIVERED, OrderStatus.CANCELLED},
    OrderStatus.DELIVERED: set(),  # Refund goes through ProcessRefund
    OrderStatus.CANCELLED: set(),
    OrderStatus.REFUNDED: set(),
    OrderStatus.DISPUTE_RESOLVED: set(),
    OrderStatus.DISPUTE_ESCALATED: set(),
    OrderStatus.DISPUTE_CLOSED: set(),
}

_DISPUTE_OUTCOMES = {
    DisputeAction.RESOLVE: OrderStatus.DISPUTE_RESOLVED,
    DisputeAction.ESCALATE: OrderStatus.DISPUTE_ESCALATED,
    DisputeAction.CLOSE: OrderStatus.DISPUTE_CLOSED,
}

_UNCANCELLABLE_STATES = {
    OrderStatus.DELIVERED,
    OrderStatus.CANCELLED,
    OrderStatus.REFUNDED,
    *_DISPUTE_OUTCOMES.values(),
}


def _status_values(enum_cls) -> list[str]:
    return [member.value for member in enum_cls]


def _require_text(field, value, minimum=None, maximum=None, label="Reason"):
    """Trim ``value`` and enforce its length bounds; returns the trimmed text."""
    minimum = settings.MIN_REASON_LENGTH if minimum is None else minimum
    text = (value or "").strip()
    if len(text) < minimum:
        raise ValidationError({field: [f"{label} must be at least {minimum} characters long"]})
    if maximum is not None and len(text) > maximum:
        raise ValidationError({field: [f"{label} cannot exceed {maximum} characters"]})
    return text


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@orders.value_object(part_of="Order")
class DeliveryAddress:
    """Where the order is delivered, captured when it is placed."""

    street = String(required=True, max_length=200)
    city = String(required=True, max_length=100)
    state = String(max_length=100)
    postal_code = String(max_length=20)
    country = String(max_length=100, default=settings.DEFAULT_COUNTRY)


def build_delivery_address(data) -> DeliveryAddress:
    """Validate a raw address mapping and turn it into a ``DeliveryAddress``."""
    if isinstance(data, DeliveryAddress):
        return data
    if isinstance(data, str):
        data = json.loads(data)
    data = data or {}

    street = (data.get("street") or "").strip()
    city = (data.get("city") or "").strip()
    errors = {}
    if not street:
        errors["street"] = ["Street address is required"]
    if not city:
        errors["city"] = ["City is required"]
    if errors:
        raise ValidationError({"delivery_address": [m for msgs in errors.values() for m in msgs]})

    return DeliveryAddress(
        street=street,
        city=city,
        state=(data.get("state") or "").strip() or None,
        postal_code=(data.get("postal_code") or data.get("postalCode") or "").strip() or None,
        country=(data.get("country") or "").strip() or settings.DEFAULT_COUNTRY,
    )


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@orders.entity(part_of="Order")
class OrderItem:
    """A snapshot of one menu item as it was priced when the order was placed.

    ``item_id`` points back to the menu item for traceability only.
    """

    item_id = Identifier(required=True)
    name = String(required=True, max_length=100)
    description = String(max_length=500, default="")
    price = Float(required=True, min_value=0.0)
    quantity = Integer(required=True, min_value=1)
    image = String(max_length=500, default="")
    category = String(max_length=50, default=settings.DEFAULT_ITEM_CATEGORY)
    item_total = Float(min_value=0.0)


def _is_whole_number(value) -> bool:
    if isinstance(value, bool):
        return False
    return isinstance(value, int) or (isinstance(value, float) and value.is_integer())


def build_order_item(data, position=None) -> OrderItem:
    """Validate one raw line and snapshot it as an ``OrderItem``."""
    where = f"Item {position}: " if position is not None else ""
    if not data.get("item_id") or not (data.get("name") or "").strip():
        raise ValidationError({"items": [f"{where}item_id and name are required"]})

    price = data.get("price")
    quantity = data.get("quantity")
    if price is None or price <= 0:
        raise ValidationError({"items": [f"{where}price must be greater than 0"]})
    if not _is_whole_number(quantity):
        raise ValidationError({"items": [f"{where}quantity must be a whole number"]})
    if quantity < 1:
        raise ValidationError({"items": [f"{where}quantity must be at least 1"]})

    quantity = int(quantity)
    return OrderItem(
        item_id=str(data["item_id"]),
        name=data["name"].strip(),
        description=data.get("description") or "",
        price=price,
        quantity=quantity,
        image=data.get("image") or "",
        category=data.get("category") or settings.DEFAULT_ITEM_CATEGORY,
        item_total=price * quantity,
    )


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@orders.aggregate
class Order:
    order_number = String(required=True, max_length=20, unique=True)
    customer_id = Identifier(required=True)
    customer_name = String(required=True, max_length=100)
    restaurant_id = Identifier(required=True)
    restaurant_name = String(required=True, max_length=100)
    items = HasMany(OrderItem)
    # Left unset, these are filled in from the items before the order is saved
    subtotal = Float(min_value=0.0)
    total_amount = Float(min_value=0.0)
    delivery_address = ValueObject(DeliveryAddress, required=True)
    special_instructions = String(max_length=500)
    status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    estimated_delivery = String(max_length=50, default=settings.DEFAULT_ESTIMATED_DELIVERY)
    ordered_at = DateTime()

    cancellation_reason = String(max_length=settings.MAX_CANCELLATION_REASON_LENGTH)
    cancelled_by = String(choices=CancellationActor)
    cancelled_at = DateTime()

    refund_amount = Float(min_value=0.0)
    refund_reason = String(max_length=500)
    refunded_by = Identifier()
    refunded_at = DateTime()

    dispute_status = String(choices=DisputeAction)
    dispute_resolution = String(max_length=1000)
    dispute_resolved_by = Identifier()
    dispute_resolved_at = DateTime()

    admin_note = String(max_length=1000)
    is_archived = Boolean(default=False)
    revision = Integer(default=0)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def cancelled_orders_record_who_cancelled(self):
        if self.status == OrderStatus.CANCELLED.value and not self.cancelled_by:
            raise ValidationError({"cancelled_by": ["A cancelled order must record who cancelled it"]})

    @invariant.post
    def refunds_cannot_exceed_the_order_total(self):
        if self.refund_amount and self.total_amount is not None and self.refund_amount > self.total_amount:
            raise ValidationError({"refund_amount": ["Refund amount cannot exceed order total"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def place(
        cls,
        order_number,
        customer_id,
        customer_name,
        restaurant_id,
        restaurant_name,
        items_data,
        delivery_address,
        special_instructions=None,
        estimated_delivery=None,
    ):
        """Build a pending order from raw line dicts, snapshotting each line.

        Raises ``ValidationError`` for a bad address, an empty or invalid item
        list, or a total that is not positive.
        """
        address = build_delivery_address(delivery_address)
        if not items_data:
            raise ValidationError({"items": ["Order must contain at least one item"]})
        lines = [build_order_item(data, position) for position, data in enumerate(items_data, start=1)]

        subtotal, total_amount = calculate_totals(lines)
        if total_amount <= 0:
            raise ValidationError({"total_amount": ["Order total must be greater than 0"]})

        now = datetime.now(UTC)
        order = cls(
            order_number=order_number,
            customer_id=customer_id,
            customer_name=customer_name,
            restaurant_id=restaurant_id,
            restaurant_name=restaurant_name,
            subtotal=subtotal,
            total_amount=total_amount,
            delivery_address=address,
            special_instructions=(special_instructions or "").strip() or None,
            status=OrderStatus.PENDING.value,
            estimated_delivery=estimated_delivery or settings.DEFAULT_ESTIMATED_DELIVERY,
            ordered_at=now,
            created_at=now,
            updated_at=now,
        )
        order.add_items(lines)

        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                order_number=order_number,
                customer_id=str(customer_id),
                restaurant_id=str(restaurant_id),
                items=json.dumps(
                    [
                        {
                            "item_id": str(line.item_id),
                            "name": line.name,
                            "price": line.price,
                            "quantity": line.quantity,
                            "item_total": line.item_total,
                        }
                        for line in lines
                    ]
                ),
                subtotal=subtotal,
                total_amount=total_amount,
                ordered_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # Totals
    # -------------------------------------------------------------------
    def _recalculate_totals(self):
        self.subtotal, self.total_amount = calculate_totals(self.items)

    def sync_totals(self):
        """Fill in totals that were never computed. Idempotent.

        Totals that are already set are left alone, even when they disagree
        with the items; item edits recompute them as they happen.
        """
        if self.subtotal is None or self.total_amount is None:
            self._recalculate_totals()

    # -------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------
    def _check_revision(self, expected_revision):
        if expected_revision is not None and expected_revision != self.revision:
            raise StaleOrderError(
                {"revision": [f"Order was modified (expected revision {expected_revision}, found {self.revision})"]}
            )

    def _bump(self, now=None):
        self.revision = (self.revision or 0) + 1
        self.updated_at = now or datetime.now(UTC)

    def _assert_pending(self, action):
        if OrderStatus(self.status) != OrderStatus.PENDING:
            raise OrderStateError({"status": [f"Items can only be {action} while the order is pending"]})

    def _line(self, line_id) -> OrderItem:
        line = next((i for i in self.items if str(i.id) == str(line_id)), None)
        if line is None:
            raise ValidationError({"item_id": ["Item not found in order"]})
        return line

    # -------------------------------------------------------------------
    # Item revision (pending orders only)
    # -------------------------------------------------------------------
    def add_item(self, item_data, expected_revision=None):
        self._check_revision(expected_revision)
        self._assert_pending("added")

        line = build_order_item(item_data)
        self.add_items(line)
        self._recalculate_totals()
        self._bump()

        self.raise_(
            OrderItemAdded(
                order_id=str(self.id),
                line_id=str(line.id),
                item_id=str(line.item_id),
                name=line.name,
                price=line.price,
                quantity=line.quantity,
            )
        )
        return line

    def remove_item(self, line_id, expected_revision=None):
        self._check_revision(expected_revision)
        self._assert_pending("removed")

        line = self._line(line_id)
        if len(self.items) == 1:
            raise ValidationError({"items": ["Order must contain at least one item"]})

        self.remove_items(line)
        self._recalculate_totals()
        self._bump()

        self.raise_(OrderItemRemoved(order_id=str(self.id), line_id=str(line_id)))

    def update_item_quantity(self, line_id, new_quantity, expected_revision=None):
        self._check_revision(expected_revision)
        self._assert_pending("changed")
        if new_quantity is None or new_quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})

        line = self._line(line_id)
        previous_quantity = line.quantity
        line.quantity = new_quantity
        line.item_total = line.price * new_quantity
        self._recalculate_totals()
        self._bump()

        self.raise_(
            OrderItemQuantityUpdated(
                order_id=str(self.id),
                line_id=str(line_id),
                previous_quantity=previous_quantity,
                new_quantity=new_quantity,
            )
        )

    # -------------------------------------------------------------------
    # Lifecycle transitions
    # -------------------------------------------------------------------
    def update_status(self, new_status, reason=None, expected_revision=None, cancelled_by=None):
        """Move along the fulfilment path, validated against the transition table.

        Moving to ``cancelled`` goes through ``cancel``, so it needs a reason
        and records ``cancelled_by`` (the system when no actor is given).
        """
        if new_status not in _status_values(OrderStatus):
            raise ValidationError({"status": [f"Invalid order status: {new_status}"]})
        self._check_revision(expected_revision)

        current = OrderStatus(self.status)
        target = OrderStatus(new_status)
        if target not in _VALID_TRANSITIONS[current]:
            raise OrderStateError({"status": [f"Cannot transition from {current.value} to {target.value}"]})

        if target == OrderStatus.CANCELLED:
            self.cancel(reason, cancelled_by or CancellationActor.SYSTEM.value, expected_revision)
            return

        now = datetime.now(UTC)
        self.status = target.value
        self._bump(now)

        self.raise_(
            OrderStatusChanged(
                order_id=str(self.id),
                order_number=self.order_number,
                previous_status=current.value,
                new_status=target.value,
                changed_at=now,
            )
        )

    def cancel(self, reason, cancelled_by, expected_revision=None):
        if cancelled_by not in _status_values(CancellationActor):
            raise ValidationError(
                {"cancelled_by": [f"cancelled_by must be one of {', '.join(_status_values(CancellationActor))}"]}
            )
        text = _require_text(
            "reason",
            reason,
            maximum=settings.MAX_CANCELLATION_REASON_LENGTH,
            label="Cancellation reason",
        )
        self._check_revision(expected_revision)

        if OrderStatus(self.status) in _UNCANCELLABLE_STATES:
            raise OrderStateError({"status": [f"Order cannot be cancelled. Current status: {self.status}"]})

        self._mark_cancelled(text, cancelled_by)

    def _mark_cancelled(self, reason, actor):
        previous_status = self.status
        now = datetime.now(UTC)
        with atomic_change(self):
            self.status = OrderStatus.CANCELLED.value
            self.cancellation_reason = reason
            self.cancelled_by = actor
            self.cancelled_at = now
            self._bump(now)

        self.raise_(
            OrderCancelled(
                order_id=str(self.id),
                order_number=self.order_number,
                previous_status=previous_status,
                reason=reason,
                cancelled_by=actor,
                cancelled_at=now,
            )
        )

    def refund(self, refund_amount, reason, admin_note=None, refunded_by=None, expected_revision=None):
        if refund_amount is None or refund_amount <= 0:
            raise ValidationError({"refund_amount": ["Refund amount must be greater than 0"]})
        if refund_amount > (self.total_amount or 0.0):
            raise ValidationError({"refund_amount": ["Refund amount cannot exceed order total"]})
        text = _require_text("reason", reason, label="Refund reason")
        self._check_revision(expected_revision)

        if OrderStatus(self.status) != OrderStatus.DELIVERED:
            raise OrderStateError({"status": ["Only delivered orders can be refunded"]})

        now = datetime.now(UTC)
        self.refund_amount = refund_amount
        self.refund_reason = text
        self.admin_note = (admin_note or "").strip() or None
        self.refunded_by = refunded_by
        self.refunded_at = now
        self.status = OrderStatus.REFUNDED.value
        self._bump(now)

        self.raise_(
            OrderRefunded(
                order_id=str(self.id),
                order_number=self.order_number,
                refund_amount=refund_amount,
                reason=text,
                refunded_by=refunded_by,
                refunded_at=now,
            )
        )

    def handle_dispute(self, action, resolution, admin_note=None, resolved_by=None, expected_revision=None):
        """Record an admin's decision on a dispute. Allowed from any status."""
        if action not in _status_values(DisputeAction):
            raise ValidationError({"action": ["Invalid action. Must be one of: resolve, escalate, close"]})
        text = _require_text("resolution", resolution, label="Resolution")
        self._check_revision(expected_revision)

        outcome = _DISPUTE_OUTCOMES[DisputeAction(action)]
        now = datetime.now(UTC)
        self.dispute_status = action
        self.dispute_resolution = text
        self.admin_note = (admin_note or "").strip() or None
        self.dispute_resolved_by = resolved_by
        self.dispute_resolved_at = now
        self.status = outcome.value
        self._bump(now)

        self.raise_(
            OrderDisputeHandled(
                order_id=str(self.id),
                order_number=self.order_number,
                action=action,
                new_status=outcome.value,
                resolution=text,
                resolved_by=resolved_by,
                resolved_at=now,
            )
        )

    def archive(self, expected_revision=None):
        """Soft-delete the order. Archiving an archived order changes nothing."""
        if self.is_archived:
            return
        self._check_revision(expected_revision)

        now = datetime.now(UTC)
        self.is_archived = True
        self._bump(now)

        self.raise_(OrderArchived(order_id=str(self.id), order_number=self.order_number, archived_at=now))
