"""Tests for cancelling orders."""

import pytest
from orders.errors import OrderStateError
from orders.order.events import OrderCancelled
from protean.exceptions import ValidationError

REASON = "Ordered by mistake"


class TestCancel:
    @pytest.mark.parametrize("status", ["pending", "confirmed", "preparing", "ready", "out_for_delivery"])
    def test_cancellable_states(self, make_order, advance, status):
        order = advance(make_order(), status) if status != "pending" else make_order()
        order.cancel(reason=REASON, cancelled_by="customer")

        assert order.status == "cancelled"
        assert order.cancellation_reason == REASON
        assert order.cancelled_by == "customer"
        assert order.cancelled_at is not None

    def test_raises_order_cancelled(self, make_order):
        order = make_order()
        order.cancel(reason=REASON, cancelled_by="restaurant")
        event = next(e for e in order._events if isinstance(e, OrderCancelled))
        assert event.previous_status == "pending"
        assert event.cancelled_by == "restaurant"

    def test_delivered_order_cannot_be_cancelled(self, make_order, advance):
        order = advance(make_order(), "delivered")
        with pytest.raises(OrderStateError):
            order.cancel(reason=REASON, cancelled_by="customer")
        assert order.status == "delivered"

    def test_second_cancel_fails(self, make_order):
        order = make_order()
        order.cancel(reason=REASON, cancelled_by="customer")
        with pytest.raises(OrderStateError):
            order.cancel(reason=REASON, cancelled_by="customer")

    def test_refunded_order_cannot_be_cancelled(self, make_order, advance):
        order = advance(make_order(), "delivered")
        order.refund(100.0, reason="Food arrived cold")
        with pytest.raises(OrderStateError):
            order.cancel(reason=REASON, cancelled_by="system")


class TestCancelInput:
    def test_short_reason_rejected(self, make_order):
        order = make_order()
        with pytest.raises(ValidationError) as exc:
            order.cancel(reason="  no  ", cancelled_by="customer")
        assert "reason" in exc.value.messages
        assert order.status == "pending"

    def test_long_reason_rejected(self, make_order):
        with pytest.raises(ValidationError):
            make_order().cancel(reason="x" * 201, cancelled_by="customer")

    def test_unknown_actor_rejected(self, make_order):
        with pytest.raises(ValidationError) as exc:
            make_order().cancel(reason=REASON, cancelled_by="driver")
        assert "cancelled_by" in exc.value.messages
