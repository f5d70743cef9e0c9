"""Tests for revising the items of a pending order."""

import pytest
from orders.errors import OrderStateError
from orders.order.events import OrderItemAdded, OrderItemQuantityUpdated, OrderItemRemoved
from protean.exceptions import ValidationError

LASSI = {"item_id": "item-lassi", "name": "Mango Lassi", "price": 60.0, "quantity": 1}


class TestAddItem:
    def test_adds_line_and_recomputes_totals(self, make_order):
        order = make_order()
        order.add_item(LASSI)
        assert len(order.items) == 2
        assert order.subtotal == 300.0
        assert order.total_amount == 300.0
        assert any(isinstance(e, OrderItemAdded) for e in order._events)

    def test_rejected_once_confirmed(self, make_order):
        order = make_order()
        order.update_status("confirmed")
        with pytest.raises(OrderStateError):
            order.add_item(LASSI)


class TestUpdateItemQuantity:
    def test_updates_line_total_and_order_totals(self, make_order):
        order = make_order()
        line = order.items[0]
        order.update_item_quantity(line.id, 3)
        assert order.items[0].item_total == 360.0
        assert order.total_amount == 360.0
        assert any(isinstance(e, OrderItemQuantityUpdated) for e in order._events)

    def test_quantity_below_one_rejected(self, make_order):
        order = make_order()
        with pytest.raises(ValidationError):
            order.update_item_quantity(order.items[0].id, 0)

    def test_unknown_line_rejected(self, make_order):
        with pytest.raises(ValidationError):
            make_order().update_item_quantity("missing", 2)


class TestRemoveItem:
    def test_removes_line(self, make_order):
        order = make_order()
        line = order.add_item(LASSI)
        order.remove_item(line.id)
        assert len(order.items) == 1
        assert order.total_amount == 240.0
        assert any(isinstance(e, OrderItemRemoved) for e in order._events)

    def test_last_line_cannot_be_removed(self, make_order):
        order = make_order()
        with pytest.raises(ValidationError):
            order.remove_item(order.items[0].id)
