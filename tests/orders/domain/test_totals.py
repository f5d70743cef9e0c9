"""Tests for totals calculation and the pre-save totals sync."""

from types import SimpleNamespace

from orders.order.order import Order, OrderItem, build_delivery_address
from orders.order.totals import calculate_totals, line_total


def _line(price, quantity, item_total=None):
    return SimpleNamespace(price=price, quantity=quantity, item_total=item_total)


class TestCalculateTotals:
    def test_uses_price_times_quantity(self):
        assert calculate_totals([_line(120.0, 2), _line(80.0, 1)]) == (320.0, 320.0)

    def test_prefers_stored_item_total(self):
        assert line_total(_line(120.0, 2, item_total=200.0)) == 200.0

    def test_total_equals_subtotal(self):
        subtotal, total = calculate_totals([_line(45.5, 3)])
        assert subtotal == total == 136.5

    def test_no_lines(self):
        assert calculate_totals([]) == (0, 0)


class TestPlacedOrderTotals:
    def test_totals_match_items(self, make_order, thali):
        lassi = {"item_id": "item-lassi", "name": "Mango Lassi", "price": 60.0, "quantity": 1}
        order = make_order(items_data=[thali, lassi])
        assert order.subtotal == 300.0
        assert order.total_amount == 300.0
        assert order.subtotal == sum(item.price * item.quantity for item in order.items)

    def test_item_total_snapshot(self, make_order):
        order = make_order()
        assert order.items[0].item_total == 240.0


class TestSyncTotals:
    def _bare_order(self, address, **totals):
        order = Order(
            order_number="ORD000001001",
            customer_id="cust-001",
            customer_name="Asha Rao",
            restaurant_id="rest-001",
            restaurant_name="Spice Route",
            delivery_address=address,
            **totals,
        )
        order.add_items(OrderItem(item_id="item-1", name="Dosa", price=80.0, quantity=2))
        return order

    def test_fills_unset_totals(self, address):
        order = self._bare_order(build_delivery_address(address))
        assert order.subtotal is None

        order.sync_totals()

        assert order.subtotal == 160.0
        assert order.total_amount == 160.0

    def test_is_idempotent(self, address):
        order = self._bare_order(build_delivery_address(address))
        order.sync_totals()
        order.sync_totals()
        assert order.total_amount == 160.0

    def test_preset_totals_are_preserved(self, address):
        order = self._bare_order(build_delivery_address(address), subtotal=999.0, total_amount=999.0)
        order.sync_totals()
        assert order.subtotal == 999.0
        assert order.total_amount == 999.0
