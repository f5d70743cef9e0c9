"""Repository for the Order aggregate.

Every write goes through ``add``, which fills in totals the order does not
carry yet before handing it to the store.
"""

from protean.core.repository import BaseRepository
from protean.exceptions import ObjectNotFoundError

from orders.domain import orders
from orders.order.order import Order


@orders.repository(part_of=Order)
class OrderRepository(BaseRepository):
    def add(self, order: Order) -> Order:
        order.sync_totals()
        return super().add(order)

    def find_by_order_number(self, order_number: str) -> Order:
        """Raises ``ObjectNotFoundError`` when no order carries ``order_number``."""
        results = self._dao.query.filter(order_number=order_number).all().items
        if not results:
            raise ObjectNotFoundError(f"Order {order_number} not found")
        return results[0]

    def order_number_exists(self, order_number: str) -> bool:
        return bool(self._dao.query.filter(order_number=order_number).all().items)
