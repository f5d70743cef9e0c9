"""Repository for the Cart aggregate."""

from protean.core.repository import BaseRepository

from orders.cart.cart import Cart
from orders.domain import orders


@orders.repository(part_of=Cart)
class CartRepository(BaseRepository):
    def find_active_cart(self, customer_id, restaurant_id) -> Cart | None:
        """The customer's cart at ``restaurant_id``, or None if they never had one."""
        carts = (
            self._dao.query.filter(customer_id=str(customer_id), restaurant_id=str(restaurant_id)).all().items
        )
        return carts[0] if carts else None
