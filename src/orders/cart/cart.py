"""Cart aggregate (CQRS): what a customer has picked from one restaurant.

A customer holds at most one cart per restaurant. Lines are keyed by the menu
item they point to, so adding the same item again tops up its quantity. The
cart is never archived: once an order is assembled from it, it is cleared and
reused for the next order at that restaurant.
"""

from datetime import UTC, datetime

from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String

from orders.cart.events import CartCleared, CartItemAdded, CartItemQuantityUpdated, CartItemRemoved
from orders.domain import orders
from orders.order.totals import calculate_totals


@orders.entity(part_of="Cart")
class CartItem:
    item_id = Identifier(required=True)
    name = String(required=True, max_length=100)
    description = String(max_length=500)
    price = Float(required=True, min_value=0.0)
    quantity = Integer(required=True, min_value=1)
    image = String(max_length=500)
    category = String(max_length=50)
    item_total = Float(min_value=0.0)


@orders.aggregate
class Cart:
    customer_id = Identifier(required=True)
    restaurant_id = Identifier(required=True)
    items = HasMany(CartItem)
    subtotal = Float(default=0.0)
    # No delivery fee, so total always equals subtotal
    total = Float(default=0.0)
    revision = Integer(default=0)
    created_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def create(cls, customer_id, restaurant_id):
        now = datetime.now(UTC)
        return cls(
            customer_id=customer_id,
            restaurant_id=restaurant_id,
            subtotal=0.0,
            total=0.0,
            created_at=now,
            updated_at=now,
        )

    @property
    def item_count(self) -> int:
        return sum(item.quantity for item in self.items)

    @property
    def is_empty(self) -> bool:
        return not self.items

    def _line_for(self, item_id):
        return next((i for i in self.items if str(i.item_id) == str(item_id)), None)

    def _touch(self):
        self.subtotal, self.total = calculate_totals(self.items)
        self.revision = (self.revision or 0) + 1
        self.updated_at = datetime.now(UTC)

    def add_item(self, item_id, name, price, quantity, description="", image="", category=""):
        """Add a line, or top up the existing line for the same menu item."""
        if not quantity or quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})
        if price is None or price <= 0:
            raise ValidationError({"price": ["Price must be greater than 0"]})

        existing = self._line_for(item_id)
        if existing:
            existing.quantity += quantity
            existing.item_total = existing.price * existing.quantity
            quantity = existing.quantity
        else:
            self.add_items(
                CartItem(
                    item_id=item_id,
                    name=name,
                    description=description,
                    price=price,
                    quantity=quantity,
                    image=image,
                    category=category,
                    item_total=price * quantity,
                )
            )

        self._touch()
        self.raise_(
            CartItemAdded(
                cart_id=str(self.id),
                item_id=str(item_id),
                name=name,
                quantity=quantity,
                subtotal=self.subtotal,
            )
        )

    def update_item_quantity(self, item_id, new_quantity):
        """Set a line's quantity. Zero or less drops the line."""
        line = self._line_for(item_id)
        if line is None:
            raise ValidationError({"item_id": ["Item not found in cart"]})

        if new_quantity <= 0:
            self.remove_item(item_id)
            return

        previous_quantity = line.quantity
        line.quantity = new_quantity
        line.item_total = line.price * new_quantity

        self._touch()
        self.raise_(
            CartItemQuantityUpdated(
                cart_id=str(self.id),
                item_id=str(item_id),
                previous_quantity=previous_quantity,
                new_quantity=new_quantity,
                subtotal=self.subtotal,
            )
        )

    def remove_item(self, item_id):
        line = self._line_for(item_id)
        if line is None:
            raise ValidationError({"item_id": ["Item not found in cart"]})

        self.remove_items(line)

        self._touch()
        self.raise_(CartItemRemoved(cart_id=str(self.id), item_id=str(item_id), subtotal=self.subtotal))

    def clear(self):
        for line in list(self.items):
            self.remove_items(line)

        self._touch()
        self.raise_(
            CartCleared(
                cart_id=str(self.id),
                customer_id=str(self.customer_id),
                restaurant_id=str(self.restaurant_id),
            )
        )
