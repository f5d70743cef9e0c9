"""Restaurant directory record: the kitchen an order is placed with."""

from datetime import UTC, datetime

from protean.fields import Boolean, DateTime, String

from orders.domain import orders


@orders.aggregate
class Restaurant:
    business_name = String(max_length=100)
    first_name = String(max_length=50)
    last_name = String(max_length=50)
    email = String(max_length=254)
    phone = String(max_length=20)
    city = String(max_length=100)
    category = String(max_length=50)
    is_active = Boolean(default=True)
    # Unapproved restaurants may sign in but may not manage orders
    is_approved = Boolean(default=False)
    created_at = DateTime(default=lambda: datetime.now(UTC))

    def display_name(self):
        """Business name, else the owner's "first last". May be empty."""
        if self.business_name and self.business_name.strip():
            return self.business_name.strip()
        return f"{self.first_name or ''} {self.last_name or ''}".strip()
