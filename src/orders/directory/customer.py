"""Customer directory record: the account an order is placed for.

Profile management lives outside this context; orders only read customers
by id to check they exist and to snapshot a display name.
"""

from datetime import UTC, datetime

from protean.fields import Boolean, DateTime, String

from orders.domain import orders


@orders.aggregate
class Customer:
    first_name = String(max_length=50)
    last_name = String(max_length=50)
    email = String(max_length=254)
    phone = String(max_length=20)
    city = String(max_length=100)
    is_active = Boolean(default=True)
    is_blocked = Boolean(default=False)
    blocked_reason = String(max_length=500)
    created_at = DateTime(default=lambda: datetime.now(UTC))

    def display_name(self):
        """Name snapshotted onto orders: "first last", else email, else a placeholder."""
        full = f"{self.first_name or ''} {self.last_name or ''}".strip()
        return full or self.email or "Unknown Customer"
