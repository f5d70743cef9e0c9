"""Orders bounded context: carts, order assembly, and order lifecycle.

Converts a customer's cart into a persisted order, keeps order totals in
step with the order's items, and governs status changes from placement
through fulfilment, cancellation, refund, and dispute handling.
"""

import structlog
from protean.domain import Domain

orders = Domain(name="orders")

logger = structlog.get_logger(__name__)
