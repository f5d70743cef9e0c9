"""Human-facing order numbers.

Numbers look like ``ORD`` + the last six digits of the epoch in milliseconds
+ a zero-padded three digit random suffix, e.g. ``ORD482913057``. Collisions
are possible; ``next_order_number`` retries against the store until it finds
a free one.
"""

import random
import time

import structlog

from orders import settings
from orders.errors import PersistenceError

logger = structlog.get_logger(__name__)


def generate_order_number(now_ms: int | None = None, suffix: int | None = None) -> str:
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    if suffix is None:
        suffix = random.randint(0, 999)
    return f"ORD{str(now_ms)[-6:]}{suffix:03d}"


def next_order_number(is_taken, max_attempts: int | None = None, generate=generate_order_number) -> str:
    """Generate numbers until ``is_taken(candidate)`` is false.

    Raises ``PersistenceError`` after ``max_attempts`` consecutive collisions.
    """
    attempts = max_attempts or settings.ORDER_NUMBER_MAX_ATTEMPTS
    for attempt in range(1, attempts + 1):
        candidate = generate()
        if not is_taken(candidate):
            return candidate
        logger.warning("order_number_collision", candidate=candidate, attempt=attempt)
    raise PersistenceError(f"Could not allocate a unique order number after {attempts} attempts")
