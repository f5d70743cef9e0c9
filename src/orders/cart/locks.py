"""Per-cart checkout locks.

Two checkouts of the same cart racing each other would both read the lines
and both place an order. Holding the lock across read, persist and clear
serialises them within one process. Separate worker processes are not
covered.

A lock lives in the registry only while some checkout holds or waits on it.
"""

import threading
from contextlib import contextmanager


class _Entry:
    __slots__ = ("lock", "users")

    def __init__(self):
        self.lock = threading.RLock()
        self.users = 0


_registry_lock = threading.Lock()
_locks: dict[tuple[str, str], _Entry] = {}


@contextmanager
def checkout_lock(customer_id, restaurant_id):
    key = (str(customer_id), str(restaurant_id))
    with _registry_lock:
        entry = _locks.get(key)
        if entry is None:
            entry = _locks[key] = _Entry()
        entry.users += 1

    try:
        with entry.lock:
            yield
    finally:
        with _registry_lock:
            entry.users -= 1
            if entry.users == 0:
                del _locks[key]
