"""Per-key mutual exclusion within a process.

Checkout, payment verification and expiry can touch the same cart, order or
variant from concurrent requests. Every mutation of one of these records runs
while holding the lock for its identifier, so read-check-write sequences on a
single record are serialized while unrelated records proceed in parallel.

Lock order, where more than one is held: cart, then order, then variant.
"""

import threading
from collections import defaultdict
from contextlib import contextmanager


class KeyedLocks:
    def __init__(self, name: str) -> None:
        self.name = name
        self._guard = threading.Lock()
        self._locks: dict[str, threading.RLock] = defaultdict(threading.RLock)

    def _lock_for(self, key) -> threading.RLock:
        with self._guard:
            return self._locks[str(key)]

    @contextmanager
    def hold(self, key):
        lock = self._lock_for(key)
        with lock:
            yield


cart_locks = KeyedLocks("cart")
order_locks = KeyedLocks("order")
stock_locks = KeyedLocks("stock")
