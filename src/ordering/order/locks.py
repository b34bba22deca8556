"""Per-order serialization of status writes.

Checkout responses and payment notifications reach the same order from
independent request workers, and processors deliver duplicates concurrently.
Every status write (reconciliation, compensating discard) runs while holding
the order's lock, across the whole unit of work, so a load-check-write-commit
sequence never interleaves with another one for the same order.

Locks are kept in a WeakValueDictionary: an entry lives only while some
worker holds or waits on it, so the registry does not grow with order count.
"""

import threading
import weakref
from contextlib import contextmanager


class OrderLocks:
    """Registry of mutexes keyed by order identifier."""

    def __init__(self, timeout: float | None = None) -> None:
        self.timeout = timeout
        self._locks: weakref.WeakValueDictionary = weakref.WeakValueDictionary()
        self._registry_lock = threading.Lock()

    def _lock_for(self, order_id: str) -> threading.Lock:
        with self._registry_lock:
            lock = self._locks.get(order_id)
            if lock is None:
                lock = threading.Lock()
                self._locks[order_id] = lock
            return lock

    @contextmanager
    def hold(self, order_id):
        """Hold the lock for `order_id` for the duration of the block.

        Raises TimeoutError if a timeout is configured and the lock could not
        be acquired in time.
        """
        key = str(order_id)
        lock = self._lock_for(key)
        acquired = lock.acquire(timeout=self.timeout) if self.timeout is not None else lock.acquire()
        if not acquired:
            raise TimeoutError(f"Timed out waiting for the lock on order {key}")
        try:
            yield
        finally:
            lock.release()

    def __len__(self) -> int:
        with self._registry_lock:
            return len(self._locks)


order_locks = OrderLocks()
