import threading
import time


class MetricsCache:
    """
    Read-through cache for a single computed value with a fixed TTL.

    The clock is injectable so expiry can be tested without sleeping.
    Reads up to ttl_seconds old are served from memory.
    """

    def __init__(self, ttl_seconds, clock=time.monotonic):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._lock = threading.Lock()
        self._value = None
        self._stored_at = None

    def get(self, compute):
        with self._lock:
            now = self._clock()
            if self._stored_at is None or now - self._stored_at >= self.ttl_seconds:
                self._value = compute()
                self._stored_at = now
            return self._value

    def invalidate(self):
        with self._lock:
            self._value = None
            self._stored_at = None
