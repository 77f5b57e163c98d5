"""Metrics for observability (sends, deliveries, evictions)."""

import threading
from typing import Dict

SENDS = "sends"
SENDS_EMPTY = "sends_empty"
DELIVERIES = "deliveries"
DELIVERY_FAILURES = "delivery_failures"
ONCE_FIRED = "once_fired"
WEAK_EVICTED = "weak_evicted"
MESSAGES = "messages"


class Metrics:
    """In-memory metrics collector for one channel."""

    def __init__(self, enabled: bool = True) -> None:
        self._enabled = enabled
        self._counters: Dict[str, int] = {}
        self._gauges: Dict[str, int] = {}
        self._lock = threading.Lock()

    @property
    def enabled(self) -> bool:
        return self._enabled

    def increment(self, name: str, value: int = 1) -> None:
        """Increment a counter."""
        if not self._enabled:
            return
        with self._lock:
            self._counters[name] = self._counters.get(name, 0) + value

    def set_gauge(self, name: str, value: int) -> None:
        """Set a gauge value."""
        if not self._enabled:
            return
        with self._lock:
            self._gauges[name] = value

    def get_counter(self, name: str) -> int:
        return self._counters.get(name, 0)

    def get_gauge(self, name: str) -> int:
        return self._gauges.get(name, 0)

    def snapshot(self) -> Dict[str, Dict[str, int]]:
        """Return a snapshot of all metrics."""
        with self._lock:
            return {
                "counters": dict(self._counters),
                "gauges": dict(self._gauges),
            }
