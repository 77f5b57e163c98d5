"""Subscriber registry: message -> ordered set of listeners (in-memory only)."""

import contextlib
import threading
from typing import Any, ContextManager, Dict, Generic, List, Optional, Tuple

from txrx.message import Listener, MessageT

ListenerSet = Dict[Listener, None]


class Subscribers(Generic[MessageT]):
    """Listener sets keyed by message, in insertion order.

    A message entry exists only while its set is non-empty. Snapshots are
    copied under the lock; callers invoke listeners without holding it.
    """

    def __init__(self, threadsafe: bool = True) -> None:
        self._entries: Dict[MessageT, ListenerSet] = {}
        self._lock: ContextManager[Any] = (
            threading.Lock() if threadsafe else contextlib.nullcontext()
        )

    def get(self, message: MessageT) -> Optional[Tuple[Listener, ...]]:
        """Return a snapshot of the listeners for message, or None if it has none."""
        with self._lock:
            listeners = self._entries.get(message)
            if not listeners:
                return None
            return tuple(listeners)

    def ensure(self, message: MessageT) -> ListenerSet:
        """Return the live listener set for message, creating it if absent."""
        with self._lock:
            return self._entries.setdefault(message, {})

    def add(self, message: MessageT, listener: Listener) -> bool:
        """Add listener under message. Returns False if it was already there."""
        with self._lock:
            listeners = self._entries.setdefault(message, {})
            if listener in listeners:
                return False
            listeners[listener] = None
            return True

    def remove_listener(self, message: MessageT, listener: Listener) -> bool:
        """Remove listener from message; drops the entry once its set is empty."""
        with self._lock:
            listeners = self._entries.get(message)
            if listeners is None or listener not in listeners:
                return False
            del listeners[listener]
            if not listeners:
                del self._entries[message]
            return True

    def remove_message(self, message: MessageT) -> bool:
        """Remove every listener under message. Returns True if it existed."""
        with self._lock:
            return self._entries.pop(message, None) is not None

    def clear(self) -> None:
        """Remove all messages and listeners."""
        with self._lock:
            self._entries.clear()

    def messages(self) -> List[MessageT]:
        """Messages with at least one listener, in first-subscription order."""
        with self._lock:
            return [message for message, listeners in self._entries.items() if listeners]

    def listener_count(self, message: MessageT) -> int:
        with self._lock:
            return len(self._entries.get(message, ()))

    def __contains__(self, message: object) -> bool:
        with self._lock:
            return bool(self._entries.get(message))  # type: ignore[call-overload]

    def __len__(self) -> int:
        with self._lock:
            return sum(1 for listeners in self._entries.values() if listeners)

    def __repr__(self) -> str:
        return f"Subscribers(messages={len(self)})"
