"""Association table giving arbitrary host objects a lazily created Channel."""

import threading
import weakref
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from txrx.channel import Channel
from txrx.observability import get_logger


@dataclass
class _Association:
    host: Callable[[], Optional[object]]
    channel: Channel
    finalizer: Optional[weakref.finalize] = None


def _strong(host: object) -> Callable[[], object]:
    return lambda: host


class Registry:
    """
    Maps host objects (by identity) to the Channel created for them.

    Entries for weak-referenceable hosts are dropped when the host is garbage
    collected. Other hosts are kept alive by the table until discard().
    """

    def __init__(self, factory: Callable[[], Channel] = Channel) -> None:
        self._factory = factory
        self._entries: Dict[int, _Association] = {}
        # finalizers may fire from gc while this thread holds the lock
        self._lock = threading.RLock()
        self._logger = get_logger("txrx.registry")

    def _lookup(self, host: object) -> Optional[_Association]:
        entry = self._entries.get(id(host))
        if entry is None or entry.host() is not host:
            return None
        return entry

    def has(self, host: object) -> bool:
        """True if host has an associated channel."""
        with self._lock:
            return self._lookup(host) is not None

    def get(self, host: object) -> Optional[Channel]:
        """Return the channel associated with host, or None."""
        with self._lock:
            entry = self._lookup(host)
            return entry.channel if entry is not None else None

    def add(self, host: object) -> None:
        """Create and associate a channel with host; no-op if it already has one."""
        self.get_or_create(host)

    def get_or_create(self, host: object) -> Channel:
        """Return host's channel, creating and associating one if absent."""
        with self._lock:
            entry = self._lookup(host)
            if entry is not None:
                return entry.channel
            key = id(host)
            try:
                ref: Callable[[], Optional[object]] = weakref.ref(host)
            except TypeError:
                ref = _strong(host)
                finalizer = None
            else:
                finalizer = weakref.finalize(host, self._reclaim, key)
                finalizer.atexit = False
            entry = _Association(host=ref, channel=self._factory(), finalizer=finalizer)
            self._entries[key] = entry
        self._logger.debug(
            "channel_associated",
            extra={"host_type": type(host).__name__, "weak": finalizer is not None},
        )
        return entry.channel

    def discard(self, host: object) -> bool:
        """Drop host's association. True if there was one."""
        with self._lock:
            entry = self._lookup(host)
            if entry is None:
                return False
            del self._entries[id(host)]
        if entry.finalizer is not None:
            entry.finalizer.detach()
        return True

    def _reclaim(self, key: int) -> None:
        with self._lock:
            entry = self._entries.get(key)
            # a live host can only sit under this key if the old one is gone
            if entry is None or entry.host() is not None:
                return
            del self._entries[key]
        self._logger.debug("association_reclaimed", extra={"key": key})

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __repr__(self) -> str:
        return f"Registry(hosts={len(self)})"


default_registry = Registry()
