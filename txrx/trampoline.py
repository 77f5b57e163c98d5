"""Wrapper listeners implementing one-shot and weak subscription lifetimes."""

import inspect
import weakref
from typing import Any, Callable, Generic, Hashable, Optional

from txrx.errors import NotWeakReferenceableError
from txrx.message import Listener, ListenerT
from txrx.observability.metrics import ONCE_FIRED, WEAK_EVICTED
from txrx.subscribers import Subscribers

SKIPPED = object()
"""Returned by a wrapper listener that called nothing (already fired, or referent gone)."""

RemovedHook = Callable[[Hashable, str], None]
"""Called as hook(message, counter) after a wrapper listener drops its own subscription."""


def weak_reference(listener: Listener) -> Callable[[], Optional[Listener]]:
    """Return a weak reference to listener; bound methods use WeakMethod."""
    try:
        if inspect.ismethod(listener):
            return weakref.WeakMethod(listener)
        return weakref.ref(listener)
    except TypeError as e:
        raise NotWeakReferenceableError(listener) from e


class OnceListener:
    """Removes itself from the registry, then calls the wrapped listener once."""

    __slots__ = ("_subscribers", "_message", "_listener", "_removed", "_fired")

    def __init__(
        self,
        subscribers: Subscribers,
        message: Hashable,
        listener: Listener,
        removed: RemovedHook,
    ) -> None:
        self._subscribers = subscribers
        self._message = message
        self._listener = listener
        self._removed = removed
        self._fired = False

    @property
    def fired(self) -> bool:
        return self._fired

    def __call__(self, *args: Any) -> Any:
        # an outer send may still hold this trampoline in its snapshot
        if self._fired:
            return SKIPPED
        self._fired = True
        self._subscribers.remove_listener(self._message, self)
        self._removed(self._message, ONCE_FIRED)
        self._listener(*args)
        return None

    def __repr__(self) -> str:
        return f"OnceListener(message={self._message!r}, fired={self._fired})"


class WeakListener:
    """Forwards to a weakly held listener; evicts itself once the listener is gone."""

    __slots__ = ("_subscribers", "_message", "_ref", "_removed")

    def __init__(
        self,
        subscribers: Subscribers,
        message: Hashable,
        ref: Callable[[], Optional[Listener]],
        removed: RemovedHook,
    ) -> None:
        self._subscribers = subscribers
        self._message = message
        self._ref = ref
        self._removed = removed

    def __call__(self, *args: Any) -> Any:
        listener = self._ref()
        if listener is None:
            if self._subscribers.remove_listener(self._message, self):
                self._removed(self._message, WEAK_EVICTED)
            return SKIPPED
        listener(*args)
        return None

    def __repr__(self) -> str:
        state = "alive" if self._ref() is not None else "dead"
        return f"WeakListener(message={self._message!r}, {state})"


class WeakHandle(Generic[ListenerT]):
    """Non-owning handle to a listener subscribed with Rx.onweak().

    Calling the handle returns the listener while something else keeps it
    alive, and None afterwards. Passing the handle to Rx.off() removes the
    weak subscription.
    """

    __slots__ = ("_ref", "_trampoline")

    def __init__(self, ref: Callable[[], Optional[ListenerT]], trampoline: WeakListener) -> None:
        self._ref = ref
        self._trampoline = trampoline

    def __call__(self) -> Optional[ListenerT]:
        return self._ref()

    @property
    def alive(self) -> bool:
        return self._ref() is not None

    @property
    def trampoline(self) -> WeakListener:
        return self._trampoline

    def __repr__(self) -> str:
        return f"WeakHandle({'alive' if self.alive else 'dead'})"
