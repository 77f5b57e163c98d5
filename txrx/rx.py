"""Message receiver: the subscribe/unsubscribe half of a channel."""

from typing import Generic, Hashable, Optional, Union

from txrx.config import get_settings
from txrx.message import Listener, ListenerT, MessageT
from txrx.observability import ChannelLogger, Metrics, get_channel_logger
from txrx.observability.metrics import MESSAGES, ONCE_FIRED
from txrx.subscribers import Subscribers
from txrx.trampoline import OnceListener, WeakHandle, WeakListener, weak_reference


class Rx(Generic[MessageT]):
    """Manages subscriptions on one channel's registry. Cannot send."""

    def __init__(
        self,
        subscribers: Subscribers[MessageT],
        metrics: Optional[Metrics] = None,
        logger: Optional[ChannelLogger] = None,
    ) -> None:
        self._subscribers = subscribers
        self._metrics = metrics if metrics is not None else Metrics(enabled=False)
        if logger is None:
            logger = get_channel_logger("txrx.rx", get_settings().log_level_no)
        self._logger = logger

    def on(self, message: MessageT, listener: ListenerT) -> ListenerT:
        """
        Subscribe listener to message until removed with off(), off_all() or clear().
        Subscribing the same listener twice is a no-op. Returns listener.
        """
        self._subscribe(message, listener, "persistent")
        return listener

    def once(self, message: MessageT, listener: ListenerT) -> ListenerT:
        """
        Subscribe listener for the next send of message only.
        Returns listener itself; off(message, listener) does not cancel it.
        """
        self._subscribe(
            message,
            OnceListener(self._subscribers, message, listener, self._on_self_removed),
            "once",
        )
        return listener

    def onweak(self, message: MessageT, listener: ListenerT) -> WeakHandle[ListenerT]:
        """
        Subscribe listener without keeping it alive.

        Once listener is garbage collected, the next send of message skips it
        and drops the subscription. Returns a WeakHandle, never a strong
        reference. Raises NotWeakReferenceableError for listeners that cannot
        be weakly referenced.
        """
        ref = weak_reference(listener)
        trampoline = WeakListener(self._subscribers, message, ref, self._on_self_removed)
        self._subscribe(message, trampoline, "weak")
        return WeakHandle(ref, trampoline)

    def off(self, message: MessageT, listener: Union[Listener, WeakHandle]) -> bool:
        """Unsubscribe listener (or a WeakHandle from onweak()). True if it was subscribed."""
        key = listener.trampoline if isinstance(listener, WeakHandle) else listener
        removed = self._subscribers.remove_listener(message, key)
        if removed:
            self._on_unsubscribed(message)
        return removed

    def off_all(self, message: MessageT) -> bool:
        """Unsubscribe every listener of message. True if message had any."""
        removed = self._subscribers.remove_message(message)
        if removed:
            self._on_unsubscribed(message)
        return removed

    def _subscribe(self, message: MessageT, listener: Listener, policy: str) -> None:
        added = self._subscribers.add(message, listener)
        self._metrics.set_gauge(MESSAGES, len(self._subscribers))
        self._logger.debug(
            "subscribed",
            extra={"topic": repr(message), "policy": policy, "added": added},
        )

    def _on_unsubscribed(self, message: MessageT) -> None:
        self._metrics.set_gauge(MESSAGES, len(self._subscribers))
        self._logger.debug("unsubscribed", extra={"topic": repr(message)})

    def _on_self_removed(self, message: Hashable, counter: str) -> None:
        """Bookkeeping after a once/weak wrapper dropped its own subscription."""
        self._metrics.increment(counter)
        self._metrics.set_gauge(MESSAGES, len(self._subscribers))
        event = "once_fired" if counter == ONCE_FIRED else "weak_listener_evicted"
        self._logger.debug(event, extra={"topic": repr(message)})

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self._subscribers!r})"
