"""Channel: owns one subscriber registry and the Tx/Rx pair bound to it."""

import itertools
from typing import Generic, List, Optional

from txrx.config import Settings, get_settings
from txrx.message import MessageT
from txrx.observability import Metrics, get_channel_logger
from txrx.observability.metrics import MESSAGES
from txrx.rx import Rx
from txrx.subscribers import Subscribers
from txrx.tx import Tx

_ids = itertools.count(1)


class Channel(Generic[MessageT]):
    """
    An in-process message channel.

    ``tx`` sends, ``rx`` subscribes; both see the same registry, which no
    other channel shares. Either handle may be passed around on its own.
    The channel's settings decide its log level, independent of other channels.
    """

    def __init__(self, settings: Optional[Settings] = None) -> None:
        if settings is None:
            settings = get_settings()
        self._id = f"ch-{next(_ids):x}"
        level = settings.log_level_no
        self._subscribers: Subscribers[MessageT] = Subscribers(threadsafe=settings.threadsafe)
        self._metrics = Metrics(enabled=settings.metrics)
        self._tx: Tx[MessageT] = Tx(
            self._subscribers, self._metrics, get_channel_logger("txrx.tx", level, self._id)
        )
        self._rx: Rx[MessageT] = Rx(
            self._subscribers, self._metrics, get_channel_logger("txrx.rx", level, self._id)
        )
        self._logger = get_channel_logger("txrx.channel", level, self._id)

    @property
    def id(self) -> str:
        return self._id

    @property
    def tx(self) -> Tx[MessageT]:
        return self._tx

    @property
    def rx(self) -> Rx[MessageT]:
        return self._rx

    @property
    def messages(self) -> List[MessageT]:
        """Messages that currently have at least one subscription."""
        return self._subscribers.messages()

    @property
    def metrics(self) -> Metrics:
        return self._metrics

    def clear(self) -> None:
        """Remove every subscription. Safe to call from inside a listener."""
        self._subscribers.clear()
        self._metrics.set_gauge(MESSAGES, 0)
        self._logger.debug("channel_cleared")

    @classmethod
    def has(cls, host: object) -> bool:
        """True if host already has a channel in the default association table."""
        from txrx.registry import default_registry

        return default_registry.has(host)

    @classmethod
    def get(cls, host: object) -> Optional["Channel"]:
        """The channel associated with host, or None."""
        from txrx.registry import default_registry

        return default_registry.get(host)

    @classmethod
    def add(cls, host: object) -> None:
        """Associate a fresh channel with host unless it already has one."""
        from txrx.registry import default_registry

        default_registry.add(host)

    def __repr__(self) -> str:
        return f"Channel({self._id}, messages={len(self._subscribers)})"
