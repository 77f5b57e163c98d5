"""Message transmitter: the sending half of a channel."""

import asyncio
import contextlib
from typing import Any, Generic, Optional, Tuple

from txrx.config import get_settings
from txrx.errors import NoEventLoopError
from txrx.message import MessageT
from txrx.observability import ChannelLogger, Metrics, get_channel_logger
from txrx.observability.metrics import DELIVERIES, DELIVERY_FAILURES, SENDS, SENDS_EMPTY
from txrx.subscribers import Subscribers
from txrx.trampoline import SKIPPED

# set on a listener exception once some send() has logged and counted it
_RECORDED = "_txrx_recorded"


class Tx(Generic[MessageT]):
    """Emits messages to the current subscribers of one channel's registry. Cannot subscribe."""

    def __init__(
        self,
        subscribers: Subscribers[MessageT],
        metrics: Optional[Metrics] = None,
        logger: Optional[ChannelLogger] = None,
    ) -> None:
        self._subscribers = subscribers
        self._metrics = metrics if metrics is not None else Metrics(enabled=False)
        if logger is None:
            logger = get_channel_logger("txrx.tx", get_settings().log_level_no)
        self._logger = logger

    def send(self, message: MessageT, *args: Any) -> bool:
        """
        Call every listener of message with args, in subscription order.
        Returns False (calling nothing) if message has no listeners, else True.

        Listeners are taken from a snapshot made before the first call, so
        subscriptions changed by a listener apply from the next send. A
        listener exception propagates unchanged; later listeners do not run.
        """
        listeners = self._subscribers.get(message)
        if not listeners:
            self._metrics.increment(SENDS_EMPTY)
            return False
        self._metrics.increment(SENDS)
        self._logger.debug(
            "message_sent",
            extra={"topic": repr(message), "listener_count": len(listeners)},
        )
        for listener in listeners:
            try:
                result = listener(*args)
            except Exception as e:
                self._record_failure(message, listener, e)
                raise
            if result is not SKIPPED:
                self._metrics.increment(DELIVERIES)
        return True

    def _record_failure(self, message: MessageT, listener: Any, error: Exception) -> None:
        # a nested send() the error passed through has already reported it
        if getattr(error, _RECORDED, False):
            return
        with contextlib.suppress(AttributeError):
            setattr(error, _RECORDED, True)
        self._metrics.increment(DELIVERY_FAILURES)
        self._logger.exception(
            "delivery_failed",
            extra={"topic": repr(message), "listener": repr(listener), "error": str(error)},
        )

    def send_async(self, message: MessageT, *args: Any) -> "asyncio.Future[bool]":
        """
        Schedule send(message, *args) on a later turn of the running event loop.

        Returns a future resolving to what send() returned, or failing with
        the listener's exception (cancelled if the listener raised
        CancelledError). Deferred sends run in the order they were
        scheduled. Cancelling the future does not stop the delivery.
        """
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            raise NoEventLoopError() from None
        future: "asyncio.Future[bool]" = loop.create_future()
        loop.call_soon(self._send_deferred, future, message, args)
        return future

    def _send_deferred(self, future: "asyncio.Future[bool]", message: MessageT, args: Tuple[Any, ...]) -> None:
        try:
            result = self.send(message, *args)
        except asyncio.CancelledError:
            if not future.done():
                future.cancel()
            return
        except BaseException as e:
            if not future.done():
                future.set_exception(e)
            if isinstance(e, (SystemExit, KeyboardInterrupt)):
                raise
            return
        if not future.done():
            future.set_result(result)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self._subscribers!r})"
