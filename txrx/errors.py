"""Exceptions raised for channel misuse.

Unknown messages and already-removed listeners are not errors: those report
through boolean or None results. Exceptions raised by listeners are never
wrapped; they reach the caller of send() (or the send_async() future) as-is.
"""


class ChannelError(Exception):
    """Base class for txrx errors."""


class NotWeakReferenceableError(ChannelError, TypeError):
    """Raised by Rx.onweak() when the listener cannot be weakly referenced."""

    def __init__(self, listener: object) -> None:
        super().__init__(
            f"cannot create a weak reference to {type(listener).__name__!r} listener"
        )
        self.listener = listener


class NoEventLoopError(ChannelError, RuntimeError):
    """Raised by Tx.send_async() when no asyncio event loop is running."""

    def __init__(self) -> None:
        super().__init__("send_async() requires a running asyncio event loop")
