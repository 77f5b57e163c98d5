"""Typed in-process message channels with separate transmit and receive handles."""

from txrx.channel import Channel
from txrx.config import Settings, get_settings
from txrx.errors import ChannelError, NoEventLoopError, NotWeakReferenceableError
from txrx.message import Listener, Message, Schema
from txrx.registry import Registry, default_registry
from txrx.rx import Rx
from txrx.subscribers import Subscribers
from txrx.trampoline import WeakHandle
from txrx.tx import Tx

__all__ = [
    "Channel",
    "ChannelError",
    "Listener",
    "Message",
    "NoEventLoopError",
    "NotWeakReferenceableError",
    "Registry",
    "Rx",
    "Schema",
    "Settings",
    "Subscribers",
    "Tx",
    "WeakHandle",
    "default_registry",
    "get_settings",
]
