"""Type-level declarations for messages and listeners.

A message is any hashable value naming a topic inside one channel. The
argument list a message carries is declared with ``Schema`` for readers and
type checkers only; nothing here is enforced at runtime.

    class Events(Schema):
        opened: tuple[str]
        moved: tuple[int, int]

    channel: Channel[str] = Channel()
"""

import inspect
from typing import Any, Callable, Dict, Hashable, Tuple, TypeVar

Message = Hashable
"""A topic identifier within one channel (str, int, Enum member, sentinel object)."""

Listener = Callable[..., Any]
"""A callback registered against a message; called with the message's arguments."""

MessageT = TypeVar("MessageT", bound=Hashable)
ListenerT = TypeVar("ListenerT", bound=Callable[..., Any])


class Schema:
    """Base for per-message argument declarations.

    Each annotation maps a message name to the tuple of positional argument
    types its listeners receive.
    """

    @classmethod
    def messages(cls) -> Dict[str, Tuple[Any, ...]]:
        """Return {message name: declared argument types} from the class annotations."""
        out: Dict[str, Tuple[Any, ...]] = {}
        for klass in reversed(cls.__mro__):
            if klass is object:
                continue
            for name, hint in inspect.get_annotations(klass).items():
                # older interpreters spell tuple[()] as ((),)
                out[name] = tuple(arg for arg in getattr(hint, "__args__", ()) if arg != ())
        return out
