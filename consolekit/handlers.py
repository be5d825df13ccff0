"""
consolekit command handlers.

A handler is what a resolved command runs. It is a small tagged variant:

- CallbackHandler(callback): call callback(args, io, command).
- DelegatingHandler(target): run the handler of another command (by path or
  Command object) with the same args and io.
- NullHandler(): do nothing and return 0.

dispatch() matches on the variant and always returns an int exit status
(None from a callback means 0).
"""
from .logs import get_logger

logger = get_logger(__name__)


class Handler:
    """
    Base of the handler variants; not meant to be instantiated directly.
    """
    __slots__ = ()

    def __init_subclass__(cls, **options):
        super().__init_subclass__(**options)
        if cls.__module__ != __name__:
            raise TypeError(f"type {cls.__name__!r} cannot subclass 'Handler'; wrap a callable with CallbackHandler")


class CallbackHandler(Handler):
    __slots__ = ("callback",)
    __match_args__ = ("callback",)

    def __init__(self, callback, /):
        if not callable(callback):
            raise TypeError("CallbackHandler() argument must be callable")
        self.callback = callback

    def __repr__(self):
        return f"callback-handler({getattr(self.callback, '__qualname__', self.callback)!r})"


class DelegatingHandler(Handler):
    __slots__ = ("target",)
    __match_args__ = ("target",)

    def __init__(self, target, /):
        if not isinstance(target, str | tuple) and not hasattr(target, "handler"):
            raise TypeError("DelegatingHandler() argument must be a command or a command path")
        self.target = target

    def __repr__(self):
        return f"delegating-handler({self.target!r})"


class NullHandler(Handler):
    __slots__ = ()

    def __repr__(self):
        return "null-handler()"


def _target(command, target, /):
    """
    Resolve a delegation target: a Command, a "server add" path or a ("server", "add") tuple.
    """
    if not isinstance(target, str | tuple):
        return target
    node = command.application
    for name in target.split() if isinstance(target, str) else target:
        node = node.get_command(name)
    return node


def dispatch(handler, args, io, command, /, _seen=()):
    """
    Run a handler and return its exit status as an int.
    """
    match handler:
        case CallbackHandler(callback):
            logger.debug("dispatching %r to %r", command, callback)
            status = callback(args, io, command)
        case DelegatingHandler(target):
            target = _target(command, target)
            if target in _seen:
                raise RecursionError(f"handler delegation loops back to {target!r}")
            logger.debug("delegating %r to %r", command, target)
            status = dispatch(target.handler, args, io, target, _seen=(*_seen, command))
        case NullHandler():
            status = 0
        case None:
            status = 0
        case _:
            raise TypeError(f"cannot dispatch {type(handler).__name__!r}, expected a handler")
    return 0 if status is None else int(status)


__all__ = (
    "Handler",
    "CallbackHandler",
    "DelegatingHandler",
    "NullHandler",
    "dispatch",
)
