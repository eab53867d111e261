"""Class decorators controlling how a type is autoloaded.

    @load_priority(-10)
    class SetupCommand(Command):
        ...

    @cancel_autoload
    class DebugListener(Listener):
        ...

Markers live in the decorated class's own ``__dict__`` and are not
inherited: a subclass of a cancelled class is loaded unless it is
cancelled itself.
"""

from __future__ import annotations

from typing import Callable, TypeVar

T = TypeVar("T", bound=type)

PRIORITY_ATTR = "__autoload_priority__"
CANCEL_ATTR = "__autoload_cancelled__"

DEFAULT_PRIORITY = 0


def load_priority(priority: int) -> Callable[[T], T]:
    """Set the load priority of a class. Lower values load earlier."""
    if isinstance(priority, bool) or not isinstance(priority, int):
        raise TypeError(f"Load priority must be an int, got {priority!r}")

    def decorator(cls: T) -> T:
        setattr(cls, PRIORITY_ATTR, priority)
        return cls

    return decorator


def cancel_autoload(cls: T) -> T:
    """Exclude a class from autoloading."""
    setattr(cls, CANCEL_ATTR, True)
    return cls


def priority_of(cls: type) -> int:
    return vars(cls).get(PRIORITY_ATTR, DEFAULT_PRIORITY)


def is_cancelled(cls: type) -> bool:
    return bool(vars(cls).get(CANCEL_ATTR, False))
