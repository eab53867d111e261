"""Type resolution and eligibility checks for discovered modules.

Each discovered file holds one loadable type: the class named after the
file, either in CapWords (``ban_command.py`` -> ``BanCommand``) or
verbatim (``BanCommand.py`` -> ``BanCommand``).
"""

from __future__ import annotations

import importlib
import inspect
import logging
from pathlib import Path

from autoload.errors import InvalidCapabilityError
from autoload.markers import is_cancelled

logger = logging.getLogger(__name__)


def class_name_for(stem: str) -> str:
    """CapWords class name for a module stem."""
    return "".join(part[:1].upper() + part[1:] for part in stem.split("_") if part)


def _is_missing(error: ModuleNotFoundError, identifier: str) -> bool:
    # Missing identifier (or one of its parents) vs. a missing import
    # inside an existing module.
    name = error.name or ""
    return identifier == name or identifier.startswith(name + ".")


def _same_file(module, path: Path) -> bool:
    origin = getattr(module, "__file__", None)
    if not origin:
        return False
    return Path(origin).resolve() == Path(path).resolve()


def resolve_type(identifier: str, path: Path | None = None) -> type | None:
    """Import ``identifier`` and return the class it defines, or None.

    Errors raised while executing an existing module propagate. When
    ``path`` is given, the imported module must come from that file:
    an identifier already taken by another module (a stdlib module, or
    another plugin's package) raises ImportError instead of silently
    resolving to the wrong module.
    """
    try:
        module = importlib.import_module(identifier)
    except ModuleNotFoundError as e:
        if _is_missing(e, identifier):
            if path is not None:
                # The file exists, so a parent package is taken by another module
                raise ImportError(f"{identifier} cannot be imported from {path}: {e}") from e
            logger.debug(f"No module for {identifier}")
            return None
        raise

    if path is not None and not _same_file(module, path):
        raise ImportError(
            f"{identifier} is shadowed by {getattr(module, '__file__', None) or 'a built-in module'}"
        )

    stem = identifier.rpartition(".")[2]
    for name in dict.fromkeys((class_name_for(stem), stem)):
        obj = getattr(module, name, None)
        if inspect.isclass(obj) and obj.__module__ == module.__name__:
            return obj

    logger.debug(f"{identifier} defines no class named after its file")
    return None


def resolve_capability(required: type | str) -> type:
    """Return the capability class, importing it if given as a dotted path."""
    if inspect.isclass(required):
        return required
    if not isinstance(required, str):
        raise InvalidCapabilityError(f"Required type must be a class or dotted path, got {required!r}")

    module_name, _, attr = required.rpartition(".")
    if not module_name:
        raise InvalidCapabilityError(f"Required type must be a dotted path: {required!r}")
    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise InvalidCapabilityError(f"Cannot import required type {required!r}: {e}") from e

    obj = getattr(module, attr, None)
    if not inspect.isclass(obj):
        raise InvalidCapabilityError(f"Required type {required!r} is not a class")
    return obj


def is_concrete(cls: type) -> bool:
    """True for classes that can be instantiated: not abstract, not a Protocol."""
    return (
        inspect.isclass(cls)
        and not inspect.isabstract(cls)
        and not getattr(cls, "_is_protocol", False)
    )


def accepts(cls: type, required: type) -> bool:
    """Whether ``cls`` should be autoloaded for the ``required`` capability.

    Checks, in order: concrete, not cancelled, subtype of ``required``.
    """
    if not is_concrete(cls):
        return False
    if is_cancelled(cls):
        return False
    if cls is required:
        return False
    try:
        return issubclass(cls, required)
    except TypeError:
        # Protocols with data members refuse issubclass()
        return False
