"""Directory argument sanitizing.

Load directories are always given relative to the plugin's root package
and must stay inside it.
"""

from __future__ import annotations

import os
from pathlib import Path, PureWindowsPath

from autoload.errors import InvalidPathError


def sanitize_directory(directory: str) -> str:
    """Normalize separators to ``/`` and drop empty and ``.`` segments.

    Raises InvalidPathError if the path contains ``..`` or is absolute
    (leading ``/`` or a drive letter).
    """
    normalized = directory.replace("\\", "/")
    if os.sep != "/":
        normalized = normalized.replace(os.sep, "/")
    normalized = normalized.rstrip("/")
    if ".." in normalized:
        raise InvalidPathError(f"Directory path cannot contain '..': {directory!r}")
    if normalized.startswith("/") or PureWindowsPath(normalized).drive:
        raise InvalidPathError(f"Directory path must be relative: {directory!r}")
    return "/".join(part for part in normalized.split("/") if part not in ("", "."))


def join_directory(base: Path, normalized: str) -> Path:
    """Join an already sanitized directory onto ``base``.

    Raises InvalidPathError if the result is not inside ``base``.
    """
    root = Path(base)
    path = root / normalized if normalized else root
    if not path.is_relative_to(root):
        raise InvalidPathError(f"Directory {normalized!r} escapes {root}")
    return path


def resolve_directory(base: Path, directory: str) -> Path:
    """Resolve a load directory against the plugin's package directory."""
    return join_directory(base, sanitize_directory(directory))
