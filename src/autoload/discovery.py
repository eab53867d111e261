"""Directory discovery: maps source files to module identifiers.

A file at ``<package dir>/commands/admin/ban_command.py`` in a plugin
whose root package is ``myplugin`` is discovered as
``myplugin.commands.admin.ban_command``.

Sub-directories are recursed into inline, in sorted name order. Names
starting with ``_`` or ``.`` (``__init__.py``, ``__pycache__``, private
helpers) and names that are not valid Python identifiers are skipped.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Callable, Iterator

from autoload.errors import DirectoryNotFoundError
from autoload.paths import join_directory, sanitize_directory

logger = logging.getLogger(__name__)

DEFAULT_EXTENSION = ".py"


def _identifier(namespace: str, relative: str, stem: str) -> str:
    parts = [namespace] if namespace else []
    if relative:
        parts.extend(relative.split("/"))
    parts.append(stem)
    return ".".join(parts)


def _skipped(name: str) -> bool:
    return name.startswith(("_", "."))


def walk(
    package_dir: Path,
    directory: str,
    namespace: str,
    extension: str = DEFAULT_EXTENSION,
) -> Iterator[tuple[str, Path]]:
    """Yield ``(identifier, path)`` for every loadable file under a directory.

    Args:
        package_dir: Filesystem directory of the root package.
        directory: Directory relative to ``package_dir`` ("" for the root).
        namespace: Dotted name of the root package.
        extension: Suffix marking a loadable source file.

    Raises:
        InvalidPathError: If ``directory`` contains ``..`` or is absolute.
        DirectoryNotFoundError: If the resolved directory does not exist.
            Raised on call, not on first iteration.
    """
    normalized = sanitize_directory(directory)
    base = join_directory(package_dir, normalized)
    if not base.is_dir():
        raise DirectoryNotFoundError(f"Directory not found: {base}")
    return _walk(base, normalized, namespace, extension)


def _walk(
    path: Path, relative: str, namespace: str, extension: str
) -> Iterator[tuple[str, Path]]:
    for entry in sorted(path.iterdir(), key=lambda p: p.name):
        if _skipped(entry.name):
            continue

        if entry.is_dir():
            if not entry.name.isidentifier():
                logger.debug(f"Skipping directory {entry}: not a package name")
                continue
            sub = f"{relative}/{entry.name}" if relative else entry.name
            yield from _walk(entry, sub, namespace, extension)
            continue

        if entry.suffix != extension:
            continue

        stem = entry.name[: -len(extension)]
        if not stem.isidentifier():
            logger.debug(f"Skipping file {entry}: not a module name")
            continue

        yield _identifier(namespace, relative, stem), entry


def scan(
    package_dir: Path,
    directory: str,
    namespace: str,
    callback: Callable[[str, Path], None],
    log: Any,
    extension: str = DEFAULT_EXTENSION,
) -> int:
    """Walk a directory and call ``callback(identifier, path)`` for each file.

    Errors raised by the callback are logged on ``log`` and do not stop
    the walk. Errors locating the directory itself propagate.

    Returns:
        Number of files visited.
    """
    visited = 0
    for identifier, path in walk(package_dir, directory, namespace, extension):
        visited += 1
        try:
            callback(identifier, path)
        except Exception as e:
            log.error(f"Error loading {path.name}: {e}")
    return visited
