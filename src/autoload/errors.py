"""Exceptions raised by the autoloader.

Only fatal conditions are raised to the caller. Failures scoped to a
single file or type are logged and skipped by the pipeline instead.
"""


class AutoLoadError(Exception):
    """Base class for every error raised by the autoloader."""


class AlreadyInitializedError(AutoLoadError, RuntimeError):
    """Raised when init() is called on a loader that is already initialized."""


class NotInitializedError(AutoLoadError, RuntimeError):
    """Raised when a load is requested before init()."""


class InvalidPathError(AutoLoadError, ValueError):
    """Raised when a directory argument tries to escape the source tree."""


class DirectoryNotFoundError(AutoLoadError, FileNotFoundError):
    """Raised when the directory to load from does not exist."""


class InvalidCapabilityError(AutoLoadError, TypeError):
    """Raised when the required capability does not name a class."""
