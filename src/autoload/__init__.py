"""Autoloading of commands, listeners and custom types for host plugins.

Scans a plugin's source tree, picks out the classes extending a required
base type, orders them by their declared priority and registers each one
with the host.

    from autoload import init, autoload_commands, autoload_listeners

    class MyPlugin(PluginBase):
        def on_enable(self):
            init(self)
            autoload_commands("commands")
            autoload_listeners("listeners")
"""

from autoload.errors import (
    AlreadyInitializedError,
    AutoLoadError,
    DirectoryNotFoundError,
    InvalidCapabilityError,
    InvalidPathError,
    NotInitializedError,
)
from autoload.host import Command, Listener, PluginBase
from autoload.loader import (
    AutoLoader,
    LoadCategory,
    autoload_commands,
    autoload_custom,
    autoload_listeners,
    get_loader,
    init,
)
from autoload.markers import cancel_autoload, load_priority

__all__ = [
    "AutoLoader",
    "LoadCategory",
    "init",
    "autoload_commands",
    "autoload_listeners",
    "autoload_custom",
    "get_loader",
    "load_priority",
    "cancel_autoload",
    "Command",
    "Listener",
    "PluginBase",
    "AutoLoadError",
    "AlreadyInitializedError",
    "NotInitializedError",
    "InvalidPathError",
    "InvalidCapabilityError",
    "DirectoryNotFoundError",
]
