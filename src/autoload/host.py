"""Interfaces of the plugin host consumed by the autoloader.

The host runtime owns the command map, the event system and logging.
This module only describes the parts the autoloader talks to, plus the
base types plugin authors extend so their classes can be discovered:

- Command: abstract base for commands (autoload_commands)
- Listener: marker base for event listeners (autoload_listeners)
- PluginBase: handle of the plugin being enabled, passed to init()
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Protocol

from loguru import logger as _root_logger


class Command(ABC):
    """Base class for commands registered in the server's command map.

    Subclasses must define:
    - name: str, the command label

    And implement:
    - execute(sender, label, args)
    """

    description: str = ""
    aliases: tuple[str, ...] = ()

    @property
    @abstractmethod
    def name(self) -> str:
        """Label the command is invoked with."""

    @abstractmethod
    def execute(self, sender: Any, label: str, args: list[str]) -> bool:
        """Run the command. Return False to show usage."""


class Listener:
    """Marker base class for event listeners.

    The host's plugin manager inspects registered listeners for their
    handler methods; nothing is required here.
    """


class PluginLogger(Protocol):
    def info(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...


class CommandMap(Protocol):
    def register(self, fallback_prefix: str, command: Command) -> bool: ...


class PluginManager(Protocol):
    def register_events(self, listener: Listener, plugin: PluginBase) -> None: ...


class Server(Protocol):
    command_map: CommandMap
    plugin_manager: PluginManager


class PluginBase:
    """Handle of an enabled plugin.

    Args:
        server: The host server.
        file: Plugin directory; sources live under ``file/src``.
        name: Display name (defaults to the class name).
        main: Dotted path of the plugin's main class as declared in its
            manifest (defaults to this object's class).
        logger: Host logger (defaults to loguru bound to the plugin name).
    """

    def __init__(
        self,
        server: Server,
        file: str | Path,
        name: str | None = None,
        main: str | None = None,
        logger: PluginLogger | None = None,
    ) -> None:
        self.server = server
        self.file = Path(file)
        self.name = name or type(self).__name__
        self._main = main
        self._logger = logger

    @property
    def main(self) -> str:
        if self._main is not None:
            return self._main
        cls = type(self)
        return f"{cls.__module__}.{cls.__qualname__}"

    @property
    def logger(self) -> PluginLogger:
        if self._logger is None:
            self._logger = _root_logger.bind(plugin=self.name)
        return self._logger
