"""AutoLoader: discovery, filtering, ordering and registration.

Each autoload_* call runs the same pipeline over one directory:

  scan() -> resolve_type() -> accepts() -> priority_of()
         -> stable sort by priority -> instantiate -> register callback

Calls made on one AutoLoader share its dedup set and counters, so a type
reachable from two directories is only instantiated once. Once every
in-flight call has returned, a one-time summary is written to the
plugin's logger.

All pipeline state lives in the loader's LoadContext and is only touched
while holding the loader's re-entrant lock: concurrent calls run one
after the other, and a registration callback may itself start a nested
autoload_* call.
"""

from __future__ import annotations

import enum
import logging
import sys
import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from operator import attrgetter
from pathlib import Path
from typing import Any, Callable, Iterator

from autoload.config import AutoLoadSettings, settings as default_settings
from autoload.discovery import scan
from autoload.errors import AlreadyInitializedError, NotInitializedError
from autoload.filters import accepts, resolve_capability, resolve_type
from autoload.host import Command, Listener, PluginBase
from autoload.markers import priority_of
from autoload.paths import sanitize_directory

logger = logging.getLogger(__name__)

RegisterCallback = Callable[[Any, str], None]


class LoadCategory(str, enum.Enum):
    """Bookkeeping tag used for the summary counts."""

    COMMAND = "command"
    LISTENER = "listener"
    CUSTOM = "custom"


@dataclass(frozen=True)
class Candidate:
    """A type that passed the filters, waiting to be instantiated."""

    identifier: str
    type: type
    priority: int


@dataclass
class LoadContext:
    """State shared by every load made through one AutoLoader."""

    plugin: PluginBase
    source_root: Path
    namespace: str
    print_summary: bool
    loaded: dict[str, LoadCategory] = field(default_factory=dict)
    counts: dict[LoadCategory, int] = field(
        default_factory=lambda: {category: 0 for category in LoadCategory}
    )
    in_flight: int = 0
    runs: int = 0
    summary_printed: bool = False

    @property
    def package_dir(self) -> Path:
        """Directory of the plugin's root package."""
        if not self.namespace:
            return self.source_root
        return self.source_root.joinpath(*self.namespace.split("."))


def root_namespace(main: str) -> str:
    """Root package of a plugin, from the dotted path of its main class.

    ``myplugin.main.MyPlugin`` -> ``myplugin``; a main class in a top-level
    module (``main.MyPlugin``) gives the source root itself, ``""``.
    """
    return ".".join(main.split(".")[:-2])


class AutoLoader:
    """Loads and registers plugin types found in the plugin's source tree.

    Args:
        settings: Loader settings (defaults to the environment settings).
        command_type: Capability required by autoload_commands().
        listener_type: Capability required by autoload_listeners().
    """

    def __init__(
        self,
        settings: AutoLoadSettings | None = None,
        command_type: type = Command,
        listener_type: type = Listener,
    ) -> None:
        self.settings = settings if settings is not None else default_settings
        self.command_type = command_type
        self.listener_type = listener_type
        self._lock = threading.RLock()
        self._ctx: LoadContext | None = None

    # ------------------------------------------------------------------
    # Initialization
    # ------------------------------------------------------------------

    def init(self, plugin: PluginBase, print_summary: bool | None = None) -> None:
        """Bind the loader to a plugin. Allowed once per loader.

        Raises AlreadyInitializedError on a second call.
        """
        with self._lock:
            if self._ctx is not None:
                raise AlreadyInitializedError("AutoLoader is already initialized.")

            if print_summary is None:
                print_summary = self.settings.print_summary

            source_root = Path(plugin.file) / self.settings.source_dir
            self._ctx = LoadContext(
                plugin=plugin,
                source_root=source_root,
                namespace=root_namespace(plugin.main),
                print_summary=print_summary,
            )

            # Discovered modules are imported by their dotted identifier
            root = str(source_root)
            if root not in sys.path:
                sys.path.insert(0, root)

            logger.info(
                f"AutoLoader initialized for {plugin.name} "
                f"(package {self._ctx.namespace or '<root>'} in {source_root})"
            )

    def _context(self) -> LoadContext:
        if self._ctx is None:
            raise NotInitializedError(
                "AutoLoader must be initialized before use. Call init(plugin)."
            )
        return self._ctx

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def autoload_commands(self, directory: str) -> list[str]:
        """Load every Command under ``directory`` into the server's command map.

        Like every autoload_* call, prints the summary on return when no
        other load is in flight. Sequential calls therefore print it after
        the first one, counting only what was loaded so far; wrap them in
        batch() to get one summary after the last call.
        """
        ctx = self._context()
        prefix = self.settings.command_prefix

        def register(command: Any, identifier: str) -> None:
            ctx.plugin.server.command_map.register(prefix, command)

        return self.autoload_type(directory, self.command_type, register, LoadCategory.COMMAND)

    def autoload_listeners(self, directory: str) -> list[str]:
        """Load every Listener under ``directory`` and register its events.

        See autoload_commands() for when the summary is printed.
        """
        ctx = self._context()

        def register(listener: Any, identifier: str) -> None:
            ctx.plugin.server.plugin_manager.register_events(listener, ctx.plugin)

        return self.autoload_type(directory, self.listener_type, register, LoadCategory.LISTENER)

    def autoload_custom(
        self, directory: str, required: type | str, callback: RegisterCallback
    ) -> list[str]:
        """Load every subtype of ``required`` and pass it to ``callback``.

        Args:
            directory: Directory relative to the plugin's root package.
            required: Base class (or its dotted path) types must extend.
            callback: Called as ``callback(instance, identifier)``.

        See autoload_commands() for when the summary is printed.
        """
        self._context()
        return self.autoload_type(directory, required, callback, LoadCategory.CUSTOM)

    def autoload_type(
        self,
        directory: str,
        required: type | str,
        register_callback: RegisterCallback,
        category: LoadCategory | str,
    ) -> list[str]:
        """Run the load pipeline over one directory.

        Returns:
            Identifiers loaded by this call, in load order.

        Raises:
            NotInitializedError: If init() was not called.
            InvalidPathError: If ``directory`` contains ``..`` or is absolute.
            DirectoryNotFoundError: If ``directory`` does not exist.
            InvalidCapabilityError: If ``required`` is not a class.
        """
        ctx = self._context()
        sanitize_directory(directory)
        capability = resolve_capability(required)
        category = LoadCategory(category)

        with self._lock:
            ctx.in_flight += 1
            ctx.runs += 1
            try:
                candidates = self._collect(ctx, directory, capability)
                loaded = self._load(ctx, candidates, register_callback, category)
            finally:
                ctx.in_flight -= 1

            if ctx.print_summary:
                self.try_print_summary()

        return loaded

    @contextmanager
    def batch(self) -> Iterator[AutoLoader]:
        """Group several autoload_* calls under one summary.

        The in-flight counter stays raised for the whole block, so the
        summary is printed once on exit and covers every call made inside:

            with loader.batch():
                loader.autoload_commands("commands")
                loader.autoload_listeners("listeners")
        """
        ctx = self._context()
        with self._lock:
            ctx.in_flight += 1
        try:
            yield self
        finally:
            with self._lock:
                ctx.in_flight -= 1

        if ctx.print_summary:
            self.try_print_summary()

    def _collect(self, ctx: LoadContext, directory: str, capability: type) -> list[Candidate]:
        """Discover, filter and sort the candidates of one directory."""
        candidates: list[Candidate] = []

        def collect(identifier: str, path: Path) -> None:
            cls = resolve_type(identifier, path)
            if cls is None:
                return
            if not accepts(cls, capability):
                logger.debug(f"Skipping {identifier}: not an eligible {capability.__name__}")
                return
            candidates.append(Candidate(identifier, cls, priority_of(cls)))

        visited = scan(
            ctx.package_dir,
            directory,
            ctx.namespace,
            collect,
            ctx.plugin.logger,
            self.settings.file_extension,
        )
        logger.debug(
            f"Scanned {visited} files in {directory or '<root>'}: "
            f"{len(candidates)} eligible {capability.__name__} types"
        )

        # sorted() is stable: equal priorities keep discovery order
        return sorted(candidates, key=attrgetter("priority"))

    def _load(
        self,
        ctx: LoadContext,
        candidates: list[Candidate],
        register_callback: RegisterCallback,
        category: LoadCategory,
    ) -> list[str]:
        loaded: list[str] = []
        for entry in candidates:
            if entry.identifier in ctx.loaded:
                continue

            try:
                instance = entry.type()
                register_callback(instance, entry.identifier)
            except Exception as e:
                ctx.plugin.logger.error(
                    f"Failed to instantiate {category.value} {entry.identifier}: {e}"
                )
                continue

            ctx.loaded[entry.identifier] = category
            ctx.counts[category] += 1
            loaded.append(entry.identifier)
            logger.debug(f"Loaded {category.value} {entry.identifier} (priority {entry.priority})")

        return loaded

    # ------------------------------------------------------------------
    # Summary
    # ------------------------------------------------------------------

    def try_print_summary(self) -> bool:
        """Log the load summary if every load has finished.

        Printed at most once per loader. Returns True if it was printed
        by this call.
        """
        ctx = self._context()
        with self._lock:
            if ctx.summary_printed or ctx.in_flight > 0 or ctx.runs == 0:
                return False
            ctx.summary_printed = True

            log = ctx.plugin.logger
            log.info("-" * 40)
            log.info(f" Loading finished for {ctx.plugin.name}")
            log.info(f" » {ctx.counts[LoadCategory.COMMAND]} commands")
            log.info(f" » {ctx.counts[LoadCategory.LISTENER]} listeners")
            log.info(f" » {ctx.counts[LoadCategory.CUSTOM]} custom")
            log.info("-" * 40)
        return True

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def initialized(self) -> bool:
        return self._ctx is not None

    @property
    def context(self) -> LoadContext:
        return self._context()

    @property
    def in_flight(self) -> int:
        return self._ctx.in_flight if self._ctx else 0

    @property
    def summary_printed(self) -> bool:
        return self._ctx.summary_printed if self._ctx else False

    def is_loaded(self, identifier: str) -> bool:
        return self._ctx is not None and identifier in self._ctx.loaded

    def loaded_types(self, category: LoadCategory | str | None = None) -> list[str]:
        """Loaded identifiers in load order, optionally for one category."""
        if self._ctx is None:
            return []
        if category is None:
            return list(self._ctx.loaded)
        category = LoadCategory(category)
        return [ident for ident, cat in self._ctx.loaded.items() if cat is category]

    def loaded_counts(self) -> dict[str, int]:
        if self._ctx is None:
            return {category.value: 0 for category in LoadCategory}
        return {category.value: count for category, count in self._ctx.counts.items()}


# ----------------------------------------------------------------------
# Process-wide loader
# ----------------------------------------------------------------------

_default_loader: AutoLoader | None = None
_default_lock = threading.Lock()


def get_loader() -> AutoLoader:
    """The process-wide loader used by the module-level functions."""
    global _default_loader
    with _default_lock:
        if _default_loader is None:
            _default_loader = AutoLoader()
        return _default_loader


def init(plugin: PluginBase, print_summary: bool | None = None) -> None:
    get_loader().init(plugin, print_summary)


def autoload_commands(directory: str) -> list[str]:
    return get_loader().autoload_commands(directory)


def autoload_listeners(directory: str) -> list[str]:
    return get_loader().autoload_listeners(directory)


def autoload_custom(directory: str, required: type | str, callback: RegisterCallback) -> list[str]:
    return get_loader().autoload_custom(directory, required, callback)
