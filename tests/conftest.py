"""Shared fixtures: a throwaway plugin source tree and a mocked host."""

import importlib
import sys
import textwrap
import uuid
from pathlib import Path
from unittest.mock import MagicMock

import pytest


class PluginTree:
    """Plugin directory laid out as ``<root>/src/<package>/...``.

    Every tree gets a unique package name so modules imported by one test
    never shadow another's. ``PKG`` in written sources is replaced by it.
    """

    def __init__(self, root: Path):
        self.root = root
        self.package = f"plug_{uuid.uuid4().hex[:10]}"
        self.source_root = root / "src"
        self.package_dir = self.source_root / self.package
        self.package_dir.mkdir(parents=True)

    @property
    def main(self) -> str:
        return f"{self.package}.main.TestPlugin"

    def ident(self, dotted: str) -> str:
        return f"{self.package}.{dotted}"

    def write(self, relative: str, source: str = "") -> Path:
        path = self.package_dir / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(textwrap.dedent(source).replace("PKG", self.package))
        importlib.invalidate_caches()
        return path

    def module(self, dotted: str):
        return sys.modules[self.ident(dotted)]


@pytest.fixture
def plugin_tree(tmp_path):
    saved_path = list(sys.path)
    tree = PluginTree(tmp_path / "TestPlugin")
    tree.write("api.py", """
        from abc import ABC, abstractmethod


        class Service:
            pass


        class AbstractService(Service, ABC):
            @abstractmethod
            def start(self): ...
    """)
    yield tree
    sys.path[:] = saved_path
    for name in list(sys.modules):
        if name == tree.package or name.startswith(tree.package + "."):
            del sys.modules[name]


@pytest.fixture
def on_path(plugin_tree, monkeypatch):
    """The plugin tree with its source root importable."""
    monkeypatch.syspath_prepend(str(plugin_tree.source_root))
    return plugin_tree


@pytest.fixture
def server():
    return MagicMock()


@pytest.fixture
def plugin(plugin_tree, server):
    from autoload.host import PluginBase
    return PluginBase(
        server,
        plugin_tree.root,
        name="TestPlugin",
        main=plugin_tree.main,
        logger=MagicMock(),
    )


@pytest.fixture
def settings():
    from autoload.config import AutoLoadSettings
    return AutoLoadSettings(
        print_summary=True,
        source_dir="src",
        file_extension=".py",
        command_prefix="auto-load",
    )


@pytest.fixture
def loader(plugin, settings):
    from autoload.loader import AutoLoader
    ldr = AutoLoader(settings=settings)
    ldr.init(plugin)
    return ldr
