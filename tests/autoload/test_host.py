"""Tests for the host-facing base types."""

from pathlib import Path
from unittest.mock import MagicMock

import pytest

from autoload.host import Command, Listener, PluginBase


class TestCommand:

    def test_cannot_instantiate_abstract(self):
        with pytest.raises(TypeError):
            Command()

    def test_requires_name(self):
        class Nameless(Command):
            def execute(self, sender, label, args):
                return True

        with pytest.raises(TypeError):
            Nameless()

    def test_requires_execute(self):
        class Inert(Command):
            name = "inert"

        with pytest.raises(TypeError):
            Inert()

    def test_valid_command(self):
        class Heal(Command):
            name = "heal"
            description = "Heal a player"
            aliases = ("h",)

            def execute(self, sender, label, args):
                return bool(args)

        cmd = Heal()
        assert cmd.name == "heal"
        assert cmd.aliases == ("h",)
        assert cmd.execute(None, "heal", ["steve"]) is True

    def test_defaults(self):
        class Bare(Command):
            name = "bare"

            def execute(self, sender, label, args):
                return True

        assert Bare().description == ""
        assert Bare().aliases == ()


class TestListener:

    def test_plain_subclass_instantiates(self):
        class Join(Listener):
            pass

        assert isinstance(Join(), Listener)


class TestPluginBase:

    def test_file_is_path(self, tmp_path):
        plugin = PluginBase(MagicMock(), str(tmp_path))
        assert plugin.file == Path(tmp_path)

    def test_default_name_is_class_name(self, tmp_path):
        class Arena(PluginBase):
            pass

        assert Arena(MagicMock(), tmp_path).name == "Arena"

    def test_default_main_is_class_path(self, tmp_path):
        class Arena(PluginBase):
            pass

        plugin = Arena(MagicMock(), tmp_path)
        assert plugin.main == f"{__name__}.{Arena.__qualname__}"

    def test_explicit_main(self, tmp_path):
        plugin = PluginBase(MagicMock(), tmp_path, main="arena.main.Arena")
        assert plugin.main == "arena.main.Arena"

    def test_explicit_logger(self, tmp_path):
        log = MagicMock()
        plugin = PluginBase(MagicMock(), tmp_path, logger=log)
        assert plugin.logger is log

    def test_default_logger_is_bound_loguru(self, tmp_path):
        from loguru import logger

        messages = []
        sink = logger.add(messages.append, format="{extra[plugin]}: {message}")
        try:
            plugin = PluginBase(MagicMock(), tmp_path, name="Arena")
            plugin.logger.info("ready")
        finally:
            logger.remove(sink)

        assert any("Arena: ready" in str(m) for m in messages)

    def test_default_logger_cached(self, tmp_path):
        plugin = PluginBase(MagicMock(), tmp_path)
        assert plugin.logger is plugin.logger
