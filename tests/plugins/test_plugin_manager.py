"""Tests for PluginManager and the Observers facade."""

from __future__ import annotations

import logging

import pluggy
import pytest

from tests.conftest import RecordingPlugin
from udpcomm.domain.commands import DelayUnit, FlushDirection
from udpcomm.plugins.manager import PluginManager
from udpcomm.plugins.observers import Observers

hookimpl = pluggy.HookimplMarker("udpcomm")


class FailingPlugin:
    @hookimpl
    def on_rx(self, text: str) -> None:
        raise RuntimeError("boom")


class EntryPointPlugin:
    def __init__(self) -> None:
        self.seen: list[str] = []

    @hookimpl
    def on_tx(self, text: str) -> None:
        self.seen.append(text)


class TestPluginManager:
    def test_register_and_list(self) -> None:
        pm = PluginManager()
        pm.register_plugin(RecordingPlugin(), name="recorder")
        assert "recorder" in pm.list_plugin_names()

    def test_default_name_is_class_name(self) -> None:
        pm = PluginManager()
        pm.register_plugin(RecordingPlugin())
        assert "RecordingPlugin" in pm.list_plugin_names()

    def test_unregister(self) -> None:
        pm = PluginManager()
        plugin = RecordingPlugin()
        pm.register_plugin(plugin, name="recorder")
        pm.unregister(plugin)
        assert "recorder" not in pm.list_plugin_names()

    def test_discover_with_no_entry_points(self) -> None:
        pm = PluginManager()
        assert not pm.is_loaded
        pm.discover_and_load()
        assert pm.is_loaded

    def test_entry_point_classes_are_instantiated(self, monkeypatch: pytest.MonkeyPatch) -> None:
        pm = PluginManager()

        def fake_load(group: str) -> int:
            pm._pm.register(EntryPointPlugin, name="ep")
            return 1

        monkeypatch.setattr(pm._pm, "load_setuptools_entrypoints", fake_load)
        pm.discover_and_load()
        Observers(pm).on_tx("hello")
        instance = pm._pm.get_plugin("ep")
        assert isinstance(instance, EntryPointPlugin)
        assert instance.seen == ["hello"]


class TestObservers:
    def test_dispatches_to_all_plugins(self) -> None:
        pm = PluginManager()
        first, second = RecordingPlugin(), RecordingPlugin()
        pm.register_plugin(first, name="first")
        pm.register_plugin(second, name="second")
        observers = Observers(pm)
        observers.on_delay(DelayUnit.MILLISECONDS, 5)
        observers.on_flush(FlushDirection.RX_TX)
        for plugin in (first, second):
            assert plugin.calls == [("on_delay", ("ms", 5)), ("on_flush", "rx-tx")]

    def test_failures_are_logged_not_raised(self, caplog: pytest.LogCaptureFixture) -> None:
        pm = PluginManager()
        pm.register_plugin(FailingPlugin(), name="failing")
        with caplog.at_level(logging.WARNING, logger="udpcomm.plugins.observers"):
            Observers(pm).on_rx("x")
        assert "on_rx failed" in caplog.text

    def test_plugin_manager_property(self) -> None:
        pm = PluginManager()
        assert Observers(pm).plugin_manager is pm
