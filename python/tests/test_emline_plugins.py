"""Tests for plugin loading."""

from __future__ import annotations

import io
import textwrap

import pytest

from emline.channel import HostChannel
from emline.plugins import PluginError, load_plugin, load_plugins
from emline.registry import EventRegistry, RequestRegistry
from emline.storage import PluginStorage

PLUGIN_SOURCE = textwrap.dedent(
    """
    from emline.template import expand

    def setup(events, requests, channel, storage):
        def on_load(ctx, args):
            storage.write("last_uri", args[0])
            channel.send(expand("js page string %r", args))

        def on_ping(ctx, response):
            response.response = "pong"

        events.add("demo.load", 10, "LOAD_COMMIT", on_load)
        requests.add("demo.ping", 10, "PING", on_ping)
    """
)


@pytest.fixture
def runtime(tmp_path):
    stream = io.StringIO()
    channel = HostChannel(stream)
    storage = PluginStorage(tmp_path / "store", channel.name)
    return stream, EventRegistry(), RequestRegistry(channel.reply), channel, storage


def test_load_plugin_from_file(tmp_path, runtime):
    stream, events, requests, channel, storage = runtime
    path = tmp_path / "demo.py"
    path.write_text(PLUGIN_SOURCE, encoding="utf-8")
    module = load_plugin(str(path), events, requests, channel, storage)
    assert module.__name__ == "emline_plugin_demo"
    assert "demo.load" in events
    assert "demo.ping" in requests
    events.dispatch_event("LOAD_COMMIT", ["http://example.org/it's"])
    assert stream.getvalue() == "js page string 'http://example.org/it''s'\n"
    assert storage.read("last_uri") == "http://example.org/it's"


def test_load_plugin_by_module_name(tmp_path, monkeypatch, runtime):
    _, events, requests, channel, storage = runtime
    (tmp_path / "emline_test_plugin.py").write_text(PLUGIN_SOURCE, encoding="utf-8")
    monkeypatch.syspath_prepend(str(tmp_path))
    assert load_plugins(["emline_test_plugin"], events, requests, channel, storage) == ["emline_test_plugin"]
    assert events.names() == ["demo.load"]


def test_missing_module_raises(runtime):
    _, events, requests, channel, storage = runtime
    with pytest.raises(PluginError) as excinfo:
        load_plugin("emline_no_such_plugin", events, requests, channel, storage)
    assert excinfo.value.plugin == "emline_no_such_plugin"


def test_parent_directory_path_is_rejected(tmp_path, runtime):
    _, events, requests, channel, storage = runtime
    with pytest.raises(PluginError, match="invalid path"):
        load_plugin(str(tmp_path / "sub" / ".." / "demo.py"), events, requests, channel, storage)


def test_plugin_without_setup_is_rejected(tmp_path, runtime):
    _, events, requests, channel, storage = runtime
    path = tmp_path / "empty.py"
    path.write_text("VALUE = 1\n", encoding="utf-8")
    with pytest.raises(PluginError, match="missing setup"):
        load_plugin(str(path), events, requests, channel, storage)


def test_failing_setup_is_wrapped(tmp_path, runtime):
    _, events, requests, channel, storage = runtime
    path = tmp_path / "broken.py"
    path.write_text("def setup(events, requests, channel, storage):\n    raise KeyError('x')\n", encoding="utf-8")
    with pytest.raises(PluginError) as excinfo:
        load_plugin(str(path), events, requests, channel, storage)
    assert isinstance(excinfo.value.__cause__, KeyError)
