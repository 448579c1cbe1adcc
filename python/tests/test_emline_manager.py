"""Tests for EventManager wiring and configuration."""

from __future__ import annotations

import io
import logging
import os
from pathlib import Path

from emline.config import EmlineConfig
from emline.manager import TRACE_HANDLER, EventManager


def test_manager_replies_through_channel():
    stream = io.StringIO()
    manager = EventManager.from_config(EmlineConfig(), stream)
    manager.requests.add("ping", 0, "PING", lambda ctx, response: setattr(response, "response", "pong"))
    assert manager.dispatch("REQUEST-1 [x] PING\n") is True
    assert stream.getvalue() == "REPLY-1 'pong'\n"


def test_trace_handler_runs_first(caplog):
    caplog.set_level(logging.INFO, logger="emline.manager")
    manager = EventManager.from_config(EmlineConfig(trace=True, name="main"), io.StringIO())
    manager.events.add("user", -1000, True, lambda ctx, args: None)
    assert manager.events.names()[0] == TRACE_HANDLER
    assert manager.enable_trace() is False
    assert manager.dispatch("EVENT [1] KEY_PRESS a") is True
    assert "event on main: ['a']" in caplog.text


def test_config_from_env():
    env = {
        "EMLINE_LOG": "DEBUG",
        "EMLINE_PLUGINS": os.pathsep.join(["one", "", "two"]),
        "EMLINE_HISTORY": "~/em-history",
        "EMLINE_DATA_HOME": "/srv/emline",
    }
    config = EmlineConfig.from_env(env)
    assert config.log_level == "DEBUG"
    assert config.plugins == ["one", "two"]
    assert config.history_path == Path("~/em-history").expanduser()
    assert config.data_root == Path("/srv/emline")


def test_config_from_empty_env():
    config = EmlineConfig.from_env({})
    assert config.log_level == "INFO"
    assert config.plugins == []
    assert config.history_path is None


def test_manager_builds_storage_for_instance(tmp_path):
    config = EmlineConfig(name="tabs", data_root=tmp_path)
    manager = EventManager.from_config(config, io.StringIO())
    assert manager.storage.root == tmp_path / "tabs"
    manager.storage.write("session", "open")
    assert (tmp_path / "tabs" / "data" / "session").read_text(encoding="utf-8") == "open"
    assert manager.requests.reply == manager.channel.reply
