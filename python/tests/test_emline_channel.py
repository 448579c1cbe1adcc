"""Tests for messages written back to the host."""

from __future__ import annotations

import io
import logging

import pytest

from emline.channel import ChannelError, HostChannel
from emline.registry import RequestRegistry


def test_send_writes_line():
    stream = io.StringIO()
    channel = HostChannel(stream)
    channel.send("set uri = http://example.org")
    assert stream.getvalue() == "set uri = http://example.org\n"


def test_reply_escapes_value():
    stream = io.StringIO()
    HostChannel(stream).reply("7", "it's")
    assert stream.getvalue() == "REPLY-7 'it''s'\n"


def test_reply_stringifies_value():
    stream = io.StringIO()
    HostChannel(stream).reply("8", 42)
    assert stream.getvalue() == "REPLY-8 '42'\n"


def test_channel_as_request_reply_hook():
    stream = io.StringIO()
    channel = HostChannel(stream)
    requests = RequestRegistry(channel.reply)
    requests.add("ping", 0, "PING", lambda ctx, response: setattr(response, "response", "pong"))
    assert requests.dispatch_request("5", "PING", []) is True
    assert stream.getvalue() == "REPLY-5 'pong'\n"


def test_log_uses_instance_name(caplog):
    caplog.set_level(logging.INFO, logger="emline.channel")
    HostChannel(io.StringIO(), name="adblock").log("ready")
    assert "EM adblock: ready" in caplog.text


def test_closed_stream_raises_channel_error():
    stream = io.StringIO()
    stream.close()
    with pytest.raises(ChannelError) as excinfo:
        HostChannel(stream).send("noop")
    assert isinstance(excinfo.value.__cause__, ValueError)
