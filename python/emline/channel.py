"""Outgoing side of the protocol: commands, replies and log lines."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Any, TextIO

from .template import escape

LOGGER = logging.getLogger("emline.channel")


class ChannelError(RuntimeError):
    """Raised when a message cannot be written to the host."""


@dataclass
class HostChannel:
    """Writes newline-terminated messages to the host stream."""

    stream: TextIO
    name: str = "em"
    _lock: threading.Lock = field(init=False, default_factory=threading.Lock, repr=False)

    def send(self, command: str) -> None:
        self._write(f"{command}\n")

    def reply(self, cookie: str, value: Any) -> None:
        """Answer request ``cookie``; matches the ``reply(cookie, value)`` hook."""
        self._write(f"REPLY-{cookie} '{escape(str(value))}'\n")

    def log(self, message: str) -> None:
        LOGGER.info("EM %s: %s", self.name, message)

    def _write(self, message: str) -> None:
        try:
            with self._lock:
                self.stream.write(message)
                self.stream.flush()
        except (OSError, ValueError) as exc:
            raise ChannelError(f"Failed to send message to host: {exc}") from exc


__all__ = ["ChannelError", "HostChannel"]
