"""Startup wiring: registries, host channel and dispatcher in one place."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence, TextIO

from .channel import HostChannel
from .config import EmlineConfig
from .dispatcher import LineDispatcher
from .plugins import load_plugins
from .registry import MATCH_ALL, EventRegistry, RequestRegistry
from .storage import PluginStorage, default_data_root

LOGGER = logging.getLogger("emline.manager")

TRACE_HANDLER = "emline.trace"
TRACE_PRIORITY = -(2**31)


@dataclass
class EventManager:
    """Holds the process-lifetime state of one event-manager instance."""

    channel: HostChannel
    data_root: Optional[Path] = None
    events: EventRegistry = field(default_factory=EventRegistry)
    requests: RequestRegistry = field(init=False)
    storage: PluginStorage = field(init=False)
    dispatcher: LineDispatcher = field(init=False)
    plugins: List[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.requests = RequestRegistry(self.channel.reply)
        self.storage = PluginStorage(self.data_root or default_data_root(), self.channel.name)
        self.dispatcher = LineDispatcher(self.events, self.requests)

    @classmethod
    def from_config(cls, config: EmlineConfig, stream: TextIO) -> "EventManager":
        manager = cls(channel=HostChannel(stream, name=config.name), data_root=config.data_root)
        if config.trace:
            manager.enable_trace()
        if config.plugins:
            manager.load(config.plugins)
        return manager

    def load(self, specs: Sequence[str]) -> List[str]:
        loaded = load_plugins(specs, self.events, self.requests, self.channel, self.storage)
        self.plugins.extend(loaded)
        return loaded

    def enable_trace(self) -> bool:
        return self.events.add(TRACE_HANDLER, TRACE_PRIORITY, MATCH_ALL, _trace_event, self)

    def dispatch(self, line: str) -> bool:
        return self.dispatcher.dispatch(line)


def _trace_event(manager: EventManager, args: List[str]) -> None:
    LOGGER.info("event on %s: %s", manager.channel.name, args)


__all__ = ["EventManager", "TRACE_HANDLER", "TRACE_PRIORITY"]
