"""
emline - line-protocol dispatcher for event-manager plugins.

The host writes one line per message; ``EVENT`` lines are notifications and
``REQUEST-<cookie>`` lines expect exactly one ``REPLY-<cookie>`` answer.
Each module covers one step of that exchange:

    parser.py      -> payload tokenizer (quotes and backslash escapes)
    template.py    -> host escaping and %-template expansion
    registry.py    -> priority-ordered event/request handler registries
    dispatcher.py  -> EVENT/REQUEST line grammar and routing
    channel.py     -> commands and replies back to the host
    plugins.py     -> loading handler modules
    storage.py     -> per-instance data directory for plugins
    manager.py     -> wiring of the above for one instance

Use ``python -m emline`` to run the line processor.
"""

from .channel import ChannelError, HostChannel  # noqa: F401
from .config import EmlineConfig  # noqa: F401
from .dispatcher import EVENT_RE, REQUEST_RE, LineDispatcher, dispatch  # noqa: F401
from .manager import EventManager  # noqa: F401
from .parser import tokenize  # noqa: F401
from .plugins import PluginError, load_plugin, load_plugins  # noqa: F401
from .storage import PluginStorage, StorageError  # noqa: F401
from .registry import (  # noqa: F401
    MATCH_ALL,
    EventRegistry,
    HandlerEntry,
    HandlerRegistry,
    MatchAll,
    MatchTopic,
    RequestRegistry,
    RequestResponse,
)
from .template import escape, expand  # noqa: F401

__all__ = [
    "ChannelError",
    "HostChannel",
    "EmlineConfig",
    "EVENT_RE",
    "REQUEST_RE",
    "LineDispatcher",
    "dispatch",
    "EventManager",
    "tokenize",
    "PluginError",
    "load_plugin",
    "load_plugins",
    "MATCH_ALL",
    "EventRegistry",
    "HandlerEntry",
    "HandlerRegistry",
    "MatchAll",
    "MatchTopic",
    "RequestRegistry",
    "RequestResponse",
    "PluginStorage",
    "StorageError",
    "escape",
    "expand",
]

__version__ = "0.1.0"
