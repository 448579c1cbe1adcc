"""Plugin loading.

A plugin is either an importable module name (``pkg.handlers``) or a path to a
``.py`` file. Either way it must expose::

    def setup(events, requests, channel, storage) -> None

which registers its handlers on the two registries and keeps ``channel`` and
``storage`` around for talking to the host and keeping state on disk.
"""

from __future__ import annotations

import importlib
import importlib.util
import logging
from pathlib import Path
from types import ModuleType
from typing import Iterable, List

from .channel import HostChannel
from .registry import EventRegistry, RequestRegistry
from .storage import PluginStorage

LOGGER = logging.getLogger("emline.plugins")


class PluginError(RuntimeError):
    """Raised when a plugin cannot be imported or initialised."""

    def __init__(self, plugin: str, message: str) -> None:
        super().__init__(f"plugin {plugin}: {message}")
        self.plugin = plugin


def _is_path(spec: str) -> bool:
    return spec.endswith(".py") or "/" in spec or "\\" in spec


def _load_from_path(spec: str) -> ModuleType:
    path = Path(spec).expanduser()
    if ".." in path.parts:
        raise PluginError(spec, "invalid path")
    if not path.is_file():
        raise PluginError(spec, "file not found")
    module_name = f"emline_plugin_{path.stem}"
    module_spec = importlib.util.spec_from_file_location(module_name, path)
    if module_spec is None or module_spec.loader is None:
        raise PluginError(spec, "cannot build import spec")
    module = importlib.util.module_from_spec(module_spec)
    try:
        module_spec.loader.exec_module(module)
    except Exception as exc:
        raise PluginError(spec, f"import failed: {exc}") from exc
    return module


def _import(spec: str) -> ModuleType:
    if _is_path(spec):
        return _load_from_path(spec)
    try:
        return importlib.import_module(spec)
    except ImportError as exc:
        raise PluginError(spec, f"import failed: {exc}") from exc


def load_plugin(
    spec: str,
    events: EventRegistry,
    requests: RequestRegistry,
    channel: HostChannel,
    storage: PluginStorage,
) -> ModuleType:
    module = _import(spec)
    setup = getattr(module, "setup", None)
    if not callable(setup):
        raise PluginError(spec, "missing setup(events, requests, channel, storage)")
    try:
        setup(events, requests, channel, storage)
    except PluginError:
        raise
    except Exception as exc:
        raise PluginError(spec, f"setup failed: {exc}") from exc
    LOGGER.info("loaded plugin %s", module.__name__)
    return module


def load_plugins(
    specs: Iterable[str],
    events: EventRegistry,
    requests: RequestRegistry,
    channel: HostChannel,
    storage: PluginStorage,
) -> List[str]:
    """Load plugins in order; the first failure stops loading."""
    loaded: List[str] = []
    for spec in specs:
        module = load_plugin(spec, events, requests, channel, storage)
        loaded.append(module.__name__)
    return loaded


__all__ = ["PluginError", "load_plugin", "load_plugins"]
