"""Runtime configuration for the emline runner."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Mapping, Optional

from .storage import default_data_root

ENV_LOG = "EMLINE_LOG"
ENV_PLUGINS = "EMLINE_PLUGINS"
ENV_HISTORY = "EMLINE_HISTORY"


@dataclass
class EmlineConfig:
    name: str = "em"
    log_level: str = "INFO"
    plugins: List[str] = field(default_factory=list)
    trace: bool = False
    history_path: Optional[Path] = None
    data_root: Path = field(default_factory=default_data_root)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "EmlineConfig":
        env = os.environ if environ is None else environ
        plugins = [item for item in env.get(ENV_PLUGINS, "").split(os.pathsep) if item.strip()]
        history = env.get(ENV_HISTORY)
        return cls(
            log_level=env.get(ENV_LOG, "INFO"),
            plugins=plugins,
            history_path=Path(history).expanduser() if history else None,
            data_root=default_data_root(env),
        )


__all__ = ["ENV_HISTORY", "ENV_LOG", "ENV_PLUGINS", "EmlineConfig"]
