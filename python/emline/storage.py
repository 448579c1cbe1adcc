"""Per-instance file store handed to plugins.

Everything lives under ``<data root>/<instance name>/``:

    data/      read / write / exists / mkdir / unlink
    content/   load (files shipped alongside the plugin, read-only here)

Paths are relative to those directories; absolute paths and ``..``
components are refused.
"""

from __future__ import annotations

import os
import shutil
from pathlib import Path, PurePosixPath, PureWindowsPath
from typing import Mapping, Optional

ENV_DATA_HOME = "EMLINE_DATA_HOME"


class StorageError(RuntimeError):
    """Raised when a storage path is invalid or the filesystem call fails."""


def valid_path(path: str) -> bool:
    if PureWindowsPath(path).drive:
        return False
    parts = PurePosixPath(path.replace("\\", "/")).parts
    if not parts or parts[0] == "/":
        return False
    return ".." not in parts


def default_data_root(environ: Optional[Mapping[str, str]] = None) -> Path:
    env = os.environ if environ is None else environ
    explicit = env.get(ENV_DATA_HOME)
    if explicit:
        return Path(explicit).expanduser()
    xdg = env.get("XDG_DATA_HOME")
    base = Path(xdg).expanduser() if xdg else Path.home() / ".local" / "share"
    return base / "emline" / "em"


class PluginStorage:
    """Sandboxed data and content directories for one instance."""

    def __init__(self, root: Path | str, name: str) -> None:
        if not valid_path(name):
            raise StorageError(f"Invalid instance name: {name}")
        self.root = Path(root).expanduser() / name
        self.name = name

    @property
    def data_dir(self) -> Path:
        return self.root / "data"

    @property
    def content_dir(self) -> Path:
        return self.root / "content"

    def _resolve(self, base: Path, path: str) -> Path:
        if not valid_path(path):
            raise StorageError(f"Invalid path given: {path}")
        return base / path

    # ----------------------------------------------------------------- public API

    def load(self, path: str) -> str:
        return self._read(self._resolve(self.content_dir, path))

    def read(self, path: str) -> str:
        return self._read(self._resolve(self.data_dir, path))

    def write(self, path: str, content: str) -> None:
        target = self._resolve(self.data_dir, path)
        tmp_path = target.with_name(target.name + ".tmp")
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(content, encoding="utf-8")
            tmp_path.replace(target)
        except OSError as exc:
            raise StorageError(f"Failure when writing {target}: {exc}") from exc

    def exists(self, path: str) -> bool:
        return self._resolve(self.data_dir, path).exists()

    def mkdir(self, path: str) -> None:
        target = self._resolve(self.data_dir, path)
        try:
            target.mkdir(mode=0o750, parents=True, exist_ok=True)
        except OSError as exc:
            raise StorageError(f"Failed to create directory {target}: {exc}") from exc

    def unlink(self, path: str, recursive: bool = False) -> None:
        """Remove a file or directory; a missing path is not an error."""
        target = self._resolve(self.data_dir, path)
        try:
            if not target.exists():
                return
            if not target.is_dir():
                target.unlink()
            elif recursive:
                shutil.rmtree(target)
            elif any(target.iterdir()):
                raise StorageError(f"Not removing a non-empty directory: {target}")
            else:
                target.rmdir()
        except OSError as exc:
            raise StorageError(f"Failed to remove {target}: {exc}") from exc

    def _read(self, target: Path) -> str:
        try:
            return target.read_text(encoding="utf-8")
        except OSError as exc:
            raise StorageError(f"Failure when reading {target}: {exc}") from exc


__all__ = ["ENV_DATA_HOME", "PluginStorage", "StorageError", "default_data_root", "valid_path"]
