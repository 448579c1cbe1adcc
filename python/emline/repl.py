"""Interactive console that feeds hand-typed protocol lines to a manager."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from prompt_toolkit import PromptSession
from prompt_toolkit.history import FileHistory, History, InMemoryHistory
from prompt_toolkit.patch_stdout import patch_stdout

from .manager import EventManager

LOGGER = logging.getLogger("emline.repl")

PROMPT = "em> "


class EmlineREPL:
    """prompt_toolkit loop; a trailing backslash continues the line."""

    def __init__(self, manager: EventManager, *, history_path: Optional[Path] = None) -> None:
        self.manager = manager
        self.history_path = history_path

    def _history(self) -> History:
        if self.history_path is None:
            return InMemoryHistory()
        path = Path(self.history_path).expanduser()
        path.parent.mkdir(parents=True, exist_ok=True)
        return FileHistory(str(path))

    def run(self) -> int:
        session: PromptSession[str] = PromptSession(PROMPT, history=self._history())
        buffer: list[str] = []
        while True:
            try:
                with patch_stdout():
                    line = session.prompt()
            except (EOFError, KeyboardInterrupt):
                print()
                return 0
            if self._handle_multiline(buffer, line):
                continue
            payload = " ".join(buffer) if buffer else line
            buffer.clear()
            self.handle_line(payload)

    def handle_line(self, line: str) -> bool:
        if not line.strip():
            return False
        payload = line.rstrip("\r\n")
        try:
            handled = self.manager.dispatch(payload)
        except Exception as exc:
            LOGGER.exception("handler failed")
            print(f"Handler failed: {exc}")
            return False
        if not handled:
            print(f"(unhandled) {payload}")
        return handled

    def _handle_multiline(self, buffer: list[str], line: str) -> bool:
        stripped = line.rstrip()
        if stripped.endswith("\\"):
            buffer.append(stripped[:-1])
            return True
        if buffer:
            buffer.append(stripped)
        return False


__all__ = ["EmlineREPL", "PROMPT"]
