"""emline CLI entry point."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Iterable, List, Optional, TextIO

from .channel import ChannelError
from .config import EmlineConfig
from .manager import EventManager
from .plugins import PluginError
from .repl import EmlineREPL
from .storage import StorageError

LOG = logging.getLogger("emline.cli")


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def build_arg_parser(defaults: Optional[EmlineConfig] = None) -> argparse.ArgumentParser:
    defaults = defaults or EmlineConfig()
    parser = argparse.ArgumentParser(description="Event-manager line protocol runner")
    parser.add_argument("file", nargs="?", type=Path, help="Read protocol lines from FILE instead of stdin")
    parser.add_argument("--name", default=defaults.name, help="Instance name used in log lines")
    parser.add_argument("--log-level", default=defaults.log_level, help="Logging level (default INFO)")
    parser.add_argument(
        "-p",
        "--plugin",
        dest="plugins",
        action="append",
        default=list(defaults.plugins),
        help="Plugin module or .py file exposing setup(events, requests, channel, storage); repeatable",
    )
    parser.add_argument(
        "--data-root",
        type=Path,
        default=defaults.data_root,
        help="Directory holding per-instance plugin data (default EMLINE_DATA_HOME or the XDG data dir)",
    )
    parser.add_argument("--trace", action="store_true", help="Log every dispatched event")
    parser.add_argument("-c", "--command", help="Dispatch a single protocol line and exit")
    parser.add_argument("-i", "--interactive", action="store_true", help="Type protocol lines at a prompt")
    parser.add_argument(
        "--history",
        type=Path,
        default=defaults.history_path,
        help="Console history file (interactive mode)",
    )
    return parser


def main(argv: List[str] | None = None, *, stdout: Optional[TextIO] = None, stdin: Optional[TextIO] = None) -> int:
    parser = build_arg_parser(EmlineConfig.from_env())
    args = parser.parse_args(argv)
    _configure_logging(args.log_level)
    config = EmlineConfig(
        name=args.name,
        log_level=args.log_level,
        plugins=args.plugins,
        trace=args.trace,
        history_path=args.history,
        data_root=args.data_root,
    )
    try:
        manager = EventManager.from_config(config, stdout or sys.stdout)
    except (PluginError, StorageError) as exc:
        LOG.error("%s", exc)
        return 1
    try:
        if args.command:
            return _run_single_line(manager, args.command)
        if args.interactive:
            return EmlineREPL(manager, history_path=config.history_path).run()
        if args.file:
            with args.file.open("r", encoding="utf-8") as handle:
                return _run_stream(manager, handle)
        return _run_stream(manager, stdin or sys.stdin)
    except ChannelError as exc:
        LOG.error("%s", exc)
        return 1


def _run_single_line(manager: EventManager, line: str) -> int:
    try:
        handled = manager.dispatch(line)
    except ChannelError:
        raise
    except Exception:
        LOG.exception("handler failed")
        return 1
    if not handled:
        LOG.warning("line not handled: %s", line)
    return 0


def _run_stream(manager: EventManager, lines: Iterable[str]) -> int:
    failures = 0
    for raw in lines:
        line = raw.rstrip("\r\n")
        if not line:
            continue
        try:
            manager.dispatch(line)
        except ChannelError:
            raise
        except Exception:
            failures += 1
            LOG.exception("handler failed on line: %s", line)
    return 1 if failures else 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
