"""Route host protocol lines to the event and request registries."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Iterable, Optional

from .parser import tokenize
from .registry import EventRegistry, RequestRegistry

LOGGER = logging.getLogger("emline.dispatcher")

EVENT_RE = re.compile(r"^EVENT \[[^\]]*\] (.*)$")
REQUEST_RE = re.compile(r"^REQUEST-([^ ]+) \[[^\]]*\] (.*)$")


def dispatch(
    line: str,
    events: Optional[EventRegistry] = None,
    requests: Optional[RequestRegistry] = None,
) -> bool:
    """Match ``line`` against the EVENT then REQUEST grammar and dispatch it.

    Event payloads are tokenized and handed over whole; the first token is the
    event name. Request lines forward ``[cookie, *tokens]`` so the first
    payload token names the request. Returns False when nothing matched or
    the matching registry was not supplied.
    """
    if events is not None:
        match = EVENT_RE.match(line)
        if match is not None:
            return events.on_event(tokenize(match.group(1)))
    if requests is not None:
        match = REQUEST_RE.match(line)
        if match is not None:
            return requests.on_request([match.group(1)] + tokenize(match.group(2)))
    LOGGER.debug("unhandled line: %r", line)
    return False


@dataclass
class LineDispatcher:
    """Binds a pair of registries to the line grammar."""

    events: Optional[EventRegistry] = None
    requests: Optional[RequestRegistry] = None

    def dispatch(self, line: str) -> bool:
        return dispatch(line.rstrip("\r\n"), self.events, self.requests)

    def feed(self, lines: Iterable[str]) -> int:
        """Dispatch every line; return how many were handled."""
        handled = 0
        for line in lines:
            if self.dispatch(line):
                handled += 1
        return handled


__all__ = ["EVENT_RE", "REQUEST_RE", "LineDispatcher", "dispatch"]
