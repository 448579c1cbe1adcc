"""Priority-ordered handler registries for events and requests."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterator, List, Optional, Sequence, Tuple, Union

LOGGER = logging.getLogger("emline.registry")


@dataclass(frozen=True)
class MatchAll:
    """Filter accepting every topic."""

    def matches(self, topic: Optional[str]) -> bool:
        return True

    def __str__(self) -> str:
        return "*"


@dataclass(frozen=True)
class MatchTopic:
    """Filter accepting a single event or request name."""

    name: str

    def matches(self, topic: Optional[str]) -> bool:
        return topic == self.name

    def __str__(self) -> str:
        return self.name


Filter = Union[MatchAll, MatchTopic]
MATCH_ALL = MatchAll()

EventCallback = Callable[[Any, List[str]], Any]
RequestCallback = Callable[[Any, "RequestResponse"], Any]
ReplyFn = Callable[[str, Any], Any]


def coerce_filter(value: Union[Filter, str, bool]) -> Filter:
    """Accept ``True`` or a bare name where a filter is expected."""
    if isinstance(value, (MatchAll, MatchTopic)):
        return value
    if value is True:
        return MATCH_ALL
    if isinstance(value, str):
        return MatchTopic(value)
    raise TypeError(f"unsupported handler filter: {value!r}")


@dataclass
class HandlerEntry:
    name: str
    priority: int
    filter: Filter
    callback: Callable[..., Any]
    context: Any = None


@dataclass
class RequestResponse:
    """Per-request scratch object handed to every matching handler."""

    request: Optional[str]
    args: List[str] = field(default_factory=list)
    kwargs: Dict[str, Any] = field(default_factory=dict)
    response: Any = None

    @property
    def answered(self) -> bool:
        return self.response is not None


class HandlerRegistry:
    """Named handlers kept sorted by ascending priority.

    Equal priorities keep their insertion order. ``_order`` and ``_entries``
    always hold the same set of names.
    """

    kind = "handler"

    def __init__(self) -> None:
        self._entries: Dict[str, HandlerEntry] = {}
        self._order: List[Tuple[str, int]] = []

    def add(
        self,
        name: str,
        priority: int,
        filter: Union[Filter, str, bool],
        callback: Callable[..., Any],
        context: Any = None,
    ) -> bool:
        if name in self._entries:
            LOGGER.debug("%s %r already registered", self.kind, name)
            return False
        try:
            handler_filter = coerce_filter(filter)
            handler_priority = int(priority)
        except (TypeError, ValueError) as exc:
            LOGGER.debug("%s %r rejected: %s", self.kind, name, exc)
            return False
        self._entries[name] = HandlerEntry(
            name=name,
            priority=handler_priority,
            filter=handler_filter,
            callback=callback,
            context=context,
        )
        order = self._order + [(name, handler_priority)]
        order.sort(key=lambda item: item[1])
        self._order = order
        return True

    def remove(self, name: str) -> bool:
        if name not in self._entries:
            return False
        del self._entries[name]
        self._order = [item for item in self._order if item[0] != name]
        return True

    def get(self, name: str) -> Optional[HandlerEntry]:
        return self._entries.get(name)

    def names(self) -> List[str]:
        return [name for name, _ in self._order]

    def matching(self, topic: Optional[str]) -> Iterator[HandlerEntry]:
        """Yield entries whose filter accepts ``topic``, lowest priority first."""
        for name, _ in list(self._order):
            entry = self._entries.get(name)
            if entry is None:
                continue
            if entry.filter.matches(topic):
                yield entry

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __len__(self) -> int:
        return len(self._entries)


class EventRegistry(HandlerRegistry):
    kind = "event handler"

    def dispatch_event(self, topic: Optional[str], args: Sequence[str] = ()) -> bool:
        """Invoke every handler matching ``topic`` as ``callback(context, args)``.

        Returns True when at least one handler ran. A raising handler aborts
        the remaining ones.
        """
        ran = False
        for entry in self.matching(topic):
            entry.callback(entry.context, list(args))
            ran = True
        return ran

    def on_event(self, tokens: Sequence[str]) -> bool:
        """Dispatch a tokenized event line; the first token names the event."""
        if not tokens:
            return self.dispatch_event(None, [])
        return self.dispatch_event(tokens[0], tokens[1:])


class RequestRegistry(HandlerRegistry):
    kind = "request handler"

    def __init__(self, reply: ReplyFn) -> None:
        super().__init__()
        self.reply = reply

    def dispatch_request(self, cookie: str, request: Optional[str], args: Sequence[str] = ()) -> bool:
        """Run matching handlers and deliver the last response set, if any."""
        response = RequestResponse(request=request, args=list(args))
        for entry in self.matching(request):
            entry.callback(entry.context, response)
        if not response.answered:
            LOGGER.debug("request %r (cookie %s) left unanswered", request, cookie)
            return False
        self.reply(cookie, response.response)
        return True

    def on_request(self, tokens: Sequence[str]) -> bool:
        """Dispatch ``[cookie, request, *args]`` as produced by the line dispatcher."""
        if not tokens:
            return False
        cookie = tokens[0]
        request = tokens[1] if len(tokens) > 1 else None
        return self.dispatch_request(cookie, request, tokens[2:])


__all__ = [
    "EventCallback",
    "EventRegistry",
    "Filter",
    "HandlerEntry",
    "HandlerRegistry",
    "MATCH_ALL",
    "MatchAll",
    "MatchTopic",
    "ReplyFn",
    "RequestCallback",
    "RequestRegistry",
    "RequestResponse",
    "coerce_filter",
]
