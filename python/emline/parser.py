"""Tokenizer for event-manager protocol payloads."""

from __future__ import annotations

import re
from typing import List

# Whitespace separates tokens; a quoted region is kept whole as its own token.
_SPLIT_RE = re.compile(r"""(?:\s+|("(?:\\.|[^"])*?"|'(?:\\.|[^'])*?'))""")
_UNESCAPE_RE = re.compile(r"\\(.)", re.DOTALL)
QUOTE_CHARACTERS = "\"'"


def _strip_quotes(fragment: str) -> str:
    if len(fragment) >= 2 and fragment[0] in QUOTE_CHARACTERS and fragment[-1] == fragment[0]:
        return fragment[1:-1]
    return fragment


def _unescape(fragment: str) -> str:
    return _UNESCAPE_RE.sub(lambda match: match.group(1), fragment)


def tokenize(line: str) -> List[str]:
    """Split a payload into argv tokens.

    Quoted regions (``"..."`` or ``'...'``) may span whitespace and lose their
    outer quotes; ``\\x`` collapses to ``x`` in every token. Malformed quoting
    is left in place rather than rejected.
    """
    if not line:
        return []
    fragments = [fragment for fragment in _SPLIT_RE.split(line) if fragment]
    return [_unescape(_strip_quotes(fragment)) for fragment in fragments]


__all__ = ["QUOTE_CHARACTERS", "tokenize"]
