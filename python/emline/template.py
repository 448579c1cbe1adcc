"""Host command escaping and template expansion."""

from __future__ import annotations

from typing import Optional, Sequence, Tuple

# (character, repeat count); backslash must stay first.
ESCAPE_LEVELS: Tuple[Tuple[str, int], ...] = (
    ("\\", 3),
    ("'", 2),
    ('"', 2),
    ("@", 1),
)


def escape(value: Optional[str]) -> str:
    """Escalate special characters so ``value`` survives the host's re-parse.

    Each rule only touches the first occurrence of its character.
    """
    if value is None:
        return ""
    text = str(value)
    for character, level in ESCAPE_LEVELS:
        text = text.replace(character, character * level, 1)
    return text


def _positional(args: Sequence[str], index: int) -> Optional[str]:
    if 0 <= index < len(args):
        return args[index]
    return None


def expand(template: str, args: Sequence[str]) -> str:
    """Expand ``%s``, ``%r``, ``%1``-``%9`` and ``%%`` in ``template``.

    ``%s`` joins the arguments verbatim, ``%r`` joins, escapes and single-quotes
    them, ``%N`` escapes the N-th argument. Any other character after ``%`` is
    copied literally, and a dangling ``%`` at the end is dropped.
    """
    parts: list[str] = []
    length = len(template)
    idx = 0
    while idx < length:
        char = template[idx]
        idx += 1
        if char != "%":
            parts.append(char)
            continue
        if idx == length:
            break
        spec = template[idx]
        idx += 1
        if spec == "s":
            parts.append(" ".join(args))
        elif spec == "r":
            parts.append("'" + escape(" ".join(args)) + "'")
        elif spec in "123456789":
            parts.append(escape(_positional(args, int(spec) - 1)))
        else:
            parts.append(spec)
    return "".join(parts)


__all__ = ["ESCAPE_LEVELS", "escape", "expand"]
