"""Value coercion helpers shared by the parser and serializer."""

from __future__ import annotations

import re
from typing import Iterable

TRUE_WORDS = frozenset({"yes", "true", "on"})
FALSE_WORDS = frozenset({"no", "false", "off"})

QUOTED_PATTERN = re.compile(r'^"(.*)"$')
LINE_BREAK_PATTERN = re.compile(r"\r?\n")


def parse_boolean(value: str | None, fallback: bool) -> bool:
    """Return the boolean spelled by ``value``, or ``fallback`` if it spells none."""
    if not value:
        return fallback
    lowered = value.lower()
    if lowered in TRUE_WORDS:
        return True
    if lowered in FALSE_WORDS:
        return False
    return fallback


def to_yes_no(flag: bool) -> str:
    """Encode a boolean the way unbound.conf spells it."""
    return "yes" if flag else "no"


def unquote(value: str) -> str:
    """Strip one pair of surrounding double quotes, if present."""
    match = QUOTED_PATTERN.match(value)
    return match.group(1) if match else value


def split_lines(text: str) -> list[str]:
    """Split on LF or CRLF line endings."""
    return LINE_BREAK_PATTERN.split(text)


def clean_list(values: Iterable[str]) -> list[str]:
    """Drop entries that are blank after trimming."""
    return [value for value in values if value.strip()]
