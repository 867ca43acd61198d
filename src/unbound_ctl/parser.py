"""Split an unbound.conf document around its ``server:`` block."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Union

from .models import (
    BOOLEAN_DIRECTIVES,
    LIST_DIRECTIVES,
    RECOGNISED_DIRECTIVES,
    SCALAR_DIRECTIVES,
    ParsedConfig,
    ServerSettings,
)
from .values import parse_boolean, split_lines, unquote

HEADER_PATTERN = re.compile(r"^\s*server\s*:\s*$", re.IGNORECASE)
DIRECTIVE_PATTERN = re.compile(r"^([A-Za-z0-9_-]+)\s*:\s*(.*)$")


class BlockState(Enum):
    """Position of the scanner relative to the managed block."""

    BEFORE_BLOCK = "before"
    IN_BLOCK = "in"
    AFTER_BLOCK = "after"


@dataclass(frozen=True)
class Blank:
    """An empty or whitespace-only body line."""


@dataclass(frozen=True)
class Comment:
    """A body line starting with ``#``."""

    text: str


@dataclass(frozen=True)
class Directive:
    """A recognised ``key: value`` body line."""

    key: str
    value: str


@dataclass(frozen=True)
class Unrecognized:
    """Any other body line, kept verbatim (trimmed)."""

    text: str


BodyLine = Union[Blank, Comment, Directive, Unrecognized]


def ends_block(line: str) -> bool:
    """Return True when ``line`` starts a new top-level statement."""
    return bool(line) and not line[0].isspace() and not line.startswith("#")


def next_state(state: BlockState, line: str) -> BlockState:
    """Return the scanner state after reading ``line``."""
    if state is BlockState.BEFORE_BLOCK and HEADER_PATTERN.match(line):
        return BlockState.IN_BLOCK
    if state is BlockState.IN_BLOCK and ends_block(line):
        return BlockState.AFTER_BLOCK
    return state


def split_document(content: str) -> tuple[list[str], list[str], list[str]]:
    """Return the before, body and after lines of ``content``.

    The header line itself belongs to none of the three lists. A document
    without a header is returned entirely as before lines.
    """
    before: list[str] = []
    body: list[str] = []
    after: list[str] = []
    state = BlockState.BEFORE_BLOCK
    for line in split_lines(content):
        previous, state = state, next_state(state, line)
        if previous is BlockState.BEFORE_BLOCK and state is BlockState.IN_BLOCK:
            continue
        if state is BlockState.BEFORE_BLOCK:
            before.append(line)
        elif state is BlockState.IN_BLOCK:
            body.append(line)
        else:
            after.append(line)
    return before, body, after


def classify_line(raw: str) -> BodyLine:
    """Classify a single body line."""
    trimmed = raw.strip()
    if not trimmed:
        return Blank()
    if trimmed.startswith("#"):
        return Comment(trimmed)
    match = DIRECTIVE_PATTERN.match(trimmed)
    if not match or match.group(1) not in RECOGNISED_DIRECTIVES:
        return Unrecognized(trimmed)
    return Directive(key=match.group(1), value=unquote(match.group(2)))


def _apply_directive(settings: ServerSettings, directive: Directive) -> None:
    """Fold a recognised directive into ``settings``."""
    key, value = directive.key, directive.value
    if key in SCALAR_DIRECTIVES:
        setattr(settings, SCALAR_DIRECTIVES[key], value)
    elif key in LIST_DIRECTIVES:
        getattr(settings, LIST_DIRECTIVES[key]).append(value)
    else:
        attribute = BOOLEAN_DIRECTIVES[key]
        setattr(settings, attribute, parse_boolean(value, getattr(settings, attribute)))


def _custom_text(lines: Iterable[BodyLine]) -> str:
    """Rebuild the custom options text from the non-directive lines."""
    kept: list[str] = []
    for line in lines:
        if isinstance(line, Blank):
            kept.append("")
        elif isinstance(line, (Comment, Unrecognized)):
            kept.append(line.text)
    return "\n".join(kept)


def settings_from_body(body: Iterable[str]) -> ServerSettings:
    """Build settings from the raw lines inside the block."""
    classified = [classify_line(raw) for raw in body]
    settings = ServerSettings()
    for line in classified:
        if isinstance(line, Directive):
            _apply_directive(settings, line)
    settings.custom_server_options = _custom_text(classified)
    return settings


def parse_config(content: str) -> ParsedConfig:
    """Parse a whole unbound.conf document.

    Never raises. Everything before the ``server:`` header and everything
    from the first top-level statement after it is kept verbatim; the lines
    in between become a :class:`ServerSettings`.
    """
    before, body, after = split_document(content)
    return ParsedConfig(
        before="\n".join(before),
        after="\n".join(after),
        settings=settings_from_body(body),
    )
