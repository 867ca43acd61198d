"""Render a ``server:`` block from settings."""

from __future__ import annotations

from .models import BOOLEAN_DIRECTIVES, INDENT, SERVER_HEADER, ServerSettings
from .values import split_lines, to_yes_no


def _directive(key: str, value: str) -> str:
    """Return an indented ``key: value`` line."""
    return f"{INDENT}{key}: {value}"


def _custom_lines(text: str) -> list[str]:
    """Re-indent custom option lines; blank lines stay empty.

    A single empty line separates them from the directives above. Text that
    already starts with a blank line (as parsed text read back from a file
    written here does) supplies that separator itself, and trailing blank
    lines are dropped, so a block read back and rendered again comes out
    unchanged.
    """
    lines = split_lines(text)
    while lines and not lines[-1].strip():
        lines.pop()
    if not lines:
        return []
    rendered = [] if not lines[0].strip() else [""]
    for line in lines:
        rendered.append(f"{INDENT}{line.lstrip()}" if line else "")
    return rendered


def build_server_block(settings: ServerSettings) -> str:
    """Return the ``server:`` block text for ``settings``.

    The layout is fixed: scalars, interfaces, the boolean switches, access
    control rules, then any custom options after a blank separator line.
    """
    lines = [SERVER_HEADER]
    if settings.verbosity:
        lines.append(_directive("verbosity", settings.verbosity))
    if settings.port:
        lines.append(_directive("port", settings.port))
    for interface in settings.interfaces:
        if interface.strip():
            lines.append(_directive("interface", interface.strip()))
    for key, attribute in BOOLEAN_DIRECTIVES.items():
        lines.append(_directive(key, to_yes_no(getattr(settings, attribute))))
    for rule in settings.access_controls:
        if rule.strip():
            lines.append(_directive("access-control", rule.strip()))
    lines.extend(_custom_lines(settings.custom_server_options))
    return "\n".join(lines)
