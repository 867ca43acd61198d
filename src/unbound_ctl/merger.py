"""Reassemble a whole document from its parts."""

from __future__ import annotations


def _with_newline(text: str) -> str:
    """Return ``text`` ending in exactly the line break it needs."""
    return text if text.endswith("\n") else f"{text}\n"


def merge_config(before: str, server_block: str, after: str) -> str:
    """Join the text before the block, the block and the text after it.

    The result always ends in a line break and the three parts are always
    separated by one.
    """
    result = ""
    if before:
        result += _with_newline(before)
    result += _with_newline(server_block)
    if after:
        result = _with_newline(result) + after
    return _with_newline(result)
