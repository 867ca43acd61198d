"""Diff utilities for server settings."""

from __future__ import annotations

from dataclasses import fields

from .models import FieldChange, ServerSettings, SettingsDiff


def diff_settings(current: ServerSettings, desired: ServerSettings) -> SettingsDiff:
    """Produce a field-level diff between current and desired settings."""
    diff = SettingsDiff()
    for item in fields(ServerSettings):
        before = getattr(current, item.name)
        after = getattr(desired, item.name)
        if before != after:
            diff.changes.append(FieldChange(field=item.name, before=before, after=after))
    return diff
