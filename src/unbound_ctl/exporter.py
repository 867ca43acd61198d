"""Utilities to serialise settings into declarative formats."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import yaml

from .models import ServerSettings


def settings_to_dict(settings: ServerSettings) -> dict[str, Any]:
    """Create a dictionary describing the settings."""
    data = settings.as_dict()
    if not data["custom_server_options"]:
        del data["custom_server_options"]
    return data


def settings_to_yaml(settings: ServerSettings) -> str:
    """Return YAML representation of the settings."""
    return yaml.safe_dump(settings_to_dict(settings), sort_keys=False)


def settings_to_json(settings: ServerSettings) -> str:
    """Return JSON representation of the settings."""
    return json.dumps(settings_to_dict(settings), indent=2)


def write_settings(path: Path, content: str) -> None:
    """Write content to the given path, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
