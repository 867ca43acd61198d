"""Environment-driven configuration loader."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

DEFAULT_CONFIG_PATH = "/etc/unbound/unbound.conf"


@dataclass(frozen=True)
class AppConfig:
    """Application-wide configuration values."""

    config_path: Path
    checkconf_bin: str
    control_bin: str
    reload_after_apply: bool
    backup_on_apply: bool
    backup_suffix: str
    log_level: str

    def backup_path(self) -> Path:
        """Return where the previous config is kept during apply."""
        return self.config_path.with_name(self.config_path.name + self.backup_suffix)


def _parse_bool(value: str | None, default: bool = False) -> bool:
    """Return a boolean parsed from a string."""
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "y", "on"}


def load_config(config_path: str | None = None) -> AppConfig:
    """Load configuration values from the environment (and .env)."""
    load_dotenv()
    path = Path(config_path or os.getenv("UNBOUND_CONFIG_PATH", DEFAULT_CONFIG_PATH))
    backup_on_apply = _parse_bool(os.getenv("BACKUP_ON_APPLY"), default=True)
    backup_suffix = os.getenv("BACKUP_SUFFIX", ".bak")
    if backup_on_apply and not backup_suffix:
        raise ValueError("BACKUP_SUFFIX must not be empty when BACKUP_ON_APPLY is enabled.")

    return AppConfig(
        config_path=path,
        checkconf_bin=os.getenv("UNBOUND_CHECKCONF_BIN", "unbound-checkconf"),
        control_bin=os.getenv("UNBOUND_CONTROL_BIN", "unbound-control"),
        reload_after_apply=_parse_bool(os.getenv("RELOAD_AFTER_APPLY", "false")),
        backup_on_apply=backup_on_apply,
        backup_suffix=backup_suffix,
        log_level=os.getenv("LOG_LEVEL", "INFO"),
    )
