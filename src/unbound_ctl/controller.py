"""High-level orchestration for unbound-ctl."""

from __future__ import annotations

import logging
import shutil
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .config import AppConfig
from .diffing import diff_settings
from .merger import merge_config
from .models import (
    ConfigReadError,
    ConfigWriteError,
    ParsedConfig,
    ServerSettings,
    SettingsDiff,
    UnboundCtlError,
)
from .parser import parse_config
from .serializer import build_server_block
from .validation import clean_settings, ensure_valid
from .yaml_loader import load_desired_settings

LOG = logging.getLogger("unbound_ctl")


@dataclass
class LoadedConfig:
    """The parsed document plus the reason it could not be read, if any."""

    parsed: ParsedConfig
    error: str | None = None


@dataclass
class PlanResult:
    """Holds everything needed to apply a change."""

    current: ServerSettings
    desired: ServerSettings
    diff: SettingsDiff
    document: str


@dataclass
class EditSession:
    """Live settings being edited plus the baseline they started from."""

    before: str
    after: str
    baseline: ServerSettings
    settings: ServerSettings = field(init=False)

    def __post_init__(self) -> None:
        self.baseline = self.baseline.clone()
        self.settings = self.baseline.clone()

    @classmethod
    def from_parsed(cls, parsed: ParsedConfig) -> EditSession:
        """Start a session from a parsed document."""
        return cls(before=parsed.before, after=parsed.after, baseline=parsed.settings)

    def is_dirty(self) -> bool:
        """Return True when the live settings differ from the baseline."""
        return self.settings != self.baseline

    def reset(self) -> None:
        """Discard edits made since the last commit."""
        self.settings = self.baseline.clone()

    def render(self) -> str:
        """Return the whole document for the cleaned live settings."""
        cleaned = clean_settings(self.settings)
        return merge_config(self.before, build_server_block(cleaned), self.after)

    def commit(self) -> None:
        """Make the cleaned live settings the new baseline."""
        cleaned = clean_settings(self.settings)
        self.baseline = cleaned
        self.settings = cleaned.clone()


class ConfigController:
    """Coordinates reading, planning and writing the Unbound configuration."""

    def __init__(self, config: AppConfig):
        """Store configuration for subsequent runs."""
        self.config = config

    def read_document(self) -> str:
        """Return the raw configuration text."""
        path = self.config.config_path
        try:
            return path.read_text(encoding="utf-8", errors="surrogateescape")
        except OSError as exc:
            raise ConfigReadError(f"Failed to read {path}: {exc}") from exc

    def load(self) -> LoadedConfig:
        """Parse the configuration file, falling back to defaults when unreadable."""
        try:
            content = self.read_document()
        except ConfigReadError as exc:
            LOG.warning("%s; starting from default settings.", exc)
            return LoadedConfig(parsed=ParsedConfig(before="", after="", settings=ServerSettings()), error=str(exc))
        LOG.debug("Read %d bytes from %s", len(content), self.config.config_path)
        return LoadedConfig(parsed=parse_config(content))

    def session(self) -> EditSession:
        """Open an edit session on the current file.

        A file that exists but could not be read is never replaced.
        """
        loaded = self.load()
        if loaded.error and self.config.config_path.exists():
            raise ConfigReadError(loaded.error)
        return EditSession.from_parsed(loaded.parsed)

    def plan(self, desired_path: Path, template_vars: dict[str, Any] | None = None) -> PlanResult:
        """Compute the diff between a desired-state file and the current config."""
        session = self.session()
        session.settings = load_desired_settings(desired_path, base=session.baseline, template_vars=template_vars)
        current = clean_settings(session.baseline)
        desired = clean_settings(session.settings)
        ensure_valid(desired)
        return PlanResult(
            current=current,
            desired=desired,
            diff=diff_settings(current, desired),
            document=session.render(),
        )

    def apply(self, plan_result: PlanResult, assume_yes: bool = False) -> None:
        """Write the merged document, check it, and reload Unbound."""
        if not plan_result.diff.has_changes():
            LOG.info("No changes detected; nothing to apply.")
            return
        if not assume_yes and not _confirm(self.config.config_path):
            LOG.info("Apply aborted by user.")
            return
        self.save(plan_result.document)
        if self.config.reload_after_apply:
            _reload(self.config)
        LOG.info("Apply complete for %s", self.config.config_path)

    def save(self, document: str) -> None:
        """Persist ``document``, keeping a backup and checking the result."""
        path = self.config.config_path
        backup = _backup(self.config)
        _write_document(path, document)
        try:
            _maybe_run_checkconf(self.config)
        except UnboundCtlError:
            if backup is not None:
                LOG.warning("Restoring %s from %s", path, backup)
                shutil.copy2(backup, path)
            raise


def configure_logging(level: str) -> None:
    """Configure logging output."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


def _confirm(path: Path) -> bool:
    """Prompt the operator to confirm apply."""
    prompt = f"Write changes to {path}? [y/N]: "
    response = input(prompt).strip().lower()  # noqa: S322
    return response in {"y", "yes"}


def _backup(config: AppConfig) -> Path | None:
    """Copy the current file aside, returning the copy's path."""
    if not config.backup_on_apply or not config.config_path.exists():
        return None
    backup = config.backup_path()
    try:
        shutil.copy2(config.config_path, backup)
    except OSError as exc:
        raise ConfigWriteError(f"Failed to back up {config.config_path}: {exc}") from exc
    LOG.info("Backed up %s to %s", config.config_path, backup)
    return backup


def _write_document(path: Path, document: str) -> None:
    """Write the merged configuration file."""
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(document, encoding="utf-8", errors="surrogateescape")
    except OSError as exc:
        raise ConfigWriteError(f"Failed to write {path}: {exc}") from exc
    LOG.info("Wrote configuration to %s", path)


def _maybe_run_checkconf(config: AppConfig) -> None:
    """Invoke unbound-checkconf for validation if configured."""
    if not config.checkconf_bin:
        LOG.debug("Skipping unbound-checkconf validation (no binary configured).")
        return
    cmd = [config.checkconf_bin, str(config.config_path)]
    LOG.info("Running %s", " ".join(cmd))
    try:
        subprocess.run(cmd, check=True, capture_output=True, text=True)
    except FileNotFoundError as exc:
        raise ConfigWriteError(f"{config.checkconf_bin} not found; set UNBOUND_CHECKCONF_BIN to '' to skip.") from exc
    except subprocess.CalledProcessError as exc:
        detail = (exc.stderr or exc.stdout or "").strip()
        raise ConfigWriteError(f"unbound-checkconf rejected {config.config_path}: {detail}") from exc


def _reload(config: AppConfig) -> None:
    """Reload the resolver via unbound-control."""
    if not config.control_bin:
        raise UnboundCtlError("unbound-control binary not configured; cannot reload.")
    cmd = [config.control_bin, "reload"]
    LOG.info("Running %s", " ".join(cmd))
    try:
        subprocess.run(cmd, check=True)
    except (OSError, subprocess.CalledProcessError) as exc:
        raise UnboundCtlError(f"Reload failed: {exc}") from exc
