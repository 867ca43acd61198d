from __future__ import annotations

from pathlib import Path

import pytest

from unbound_ctl.config import AppConfig

SAMPLE_DOCUMENT = (
    "# global\n"
    "server:\n"
    "    verbosity: 2\n"
    "    interface: 127.0.0.1\n"
    "    do-ip4: yes\n"
    "    do-ip6: no\n"
    "remote-control:\n"
    "    control-enable: no"
)


@pytest.fixture
def sample_document() -> str:
    """A server block followed by an unrelated remote-control block."""
    return SAMPLE_DOCUMENT


@pytest.fixture
def app_config(tmp_path: Path) -> AppConfig:
    """Config pointing at a scratch unbound.conf with external tools disabled."""
    return AppConfig(
        config_path=tmp_path / "unbound.conf",
        checkconf_bin="",
        control_bin="",
        reload_after_apply=False,
        backup_on_apply=True,
        backup_suffix=".bak",
        log_level="DEBUG",
    )
