"""Core data models used by unbound-ctl."""

from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from typing import Any

SERVER_HEADER = "server:"
INDENT = "    "

# Directive name -> ServerSettings attribute, in serialisation order.
BOOLEAN_DIRECTIVES: dict[str, str] = {
    "do-ip4": "do_ip4",
    "do-ip6": "do_ip6",
    "do-udp": "do_udp",
    "do-tcp": "do_tcp",
    "hide-identity": "hide_identity",
    "hide-version": "hide_version",
    "qname-minimisation": "qname_minimisation",
    "harden-dnssec-stripped": "harden_dnssec_stripped",
}

SCALAR_DIRECTIVES: dict[str, str] = {
    "verbosity": "verbosity",
    "port": "port",
}

LIST_DIRECTIVES: dict[str, str] = {
    "interface": "interfaces",
    "access-control": "access_controls",
}

RECOGNISED_DIRECTIVES = frozenset(SCALAR_DIRECTIVES) | frozenset(LIST_DIRECTIVES) | frozenset(BOOLEAN_DIRECTIVES)


@dataclass
class ServerSettings:
    """Typed view of the ``server:`` block."""

    verbosity: str = "1"
    port: str = "53"
    interfaces: list[str] = field(default_factory=list)
    access_controls: list[str] = field(default_factory=list)
    do_ip4: bool = True
    do_ip6: bool = True
    do_udp: bool = True
    do_tcp: bool = True
    hide_identity: bool = False
    hide_version: bool = False
    qname_minimisation: bool = True
    harden_dnssec_stripped: bool = True
    custom_server_options: str = ""

    def clone(self) -> ServerSettings:
        """Return a copy that shares no mutable state with this one."""
        return replace(
            self,
            interfaces=list(self.interfaces),
            access_controls=list(self.access_controls),
        )

    def as_dict(self) -> dict[str, Any]:
        """Return the settings as plain data in field order."""
        return {item.name: _copy_value(getattr(self, item.name)) for item in fields(self)}


def _copy_value(value: Any) -> Any:
    """Copy list values so callers cannot mutate settings through the result."""
    return list(value) if isinstance(value, list) else value


def default_settings() -> ServerSettings:
    """Return the all-defaults settings value."""
    return ServerSettings()


@dataclass
class ParsedConfig:
    """A document split around its ``server:`` block."""

    before: str
    after: str
    settings: ServerSettings


@dataclass(frozen=True)
class FieldChange:
    """A single settings field that differs between two states."""

    field: str
    before: Any
    after: Any


@dataclass
class SettingsDiff:
    """Field-level diff between two settings values."""

    changes: list[FieldChange] = field(default_factory=list)

    def has_changes(self) -> bool:
        """Return True when any field differs."""
        return bool(self.changes)

    def total(self) -> int:
        """Return the number of changed fields."""
        return len(self.changes)


class UnboundCtlError(Exception):
    """Base exception for unbound-ctl."""


class ConfigReadError(UnboundCtlError):
    """Raised when the configuration file cannot be read."""


class ConfigWriteError(UnboundCtlError):
    """Raised when the configuration file cannot be written or checked."""


class ValidationError(UnboundCtlError):
    """Raised when settings or a desired-state file are invalid."""
