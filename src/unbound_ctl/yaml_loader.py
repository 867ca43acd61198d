"""Load and validate desired-state YAML files."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from jinja2 import Environment, FileSystemLoader, StrictUndefined
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from .models import ServerSettings, ValidationError


def _alias(name: str) -> AliasChoices:
    """Accept both the attribute name and the unbound.conf directive spelling."""
    return AliasChoices(name, name.replace("_", "-"))


class ServerSettingsSpec(BaseModel):
    """Schema for a desired ``server:`` block. Omitted fields are left alone."""

    model_config = ConfigDict(extra="forbid")

    verbosity: str | None = None
    port: str | None = None
    interfaces: list[str] | None = Field(default=None, validation_alias=AliasChoices("interfaces", "interface"))
    access_controls: list[str] | None = Field(
        default=None,
        validation_alias=AliasChoices("access_controls", "access-control"),
    )
    do_ip4: bool | None = Field(default=None, validation_alias=_alias("do_ip4"))
    do_ip6: bool | None = Field(default=None, validation_alias=_alias("do_ip6"))
    do_udp: bool | None = Field(default=None, validation_alias=_alias("do_udp"))
    do_tcp: bool | None = Field(default=None, validation_alias=_alias("do_tcp"))
    hide_identity: bool | None = Field(default=None, validation_alias=_alias("hide_identity"))
    hide_version: bool | None = Field(default=None, validation_alias=_alias("hide_version"))
    qname_minimisation: bool | None = Field(default=None, validation_alias=_alias("qname_minimisation"))
    harden_dnssec_stripped: bool | None = Field(default=None, validation_alias=_alias("harden_dnssec_stripped"))
    custom_server_options: str | None = Field(
        default=None,
        validation_alias=AliasChoices("custom_server_options", "custom"),
    )

    @field_validator("verbosity", "port", mode="before")
    @classmethod
    def _number_to_text(cls, value: Any) -> Any:
        """Keep numeric scalars as text, the way they appear in unbound.conf."""
        if isinstance(value, bool):
            raise ValueError("expected a number, not a boolean")
        if isinstance(value, int):
            return str(value)
        return value

    @field_validator("interfaces", "access_controls", mode="before")
    @classmethod
    def _single_to_list(cls, value: Any) -> Any:
        """Allow a single string where a list is expected."""
        if isinstance(value, str):
            return [value]
        return value


def _render_yaml(path: Path, extra_context: dict[str, Any] | None = None) -> str:
    """Render a YAML file through Jinja2."""
    env = Environment(
        loader=FileSystemLoader(str(path.parent)),
        undefined=StrictUndefined,
        autoescape=False,
        keep_trailing_newline=True,
    )
    template = env.get_template(path.name)
    context = {"env": os.environ}
    if extra_context:
        context.update(extra_context)
    return template.render(**context)


def apply_spec(spec: ServerSettingsSpec, base: ServerSettings | None = None) -> ServerSettings:
    """Overlay the fields set in ``spec`` on a copy of ``base``."""
    settings = base.clone() if base is not None else ServerSettings()
    for name, value in spec.model_dump(exclude_none=True).items():
        setattr(settings, name, value)
    return settings


def load_desired_settings(
    path: Path,
    base: ServerSettings | None = None,
    template_vars: dict[str, Any] | None = None,
) -> ServerSettings:
    """Load a desired-state YAML file and turn it into settings."""
    try:
        rendered = _render_yaml(path, template_vars)
    except Exception as exc:  # noqa: BLE001
        raise ValidationError(f"Failed to render {path}: {exc}") from exc
    try:
        data = yaml.safe_load(rendered) or {}
    except yaml.YAMLError as exc:  # noqa: BLE001
        raise ValidationError(f"Failed to parse YAML: {exc}") from exc
    if not isinstance(data, dict):
        raise ValidationError("Desired-state YAML must be a mapping.")
    # Allow the block to be nested under a top-level "server" key.
    if set(data) == {"server"} and isinstance(data["server"], dict):
        data = data["server"]

    try:
        spec = ServerSettingsSpec.model_validate(data)
    except Exception as exc:  # noqa: BLE001
        raise ValidationError(f"YAML validation error: {exc}") from exc
    return apply_spec(spec, base)
