"""Command-line entry point for unbound-ctl."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from .config import load_config
from .controller import ConfigController, PlanResult, configure_logging
from .exporter import settings_to_json, settings_to_yaml, write_settings
from .models import ServerSettings, UnboundCtlError, ValidationError
from .validation import validate_settings


def _build_parser() -> argparse.ArgumentParser:
    """Create the CLI parser."""
    parser = argparse.ArgumentParser(description="Edit the server: block of unbound.conf.")
    parser.add_argument("--log-level", help="Override log level (default from config).")
    parser.add_argument("--config", help="Path to unbound.conf (default from UNBOUND_CONFIG_PATH).")

    subparsers = parser.add_subparsers(dest="command", required=True)
    show_parser = subparsers.add_parser("show", help="Print the current server settings.")
    _register_format_argument(show_parser)

    plan_parser = subparsers.add_parser("plan", help="Show diff between desired and current settings.")
    _register_common_arguments(plan_parser)
    plan_parser.add_argument("--json", help="Optional path to write diff JSON.")

    apply_parser = subparsers.add_parser("apply", help="Write the desired settings to unbound.conf.")
    _register_common_arguments(apply_parser)
    apply_parser.add_argument("--yes", action="store_true", help="Skip confirmation prompt.")

    export_parser = subparsers.add_parser("export", help="Write the current settings as a desired-state file.")
    export_parser.add_argument("--output", required=True, help="Path to write the exported settings.")
    _register_format_argument(export_parser)

    subparsers.add_parser("validate", help="Check the current server settings.")
    return parser


def _register_format_argument(subparser: argparse.ArgumentParser) -> None:
    """Register the output format switch."""
    subparser.add_argument(
        "--format",
        choices=["yaml", "json"],
        default="yaml",
        help="Serialization format for the settings.",
    )


def _register_common_arguments(subparser: argparse.ArgumentParser) -> None:
    """Register arguments shared by plan/apply."""
    subparser.add_argument("--desired", required=True, help="Path to the desired-state YAML file.")
    subparser.add_argument(
        "-e",
        "--var",
        action="append",
        help="Template variable in KEY=VALUE form. Can be repeated.",
    )


def _parse_template_vars(values: list[str] | None) -> dict[str, str]:
    """Convert KEY=VALUE pairs into a dict."""
    result: dict[str, str] = {}
    if not values:
        return result
    for value in values:
        if "=" not in value:
            raise UnboundCtlError(f"Invalid template var '{value}', expected KEY=VALUE.")
        key, val = value.split("=", 1)
        result[key] = val
    return result


def _render_settings(settings: ServerSettings, fmt: str) -> str:
    """Serialise settings in the requested format."""
    if fmt == "json":
        return settings_to_json(settings)
    return settings_to_yaml(settings)


def _emit_diff(plan: PlanResult, json_path: str | None = None) -> None:
    """Print a human-friendly diff, optionally writing JSON."""
    diff = plan.diff
    print(f"Changed fields: {diff.total()}")
    for change in diff.changes:
        print(f" ~ {change.field}: {change.before!r} -> {change.after!r}")
    if json_path:
        payload = {
            "changes": [
                {"field": change.field, "before": change.before, "after": change.after} for change in diff.changes
            ],
        }
        Path(json_path).write_text(json.dumps(payload, indent=2), encoding="utf-8")
        print(f"Wrote diff JSON to {json_path}")


def _run_show(controller: ConfigController, args: argparse.Namespace) -> None:
    """Execute the show command."""
    loaded = controller.load()
    if loaded.error:
        print(f"Warning: {loaded.error}", file=sys.stderr)
    print(_render_settings(loaded.parsed.settings, args.format))


def _run_plan(controller: ConfigController, args: argparse.Namespace) -> PlanResult:
    """Execute the plan command."""
    template_vars = _parse_template_vars(args.var)
    plan_result = controller.plan(Path(args.desired), template_vars=template_vars)
    _emit_diff(plan_result, getattr(args, "json", None))
    if not plan_result.diff.has_changes():
        print("No changes detected.")
    return plan_result


def _run_apply(controller: ConfigController, args: argparse.Namespace) -> None:
    """Execute the apply command."""
    plan_result = _run_plan(controller, args)
    controller.apply(plan_result, assume_yes=args.yes)


def _run_export(controller: ConfigController, args: argparse.Namespace) -> None:
    """Execute the export command."""
    settings = controller.load().parsed.settings
    write_settings(Path(args.output), _render_settings(settings, args.format))
    print(f"Wrote settings to {args.output}")


def _run_validate(controller: ConfigController, args: argparse.Namespace) -> None:
    """Execute the validate command."""
    errors = validate_settings(controller.load().parsed.settings)
    if errors:
        raise ValidationError(" ".join(errors))
    print("Configuration is valid.")


COMMANDS = {
    "show": _run_show,
    "plan": _run_plan,
    "apply": _run_apply,
    "export": _run_export,
    "validate": _run_validate,
}


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)
    try:
        config = load_config(args.config)
        configure_logging(args.log_level or config.log_level)
        COMMANDS[args.command](ConfigController(config), args)
    except UnboundCtlError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(2)
    except Exception as exc:  # noqa: BLE001
        print(f"Unexpected error: {exc}", file=sys.stderr)
        sys.exit(3)


if __name__ == "__main__":
    main()
