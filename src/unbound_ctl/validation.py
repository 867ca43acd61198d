"""Input checks applied before settings are written back."""

from __future__ import annotations

from .models import ServerSettings, ValidationError
from .values import clean_list

PORT_RANGE = (1, 65535)
VERBOSITY_RANGE = (0, 5)


def _in_range(value: str, bounds: tuple[int, int]) -> bool:
    """Return True when ``value`` is an integer within ``bounds``."""
    try:
        number = int(value.strip())
    except ValueError:
        return False
    low, high = bounds
    return low <= number <= high


def validate_settings(settings: ServerSettings) -> list[str]:
    """Return a list of problems with ``settings`` (empty when valid)."""
    errors: list[str] = []
    if settings.port and not _in_range(settings.port, PORT_RANGE):
        errors.append("The DNS port must be a number between 1 and 65535.")
    if settings.verbosity and not _in_range(settings.verbosity, VERBOSITY_RANGE):
        errors.append("Verbosity must be a number between 0 and 5.")
    if any(rule.strip() and len(rule.split()) < 2 for rule in settings.access_controls):
        errors.append(
            "Access control rules must contain a network followed by an action "
            "(for example: 192.168.1.0/24 allow)."
        )
    return errors


def ensure_valid(settings: ServerSettings) -> None:
    """Raise ValidationError if ``settings`` has any problem."""
    errors = validate_settings(settings)
    if errors:
        raise ValidationError(" ".join(errors))


def clean_settings(settings: ServerSettings) -> ServerSettings:
    """Return a copy without blank interface or access-control entries."""
    cleaned = settings.clone()
    cleaned.interfaces = clean_list(cleaned.interfaces)
    cleaned.access_controls = clean_list(cleaned.access_controls)
    return cleaned
