"""Parsing of raw CI/CLI inputs into a promotion configuration."""

from typing import Any, Optional

from playpromote.errors import ConfigurationError
from playpromote.errors_catalog import actionable_error
from playpromote.models import PromotionConfig

REQUIRED_INPUTS = (
    ("package-name", "package_name"),
    ("service-account-json-raw", "service_account_json_raw"),
    ("from-track", "from_track"),
    ("to-track", "to_track"),
)


def _clean(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def parse_user_fraction(value: Any) -> Optional[float]:
    text = _clean(value)
    if text is None:
        return None
    try:
        return float(text)
    except ValueError as exc:
        raise ConfigurationError(
            actionable_error("invalid_number", name="user-fraction", kind="number", value=text)
        ) from exc


def parse_update_priority(value: Any) -> Optional[int]:
    text = _clean(value)
    if text is None:
        return None
    try:
        return int(text)
    except ValueError as exc:
        raise ConfigurationError(
            actionable_error("invalid_number", name="inapp-update-priority", kind="whole number", value=text)
        ) from exc


def build_config(
    package_name: Any,
    service_account_json_raw: Any,
    from_track: Any,
    to_track: Any,
    user_fraction: Any = None,
    update_priority: Any = None,
) -> PromotionConfig:
    """Validates raw inputs and returns an immutable PromotionConfig.

    Empty strings are treated as unset, which is how CI runners hand over
    inputs that were not provided. Rollout values are only parsed here; range
    checks are left to the publisher API.
    """
    values = {
        "package_name": _clean(package_name),
        # The credential payload is kept verbatim apart from the emptiness check.
        "service_account_json_raw": service_account_json_raw if _clean(service_account_json_raw) else None,
        "from_track": _clean(from_track),
        "to_track": _clean(to_track),
    }

    for input_name, key in REQUIRED_INPUTS:
        if values[key] is None:
            raise ConfigurationError(actionable_error("missing_input", name=input_name, key=key))

    return PromotionConfig(
        package_name=values["package_name"],
        service_account_json_raw=values["service_account_json_raw"],
        from_track=values["from_track"],
        to_track=values["to_track"],
        user_fraction=parse_user_fraction(user_fraction),
        update_priority=parse_update_priority(update_priority),
    )
