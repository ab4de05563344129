"""Configuration loader for playpromote."""

import json
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from playpromote.errors import ConfigurationError, PromoterError
from playpromote.errors_catalog import actionable_error


class ConfigLoader:
    """Loads YAML configuration files for CLI defaults."""

    SUPPORTED_KEYS = {
        "package_name",
        "service_account_json_raw",
        "from_track",
        "to_track",
        "user_fraction",
        "inapp_update_priority",
        "credentials_file",
        "dry_run",
        "changes_not_sent_for_review",
        "verbose",
        "log_file",
    }

    def load(self, config_path: Optional[str]) -> Dict[str, Any]:
        if not config_path:
            return {}

        path = Path(config_path)
        if not path.exists():
            raise PromoterError(f"Config file not found: {config_path}")

        try:
            parsed = yaml.safe_load(path.read_text(encoding="utf-8"))
        except (yaml.YAMLError, OSError) as exc:
            raise PromoterError(f"Invalid config file '{config_path}': {exc}") from exc

        if parsed is None:
            return {}
        if not isinstance(parsed, dict):
            raise PromoterError("Config file must contain a YAML mapping at the root.")

        unknown = sorted(set(parsed.keys()) - self.SUPPORTED_KEYS)
        if unknown:
            unknown_list = ", ".join(unknown)
            raise PromoterError(f"Unknown configuration keys: {unknown_list}")

        if "service_account_json_raw" in parsed:
            parsed["service_account_json_raw"] = self.normalize_credentials(
                parsed["service_account_json_raw"]
            )

        return parsed

    @staticmethod
    def normalize_credentials(value: Any) -> Optional[str]:
        """Accepts the key JSON as a string, or as a mapping written inline in YAML."""
        if value is None or isinstance(value, str):
            return value
        if isinstance(value, dict):
            return json.dumps(value)
        raise ConfigurationError(
            actionable_error("credentials_not_text", kind=type(value).__name__)
        )
