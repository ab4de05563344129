"""Actionable error catalog for playpromote."""

from typing import Dict

_ERROR_MESSAGES: Dict[str, Dict[str, str]] = {
    "missing_input": {
        "what": "Missing required input '{name}'.",
        "next": "Pass `--{name}`, set the `{name}` action input, or add `{key}` to the config file.",
    },
    "invalid_number": {
        "what": "Input '{name}' must be a {kind}, got {value!r}.",
        "next": "Fix the `{name}` value or leave it empty to keep the current release values.",
    },
    "credentials_not_utf8": {
        "what": "The service account payload is not valid UTF-8 text ({detail}).",
        "next": "Store the key JSON in the CI secret exactly as downloaded from the Cloud console.",
    },
    "credentials_file_exists": {
        "what": "Refusing to stage credentials over existing file: {path}",
        "next": "Move that file away or choose another location with `--credentials-file`.",
    },
    "credentials_not_text": {
        "what": "Config key `service_account_json_raw` must be the key JSON as a string, got {kind}.",
        "next": "Quote the JSON in the YAML file or use a block scalar (`service_account_json_raw: |`).",
    },
    "credentials_rejected": {
        "what": "Service account credentials were rejected: {detail}",
        "next": "Check that `service-account-json-raw` holds a valid service account key JSON.",
    },
    "api_call_failed": {
        "what": "{operation} failed with HTTP {status_code} {reason}: {detail}",
        "next": "Verify the package name, track names and the service account's Play Console permissions.",
    },
    "api_unreachable": {
        "what": "{operation} could not reach the publisher API: {detail}",
        "next": "Check network access from the runner and retry the job.",
    },
    "commit_not_confirmed": {
        "what": "Error {status_code}: {reason}",
        "next": "Open the Play Console to check whether the edit was applied before rerunning.",
    },
}


def actionable_error(code: str, **kwargs) -> str:
    if code not in _ERROR_MESSAGES:
        raise KeyError(f"Unknown error catalog key: {code}")

    template = _ERROR_MESSAGES[code]
    what = template["what"].format(**kwargs)
    next_step = template["next"].format(**kwargs)
    return f"{what} Suggested action: {next_step}"
