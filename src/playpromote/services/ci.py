"""GitHub Actions workflow command helpers."""

import os
import sys


def is_github_actions(environ=None) -> bool:
    environ = os.environ if environ is None else environ
    return environ.get("GITHUB_ACTIONS", "").lower() == "true"


def escape_command_data(message: str) -> str:
    return message.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def emit_error_annotation(message: str, stream=None, environ=None) -> bool:
    """Writes an ``::error::`` command when running inside GitHub Actions."""
    if not is_github_actions(environ):
        return False

    stream = stream or sys.stdout
    stream.write(f"::error::{escape_command_data(message)}\n")
    stream.flush()
    return True
