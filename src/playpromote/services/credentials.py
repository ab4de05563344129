"""Staging of the service-account credential file."""

import logging
import os
from contextlib import contextmanager
from typing import Iterator, List, Optional

from rich.console import Console

from playpromote.errors import ConfigurationError, PromoterError
from playpromote.errors_catalog import actionable_error

CREDENTIALS_ENV_VAR = "GOOGLE_APPLICATION_CREDENTIALS"
DEFAULT_CREDENTIALS_FILE = "service-account.json"
CREDENTIALS_FILE_MODE = 0o600


class CredentialStager:
    """Writes the raw credential payload where google-auth can find it.

    The file only exists inside the ``stage`` block. On exit it is removed,
    together with any parent directories the block had to create, and the
    previous value of the environment variable is restored, whether the block
    finished normally or raised. An existing file at the staging path is never
    touched.
    """

    def __init__(
        self,
        logger: logging.Logger,
        console: Console,
        credentials_file: str = DEFAULT_CREDENTIALS_FILE,
        environ=None,
    ):
        self.logger = logger
        self.console = console
        self.credentials_file = credentials_file
        self.environ = os.environ if environ is None else environ

    @contextmanager
    def stage(self, raw_payload: str) -> Iterator[str]:
        path = os.path.abspath(self.credentials_file)
        previous: Optional[str] = self.environ.get(CREDENTIALS_ENV_VAR)

        try:
            payload = raw_payload.encode("utf-8")
        except UnicodeEncodeError as exc:
            raise ConfigurationError(actionable_error("credentials_not_utf8", detail=exc.reason)) from exc

        if os.path.lexists(path):
            raise PromoterError(actionable_error("credentials_file_exists", path=path))

        created_dirs = self.missing_parents(path)
        created_file = False
        try:
            try:
                os.makedirs(os.path.dirname(path), exist_ok=True)
                fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_EXCL, CREDENTIALS_FILE_MODE)
                created_file = True
                with os.fdopen(fd, "wb") as file_obj:
                    file_obj.write(payload)
            except OSError as exc:
                raise PromoterError(f"Could not write credentials file '{path}': {exc}") from exc

            self.environ[CREDENTIALS_ENV_VAR] = path
            self.logger.debug("Staged service account credentials at %s", path)
            yield path
        finally:
            if created_file:
                self.remove(path)
            self.remove_dirs(created_dirs)
            if previous is None:
                self.environ.pop(CREDENTIALS_ENV_VAR, None)
            else:
                self.environ[CREDENTIALS_ENV_VAR] = previous

    @staticmethod
    def missing_parents(path: str) -> List[str]:
        """Returns the parent directories of ``path`` that do not exist yet, deepest first."""
        missing = []
        parent = os.path.dirname(path)
        while parent and not os.path.exists(parent):
            missing.append(parent)
            next_parent = os.path.dirname(parent)
            if next_parent == parent:
                break
            parent = next_parent
        return missing

    def remove(self, path: str):
        if not os.path.exists(path):
            return
        try:
            os.remove(path)
            self.logger.debug("Removed credentials file: %s", path)
        except OSError as exc:
            message = f"Warning: Could not remove {path}: {exc}"
            self.console.print(f"[yellow]{message}[/yellow]")
            self.logger.warning(message)

    def remove_dirs(self, directories: List[str]):
        for directory in directories:
            try:
                os.rmdir(directory)
            except FileNotFoundError:
                continue
            except OSError as exc:
                self.logger.warning("Could not remove directory %s: %s", directory, exc)
