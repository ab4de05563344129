"""Authenticated session construction for the publisher API."""

from typing import Sequence

import google.auth
from google.auth.exceptions import GoogleAuthError
from google.auth.transport.requests import AuthorizedSession

from playpromote.errors import AuthenticationError
from playpromote.errors_catalog import actionable_error

ANDROID_PUBLISHER_SCOPE = "https://www.googleapis.com/auth/androidpublisher"


def build_authorized_session(scopes: Sequence[str] = (ANDROID_PUBLISHER_SCOPE,)) -> AuthorizedSession:
    """Loads application default credentials and wraps them in a requests session.

    The staged credential file is picked up through GOOGLE_APPLICATION_CREDENTIALS.
    """
    try:
        credentials, _project_id = google.auth.default(scopes=list(scopes))
    except GoogleAuthError as exc:
        raise AuthenticationError(actionable_error("credentials_rejected", detail=str(exc))) from exc
    return AuthorizedSession(credentials)
