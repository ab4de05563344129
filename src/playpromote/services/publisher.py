"""Google Play Developer API (androidpublisher v3) edit client."""

from typing import Any, Dict, List, Optional
from urllib.parse import quote

import requests
from google.auth.exceptions import RefreshError, TransportError

from playpromote.errors import AuthenticationError, CommitVerificationError, PublisherApiError
from playpromote.errors_catalog import actionable_error
from playpromote.models import EditTransaction


class PublisherClient:
    """Issues edit-scoped calls against the publisher API through an authorized session."""

    BASE_URL = "https://androidpublisher.googleapis.com/androidpublisher/v3/applications"

    def __init__(self, session, logger, base_url: str = BASE_URL, requests_module=requests):
        self.session = session
        self.logger = logger
        self.base_url = base_url.rstrip("/")
        self.requests = requests_module

    def insert_edit(self, package_name: str) -> EditTransaction:
        response = self._request("Create edit", "POST", self._url(package_name, "edits"))
        body = self._json(response)
        edit_id = body.get("id")
        if not edit_id:
            raise PublisherApiError(
                f"Create edit returned no edit id (HTTP {response.status_code} {response.reason}).",
                status_code=response.status_code,
                reason=response.reason,
            )
        self.logger.debug("Opened edit %s for %s", edit_id, package_name)
        return EditTransaction(
            edit_id=edit_id,
            package_name=package_name,
            expiry_time_seconds=body.get("expiryTimeSeconds"),
        )

    def get_track(self, edit: EditTransaction, track: str) -> Dict[str, Any]:
        response = self._request(
            f"Get track '{track}'",
            "GET",
            self._url(edit.package_name, "edits", edit.edit_id, "tracks", track),
        )
        return self._json(response)

    def update_track(
        self,
        edit: EditTransaction,
        track: str,
        releases: List[Dict[str, Any]],
    ) -> Dict[str, Any]:
        response = self._request(
            f"Update track '{track}'",
            "PUT",
            self._url(edit.package_name, "edits", edit.edit_id, "tracks", track),
            json={"track": track, "releases": releases},
        )
        return self._json(response)

    def commit_edit(self, edit: EditTransaction, changes_not_sent_for_review: bool = False) -> str:
        params = {"changesNotSentForReview": "true"} if changes_not_sent_for_review else None
        response = self._request(
            "Commit edit",
            "POST",
            self._url(edit.package_name, "edits", edit.edit_id) + ":commit",
            params=params,
        )
        commit_id = self._json(response).get("id")
        if not commit_id:
            raise CommitVerificationError(
                actionable_error(
                    "commit_not_confirmed",
                    status_code=response.status_code,
                    reason=response.reason,
                ),
                status_code=response.status_code,
                reason=response.reason,
            )
        return commit_id

    def delete_edit(self, edit: EditTransaction):
        self._request(
            "Delete edit",
            "DELETE",
            self._url(edit.package_name, "edits", edit.edit_id),
        )
        self.logger.debug("Deleted edit %s", edit.edit_id)

    def _url(self, package_name: str, *parts: str) -> str:
        segments = [quote(part, safe="") for part in (package_name,) + parts]
        return f"{self.base_url}/{'/'.join(segments)}"

    def _request(self, operation: str, method: str, url: str, **kwargs):
        self.logger.debug("%s: %s %s", operation, method, url)
        try:
            response = self.session.request(method, url, **kwargs)
        except RefreshError as exc:
            raise AuthenticationError(actionable_error("credentials_rejected", detail=str(exc))) from exc
        except (self.requests.RequestException, TransportError) as exc:
            raise PublisherApiError(
                actionable_error("api_unreachable", operation=operation, detail=str(exc))
            ) from exc

        if response.status_code >= 400:
            raise PublisherApiError(
                actionable_error(
                    "api_call_failed",
                    operation=operation,
                    status_code=response.status_code,
                    reason=response.reason,
                    detail=self._error_detail(response),
                ),
                status_code=response.status_code,
                reason=response.reason,
            )
        return response

    @staticmethod
    def _json(response) -> Dict[str, Any]:
        try:
            body = response.json()
        except ValueError:
            return {}
        return body if isinstance(body, dict) else {}

    def _error_detail(self, response) -> str:
        error: Optional[Any] = self._json(response).get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        text = (getattr(response, "text", "") or "").strip()
        return text or "no error details returned"
