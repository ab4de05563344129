"""Domain errors for playpromote."""

from typing import Optional


class PromoterError(RuntimeError):
    """Raised when the promotion cannot continue safely."""


class ConfigurationError(PromoterError):
    """A required input is missing or cannot be parsed."""


class AuthenticationError(PromoterError):
    """The service-account credential was rejected by the auth layer."""


class PublisherApiError(PromoterError):
    """A publisher API call returned a non-success status or failed in transit."""

    def __init__(self, message: str, status_code: Optional[int] = None, reason: Optional[str] = None):
        super().__init__(message)
        self.status_code = status_code
        self.reason = reason


class CommitVerificationError(PromoterError):
    """The commit call returned without a confirming edit id."""

    def __init__(self, message: str, status_code: Optional[int] = None, reason: Optional[str] = None):
        super().__init__(message)
        self.status_code = status_code
        self.reason = reason
