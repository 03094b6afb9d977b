"""
Authware SDK Error Classes

Every remote call ends in a decoded value or exactly one of these errors.
Remote failures are siblings under AuthwareError so callers can tell a
rate limit, a forced update, an API error and a protocol mismatch apart.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

from .types import ErrorResponse


class AuthwareError(Exception):
    """Base error class for Authware SDK."""

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        self.timestamp = datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for logging/serialization."""
        return {
            "name": self.__class__.__name__,
            "code": self.code,
            "message": self.message,
            "status_code": self.status_code,
            "details": self.details,
            "timestamp": self.timestamp,
        }

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class NetworkError(AuthwareError):
    """Network error (connection issues, timeouts, rejected certificates)."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None, retryable: bool = True):
        super().__init__("NETWORK_ERROR", message, 0, details)
        self.retryable = retryable


class ValidationError(AuthwareError):
    """Invalid argument, detected locally before any request is sent."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__("VALIDATION_ERROR", message, 0, details)


class ConfigurationError(AuthwareError):
    """Configuration error."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__("CONFIGURATION_ERROR", message, 0, details)


class ApiError(AuthwareError):
    """Error returned by the Authware API with a well-formed error envelope."""

    def __init__(self, error_response: ErrorResponse, status_code: int):
        super().__init__(
            "API_ERROR",
            error_response.message or f"HTTP {status_code}",
            status_code,
            error_response.to_dict(),
        )
        self.error_response = error_response

    @property
    def errors(self) -> List[str]:
        """Granular validation errors reported by the API, if any."""
        return list(self.error_response.errors or [])

    @property
    def trace(self) -> Optional[str]:
        """Server-side stack trace, only present on 500 responses."""
        return self.error_response.trace

    def __str__(self) -> str:
        return str(self.error_response)


class RateLimitError(AuthwareError):
    """
    Rate limit error (HTTP 429).

    The envelope is None when the limiter answered with an HTML page
    instead of JSON.
    """

    def __init__(
        self,
        error_response: Optional[ErrorResponse],
        retry_after: timedelta,
        message: str = "Rate limit exceeded",
    ):
        if error_response is not None and error_response.message:
            message = error_response.message
        super().__init__(
            "RATE_LIMITED",
            message,
            429,
            {"retry_after": retry_after.total_seconds()},
        )
        self.error_response = error_response
        self.retry_after = retry_after


class UpdateRequiredError(AuthwareError):
    """The application version is outdated and must be updated before continuing."""

    def __init__(self, update_url: Optional[str], error_response: ErrorResponse, status_code: int = 403):
        if not update_url:
            raise ConfigurationError(
                "The API demanded an update but did not send an updater URL",
                error_response.to_dict(),
            )
        super().__init__(
            "UPDATE_REQUIRED",
            error_response.message or "Application update required",
            status_code,
            {"update_url": update_url},
        )
        self.update_url = update_url
        self.error_response = error_response


class UnexpectedResponseError(AuthwareError):
    """A success status came back with a body the SDK could not decode."""

    def __init__(self, raw_body: str, status_code: int):
        super().__init__(
            "UNEXPECTED_RESPONSE",
            "There was an error when parsing the response from the Authware API. "
            "The API returned a success status code, so its responses have most likely "
            "changed and the SDK needs to be updated. "
            f"The response from the API was: {raw_body}",
            status_code,
        )
        self.raw_body = raw_body


class ErrorResponseParseError(AuthwareError):
    """A non-success status came back with an error body the SDK could not decode."""

    def __init__(self, raw_body: str, status_code: int, reason: str = ""):
        message = (
            "A non success status code was returned from the Authware API and "
            "the error response could not be parsed"
        )
        if reason:
            message = f"{message}: {reason}"
        super().__init__("INVALID_ERROR_RESPONSE", message, status_code)
        self.raw_body = raw_body


def is_authware_error(error: Any) -> bool:
    """Check if error is an AuthwareError."""
    return isinstance(error, AuthwareError)


def is_retryable_error(error: Any) -> bool:
    """Check if a caller may retry the failed call."""
    if isinstance(error, NetworkError):
        return error.retryable
    if isinstance(error, RateLimitError):
        return True
    if isinstance(error, ApiError):
        # Retry on server errors (5xx)
        return 500 <= error.status_code < 600
    return False
