"""
Error Taxonomy

Exceptions raised across the analyzer and the mapping from any failure to a
single user-facing message category.

- ExternalAPIError: collaborator failures, caught at the client boundary
- AnalysisError: the one error the analysis entry point raises
- StorageError: persistence read/write failures
- ValidationError: rejected user input (URLs)
"""

import enum
from typing import Optional


class GeoTestError(Exception):
    """Base exception for the analyzer."""


class ExternalAPIError(GeoTestError):
    """Error returned by a third-party API (Serper, PageSpeed)."""

    def __init__(self, message: str, status_code: int = None, response: dict = None):
        super().__init__(message)
        self.status_code = status_code
        self.response = response


class AnalysisError(GeoTestError):
    """Non-recoverable failure while analyzing a URL."""

    def __init__(self, url: str, cause: BaseException):
        super().__init__(f"Failed to analyze {url}: {cause}")
        self.url = url
        self.cause = cause


class StorageError(GeoTestError):
    """Failure serializing to or writing the persistence backend."""


class ValidationError(GeoTestError):
    """Invalid user input."""


class ErrorCategory(enum.Enum):
    """User-visible failure categories."""
    NETWORK = "network"
    TIMEOUT = "timeout"
    RATE_LIMIT = "rate_limit"
    AUTH = "auth"
    VALIDATION = "validation"
    SERVER = "server"
    STORAGE = "storage"
    UNKNOWN = "unknown"


ERROR_MESSAGES = {
    ErrorCategory.NETWORK: "Unable to connect to the server. Please check your internet connection and try again.",
    ErrorCategory.TIMEOUT: "The request took too long to complete. Please try again.",
    ErrorCategory.RATE_LIMIT: "Request limit exceeded. Please wait a few minutes before trying again.",
    ErrorCategory.AUTH: "An API key is missing or invalid. Please contact support.",
    ErrorCategory.VALIDATION: "Please enter a valid URL (e.g., https://example.com)",
    ErrorCategory.SERVER: "Server error occurred. Our team has been notified.",
    ErrorCategory.STORAGE: "Database connection failed. Your analysis will not be saved.",
    ErrorCategory.UNKNOWN: "An unexpected error occurred. Please try again.",
}


def _root_cause(error: BaseException) -> BaseException:
    if isinstance(error, AnalysisError):
        return error.cause
    return error


def classify_error(error: Optional[BaseException]) -> ErrorCategory:
    """
    Map an exception to a user-visible category.

    Typed exceptions are matched first; anything else falls back to
    inspecting the message text.
    """
    if error is None:
        return ErrorCategory.UNKNOWN

    cause = _root_cause(error)

    if isinstance(cause, ValidationError):
        return ErrorCategory.VALIDATION
    if isinstance(cause, StorageError):
        return ErrorCategory.STORAGE
    if isinstance(cause, (TimeoutError,)):
        return ErrorCategory.TIMEOUT
    if isinstance(cause, ExternalAPIError) and cause.status_code:
        if cause.status_code == 429:
            return ErrorCategory.RATE_LIMIT
        if cause.status_code in (401, 403):
            return ErrorCategory.AUTH
        if cause.status_code >= 500:
            return ErrorCategory.SERVER

    message = str(cause)
    lowered = message.lower()

    if "timeout" in lowered or "timed out" in lowered:
        return ErrorCategory.TIMEOUT
    if "network" in lowered or "connection" in lowered or "fetch" in lowered:
        return ErrorCategory.NETWORK
    if "429" in message or "rate limit" in lowered:
        return ErrorCategory.RATE_LIMIT
    if "api key" in lowered or "401" in message or "unauthorized" in lowered:
        return ErrorCategory.AUTH
    if any(code in message for code in ("500", "502", "503")):
        return ErrorCategory.SERVER
    if "invalid url" in lowered or "valid url" in lowered:
        return ErrorCategory.VALIDATION
    if "database" in lowered or "storage" in lowered:
        return ErrorCategory.STORAGE

    return ErrorCategory.UNKNOWN


def get_user_friendly_error(error: Optional[BaseException]) -> str:
    """Return the human-readable message for an exception."""
    return ERROR_MESSAGES[classify_error(error)]
