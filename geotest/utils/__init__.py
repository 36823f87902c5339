"""Utility modules for GeoTest Analyzer."""

from .config import Settings, get_settings
from .errors import (
    GeoTestError,
    ExternalAPIError,
    AnalysisError,
    StorageError,
    ValidationError,
    ErrorCategory,
    classify_error,
    get_user_friendly_error,
)
from .urls import (
    normalize_url,
    extract_domain,
    display_title,
    validate_url,
)

__all__ = [
    "Settings",
    "get_settings",
    # Errors
    "GeoTestError",
    "ExternalAPIError",
    "AnalysisError",
    "StorageError",
    "ValidationError",
    "ErrorCategory",
    "classify_error",
    "get_user_friendly_error",
    # URLs
    "normalize_url",
    "extract_domain",
    "display_title",
    "validate_url",
]
