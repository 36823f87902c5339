"""
URL and domain helpers.

Every analysis target is reduced to a bare domain (no scheme, no ``www.``,
no path) before seeding demo values or calling external APIs.
"""

import ipaddress
import logging
import re
from typing import Optional
from urllib.parse import urlparse

from .errors import ValidationError

logger = logging.getLogger(__name__)

_SCHEME_RE = re.compile(r"^https?://", re.IGNORECASE)


def normalize_url(url: str) -> str:
    """
    Trim the input and add ``https://`` when no scheme is present.

    Raises:
        ValidationError: if the input is empty
    """
    if url is None or not url.strip():
        raise ValidationError("URL is required")

    normalized = url.strip()
    if not _SCHEME_RE.match(normalized):
        normalized = f"https://{normalized}"
    return normalized


def extract_domain(url: str) -> str:
    """
    Reduce a URL (with or without scheme) to its bare lowercase domain.

    Falls back to string stripping when the URL cannot be parsed.
    """
    if not url:
        return ""

    candidate = url.strip()
    if not _SCHEME_RE.match(candidate):
        candidate = f"https://{candidate}"

    try:
        hostname = urlparse(candidate).hostname or ""
    except ValueError:
        hostname = ""

    if not hostname:
        hostname = _SCHEME_RE.sub("", url.strip()).split("/")[0]

    hostname = hostname.lower()
    if hostname.startswith("www."):
        hostname = hostname[4:]
    return hostname


def display_title(domain: str) -> str:
    """``example.com`` -> ``Example.com``"""
    if not domain:
        return ""
    return domain[0].upper() + domain[1:]


def _is_private_host(hostname: str) -> bool:
    if hostname == "localhost":
        return True
    try:
        return ipaddress.ip_address(hostname).is_private
    except ValueError:
        return False


def validate_url(url: Optional[str]) -> str:
    """
    Validate and sanitize a user-supplied URL.

    Returns:
        The sanitized URL (scheme, host, path, query)

    Raises:
        ValidationError: on empty, malformed, non-HTTP or private-network URLs
    """
    normalized = normalize_url(url or "")

    try:
        parsed = urlparse(normalized)
    except ValueError as e:
        raise ValidationError("Invalid URL format") from e

    if parsed.scheme.lower() not in ("http", "https"):
        raise ValidationError("URL must use HTTP or HTTPS protocol")

    hostname = parsed.hostname
    if not hostname or "." not in hostname and hostname != "localhost":
        raise ValidationError("Invalid URL format")

    if _is_private_host(hostname):
        raise ValidationError("Cannot analyze local or private network URLs")

    sanitized = f"{parsed.scheme.lower()}://{parsed.netloc}{parsed.path}"
    if parsed.query:
        sanitized += f"?{parsed.query}"
    return sanitized
