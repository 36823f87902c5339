"""
External API Configuration

Configuration and factory functions for the SERP and page-speed clients.
Credentials come from Settings (environment / .env).

Optional environment variables:
- SERPER_API_KEY: Serper API key (mock SERP data without it)
- GOOGLE_API_KEY: Google API key for PageSpeed Insights (mock metrics without it)
- SERPER_ENABLED: Enable Serper (default: true)
- PAGESPEED_ENABLED: Enable PageSpeed (default: true)
"""

import os
import logging
from typing import Optional

from .pagespeed import PageSpeedClient
from .serper import SerperClient
from ..utils.config import get_settings

logger = logging.getLogger(__name__)


def get_env_bool(key: str, default: bool = True) -> bool:
    """Get boolean from environment variable."""
    val = os.environ.get(key, "").lower()
    if val in ("false", "0", "no", "off"):
        return False
    if val in ("true", "1", "yes", "on"):
        return True
    return default


class ExternalAPIConfig:
    """Configuration for external APIs."""

    def __init__(
        self,
        serper_api_key: Optional[str] = None,
        google_api_key: Optional[str] = None,
        serper_enabled: bool = True,
        pagespeed_enabled: bool = True,
        timeout: Optional[float] = None,
    ):
        """
        Initialize external API configuration.

        Args:
            serper_api_key: Serper API key (or from settings)
            google_api_key: Google API key (or from settings)
            serper_enabled: Whether live Serper lookups are enabled
            pagespeed_enabled: Whether live PageSpeed lookups are enabled
            timeout: Request timeout in seconds (or API_TIMEOUT)
        """
        settings = get_settings()
        self.serper_api_key = serper_api_key or settings.SERPER_API_KEY
        self.google_api_key = google_api_key or settings.GOOGLE_API_KEY
        self.serper_enabled = serper_enabled and get_env_bool("SERPER_ENABLED", True)
        self.pagespeed_enabled = pagespeed_enabled and get_env_bool("PAGESPEED_ENABLED", True)
        self.timeout = timeout or settings.API_TIMEOUT

    @property
    def has_serper(self) -> bool:
        """Check if Serper is configured and enabled."""
        return self.serper_enabled and bool(self.serper_api_key)

    @property
    def has_pagespeed(self) -> bool:
        """Check if PageSpeed is configured and enabled."""
        return self.pagespeed_enabled and bool(self.google_api_key)

    def log_status(self):
        """Log configuration status."""
        logger.info(
            f"External API status: "
            f"Serper={'live' if self.has_serper else 'mock'}, "
            f"PageSpeed={'live' if self.has_pagespeed else 'mock'}"
        )


class ExternalAPIClients:
    """
    Factory and manager for external API clients.

    Clients are always returned; without credentials they serve mock data.

    Usage:
        async with ExternalAPIClients() as clients:
            serp = await clients.serper.analyze_website_seo("example.com")
    """

    def __init__(self, config: Optional[ExternalAPIConfig] = None):
        self.config = config or ExternalAPIConfig()
        self._serper: Optional[SerperClient] = None
        self._pagespeed: Optional[PageSpeedClient] = None

    @property
    def serper(self) -> SerperClient:
        """Get or create Serper client."""
        if self._serper is None:
            self._serper = create_serper_client(
                api_key=self.config.serper_api_key,
                enabled=self.config.has_serper,
                timeout=self.config.timeout,
            )
        return self._serper

    @property
    def pagespeed(self) -> PageSpeedClient:
        """Get or create PageSpeed client."""
        if self._pagespeed is None:
            self._pagespeed = create_pagespeed_client(
                api_key=self.config.google_api_key,
                enabled=self.config.has_pagespeed,
                timeout=max(self.config.timeout, 60),
            )
        return self._pagespeed

    async def close(self):
        """Close all clients."""
        if self._serper:
            await self._serper.close()
            self._serper = None

        if self._pagespeed:
            await self._pagespeed.close()
            self._pagespeed = None

        logger.info("Closed external API clients")

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()


# Convenience functions

def create_serper_client(
    api_key: Optional[str] = None,
    timeout: float = 30.0,
    enabled: bool = True,
) -> SerperClient:
    """
    Create a Serper client.

    Args:
        api_key: API key (defaults to SERPER_API_KEY)
        timeout: Request timeout in seconds
        enabled: False forces mock data even when a key is configured

    Returns:
        SerperClient (serving mock data when no key is configured)
    """
    if not enabled:
        logger.info("Serper disabled, serving mock SERP data")
        return SerperClient(api_key=None, timeout=timeout)

    key = api_key or get_settings().SERPER_API_KEY
    if not key:
        logger.warning("Serper API key not configured")
    return SerperClient(api_key=key, timeout=timeout)


def create_pagespeed_client(
    api_key: Optional[str] = None,
    timeout: float = 60.0,
    enabled: bool = True,
) -> PageSpeedClient:
    """
    Create a PageSpeed client.

    Args:
        api_key: API key (defaults to GOOGLE_API_KEY)
        timeout: Request timeout in seconds
        enabled: False forces mock data even when a key is configured

    Returns:
        PageSpeedClient (serving mock data when no key is configured)
    """
    if not enabled:
        logger.info("PageSpeed disabled, serving mock metrics")
        return PageSpeedClient(api_key=None, timeout=timeout)

    key = api_key or get_settings().GOOGLE_API_KEY
    if not key:
        logger.warning("Google PageSpeed API key not configured")
    return PageSpeedClient(api_key=key, timeout=timeout)
