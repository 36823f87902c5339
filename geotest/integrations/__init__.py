"""
External Integrations

Collaborator clients with mock fallbacks:
- Serper: Google SERP placement and competitor domains
- PageSpeed Insights: Lighthouse scores, Core Web Vitals, opportunities
"""

from .retry import RetryConfig, request_with_retry
from .serper import SerperClient, SerpMetrics, parse_serp_metrics, mock_search_results
from .pagespeed import (
    PageSpeedClient,
    PageSpeedMetrics,
    parse_pagespeed_response,
    mock_pagespeed_metrics,
)
from .config import (
    ExternalAPIConfig,
    ExternalAPIClients,
    create_serper_client,
    create_pagespeed_client,
    get_env_bool,
)

__all__ = [
    "RetryConfig",
    "request_with_retry",
    # Serper
    "SerperClient",
    "SerpMetrics",
    "parse_serp_metrics",
    "mock_search_results",
    # PageSpeed
    "PageSpeedClient",
    "PageSpeedMetrics",
    "parse_pagespeed_response",
    "mock_pagespeed_metrics",
    # Config
    "ExternalAPIConfig",
    "ExternalAPIClients",
    "create_serper_client",
    "create_pagespeed_client",
    "get_env_bool",
]
