"""
Google PageSpeed Insights Client

Lighthouse category scores, Core Web Vitals, improvement opportunities and
diagnostics for a URL.

API: https://developers.google.com/speed/docs/insights/v5/get-started

Without an API key, or when a request fails, deterministic mock metrics
seeded by the URL and strategy are returned.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import httpx

from .retry import RetryConfig, request_with_retry
from ..models.analysis import CoreWebVitals, Diagnostic, Opportunity
from ..scoring.demo_values import DemoValueGenerator
from ..scoring.helpers import round_half_up
from ..utils.errors import ExternalAPIError
from ..utils.urls import normalize_url

logger = logging.getLogger(__name__)

CATEGORIES = ("performance", "accessibility", "best-practices", "seo")

# (audit id, title, impact)
OPPORTUNITY_AUDITS = [
    ("render-blocking-resources", "Eliminate render-blocking resources", "high"),
    ("unused-css-rules", "Remove unused CSS", "medium"),
    ("unused-javascript", "Remove unused JavaScript", "medium"),
    ("uses-responsive-images", "Properly size images", "high"),
    ("offscreen-images", "Defer offscreen images", "medium"),
    ("unminified-css", "Minify CSS", "low"),
    ("unminified-javascript", "Minify JavaScript", "low"),
    ("uses-optimized-images", "Efficiently encode images", "high"),
    ("modern-image-formats", "Serve images in next-gen formats", "high"),
    ("uses-text-compression", "Enable text compression", "high"),
]

IMPACT_ORDER = {"high": 0, "medium": 1, "low": 2}


@dataclass
class PageSpeedMetrics:
    """Parsed PageSpeed result for one URL and strategy."""

    performance_score: int
    seo_score: int
    accessibility_score: int
    best_practices_score: int
    core_web_vitals: CoreWebVitals
    opportunities: List[Opportunity] = field(default_factory=list)
    diagnostics: List[Diagnostic] = field(default_factory=list)
    strategy: str = "mobile"
    is_mock: bool = False


# =============================================================================
# PARSING
# =============================================================================

def _category_score(categories: Dict[str, Any], name: str) -> int:
    score = (categories.get(name) or {}).get("score") or 0
    return round_half_up(score * 100)


def _numeric(audits: Dict[str, Any], key: str) -> Optional[float]:
    value = (audits.get(key) or {}).get("numericValue")
    return float(value) if value else None


def extract_opportunities(audits: Dict[str, Any]) -> List[Opportunity]:
    """Failing opportunity audits with measurable savings, highest impact first."""
    opportunities = []

    for key, title, impact in OPPORTUNITY_AUDITS:
        audit = audits.get(key)
        if not audit:
            continue
        score = audit.get("score")
        savings_ms = (audit.get("details") or {}).get("overallSavingsMs") or 0
        if score is not None and score < 0.9 and savings_ms > 0:
            opportunities.append(Opportunity(
                title=title,
                description=audit.get("description", ""),
                savings=f"{round_half_up(savings_ms)}ms",
                impact=impact,
            ))

    return sorted(opportunities, key=lambda o: IMPACT_ORDER[o.impact])


def extract_diagnostics(audits: Dict[str, Any]) -> List[Diagnostic]:
    diagnostics = []

    dom_size = audits.get("dom-size") or {}
    if dom_size.get("score") is not None and dom_size["score"] < 1:
        diagnostics.append(Diagnostic(
            title="Reduce DOM size",
            description="Large DOM sizes increase memory usage and slow down page interactions",
            details=f"Current DOM size: {dom_size.get('numericValue')} elements",
        ))

    main_thread = audits.get("main-thread-tasks") or {}
    if main_thread.get("score") is not None and main_thread["score"] < 0.9:
        diagnostics.append(Diagnostic(
            title="Minimize main-thread work",
            description="Consider reducing JavaScript execution time",
            details="Long main-thread tasks block user interactions",
        ))

    cache_ttl = audits.get("uses-long-cache-ttl") or {}
    if cache_ttl.get("score") is not None and cache_ttl["score"] < 0.9:
        diagnostics.append(Diagnostic(
            title="Serve static assets with efficient cache policy",
            description="Long cache lifetimes improve repeat visit performance",
            details="Configure your server to return efficient cache policies",
        ))

    return diagnostics


def parse_pagespeed_response(data: Dict[str, Any], strategy: str = "mobile") -> PageSpeedMetrics:
    """
    Convert a raw ``runPagespeed`` response to PageSpeedMetrics.

    Timings use Lighthouse ``numericValue`` (milliseconds); LCP, FCP and TTFB
    are reported in seconds.
    """
    lighthouse = data.get("lighthouseResult") or {}
    categories = lighthouse.get("categories") or {}
    audits = lighthouse.get("audits") or {}

    lcp_ms = _numeric(audits, "largest-contentful-paint")
    fid_ms = _numeric(audits, "max-potential-fid") or _numeric(audits, "first-input-delay")
    cls = _numeric(audits, "cumulative-layout-shift")
    fcp_ms = _numeric(audits, "first-contentful-paint")
    ttfb_ms = _numeric(audits, "server-response-time")
    tbt_ms = _numeric(audits, "total-blocking-time")

    return PageSpeedMetrics(
        performance_score=_category_score(categories, "performance"),
        seo_score=_category_score(categories, "seo"),
        accessibility_score=_category_score(categories, "accessibility"),
        best_practices_score=_category_score(categories, "best-practices"),
        core_web_vitals=CoreWebVitals(
            lcp=round(lcp_ms / 1000, 2) if lcp_ms else 2.5,
            fid=round_half_up(fid_ms) if fid_ms else 100,
            cls=round(cls, 3) if cls else 0.1,
            fcp=round(fcp_ms / 1000, 2) if fcp_ms else 1.8,
            ttfb=round(ttfb_ms / 1000, 2) if ttfb_ms else 0.8,
            tbt=round_half_up(tbt_ms) if tbt_ms else 300,
        ),
        opportunities=extract_opportunities(audits),
        diagnostics=extract_diagnostics(audits),
        strategy=strategy,
    )


def mock_pagespeed_metrics(url: str, strategy: str = "mobile") -> PageSpeedMetrics:
    """Deterministic stand-in metrics for ``url``."""
    gen = DemoValueGenerator(url, salt=f"pagespeed:{strategy}")

    return PageSpeedMetrics(
        performance_score=gen.int_between(60, 95, "performance"),
        seo_score=gen.int_between(70, 98, "seo"),
        accessibility_score=gen.int_between(75, 95, "accessibility"),
        best_practices_score=gen.int_between(80, 100, "best_practices"),
        core_web_vitals=CoreWebVitals(
            lcp=gen.uniform(1.5, 4.0, "lcp", precision=1),
            fid=gen.int_between(50, 200, "fid"),
            cls=gen.uniform(0.05, 0.25, "cls", precision=2),
            fcp=gen.uniform(1.0, 2.5, "fcp", precision=1),
            ttfb=gen.uniform(0.3, 1.5, "ttfb", precision=1),
            tbt=gen.int_between(150, 600, "tbt"),
        ),
        opportunities=[
            Opportunity(
                title="Properly size images",
                description="Serve images that are appropriately-sized to save cellular data and improve load time",
                savings=f"{gen.int_between(500, 2000, 'savings_images')}ms",
                impact="high",
            ),
            Opportunity(
                title="Eliminate render-blocking resources",
                description="Resources are blocking the first paint of your page",
                savings=f"{gen.int_between(300, 1000, 'savings_render')}ms",
                impact="high",
            ),
        ],
        diagnostics=[
            Diagnostic(
                title="Reduce JavaScript execution time",
                description="JavaScript takes significant time to parse and execute",
                details=f"Total JavaScript execution time: {gen.int_between(1000, 3000, 'js_time')}ms",
            ),
        ],
        strategy=strategy,
        is_mock=True,
    )


# =============================================================================
# CLIENT
# =============================================================================

class PageSpeedClient:
    """
    Async client for PageSpeed Insights v5.

    Usage:
        client = PageSpeedClient(api_key="your_google_api_key")

        metrics = await client.analyze_url("https://example.com", "mobile")
        # metrics.performance_score = 87

        await client.close()
    """

    BASE_URL = "https://www.googleapis.com/pagespeedonline/v5/runPagespeed"

    def __init__(
        self,
        api_key: Optional[str] = None,
        retry_config: Optional[RetryConfig] = None,
        timeout: float = 60.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize PageSpeed client.

        Args:
            api_key: Google API key (mock data is served when missing)
            retry_config: Retry configuration (optional)
            timeout: Request timeout in seconds (Lighthouse runs are slow)
            transport: Custom httpx transport (tests)
        """
        self.api_key = api_key
        self.retry_config = retry_config or RetryConfig()

        self._client = httpx.AsyncClient(
            headers={"Accept": "application/json"},
            timeout=httpx.Timeout(timeout),
            transport=transport,
        )
        self._closed = False

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    async def analyze_url(self, url: str, strategy: str = "mobile") -> PageSpeedMetrics:
        """
        Run PageSpeed Insights for a URL.

        Args:
            url: Page URL (``https://`` is added when missing)
            strategy: ``mobile`` or ``desktop``

        Returns:
            PageSpeedMetrics (mock metrics without a key or on failure)
        """
        full_url = normalize_url(url)

        if not self.is_configured:
            logger.warning("Google PageSpeed API key not configured, using mock metrics")
            return mock_pagespeed_metrics(full_url, strategy)

        if self._closed:
            raise ExternalAPIError("Client has been closed")

        params = [("url", full_url), ("key", self.api_key), ("strategy", strategy)]
        params.extend(("category", category) for category in CATEGORIES)

        try:
            data = await request_with_retry(
                self._client, "GET", self.BASE_URL, self.retry_config, "PageSpeed", params=params,
            )
        except ExternalAPIError as e:
            logger.warning(f"PageSpeed analysis failed for {full_url}: {e}. Using mock metrics")
            return mock_pagespeed_metrics(full_url, strategy)

        return parse_pagespeed_response(data, strategy)

    async def analyze_both_strategies(self, url: str) -> Dict[str, PageSpeedMetrics]:
        """Mobile and desktop results, fetched concurrently."""
        mobile, desktop = await asyncio.gather(
            self.analyze_url(url, "mobile"),
            self.analyze_url(url, "desktop"),
        )
        return {"mobile": mobile, "desktop": desktop}

    async def close(self):
        """Close the HTTP client."""
        if not self._closed:
            await self._client.aclose()
            self._closed = True

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
