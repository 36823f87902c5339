"""
Serper API Client

Google SERP lookups used to place a domain in organic results and spot the
domains it competes with.

API: https://serper.dev/

Without an API key, or when a request fails, canned SERP data is returned so
analysis never stops on this collaborator.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import httpx

from .retry import RetryConfig, request_with_retry
from ..utils.errors import ExternalAPIError
from ..utils.urls import extract_domain

logger = logging.getLogger(__name__)

# Domains never reported as competitors
IGNORED_COMPETITOR_HOSTS = ("wikipedia", "youtube")

_TLD_SUFFIX_RE = re.compile(r"\.(com|org|net|io|ai|co).*$")


@dataclass
class SerpMetrics:
    """What one domain looks like in Google results."""

    position: Optional[int] = None
    featured: bool = False
    has_answer_box: bool = False
    has_knowledge_graph: bool = False
    has_people_also_ask: bool = False
    competitor_count: int = 0
    top_competitors: List[str] = field(default_factory=list)


def brand_query(domain: str) -> str:
    """``acme.co.uk`` -> ``acme``"""
    return _TLD_SUFFIX_RE.sub("", domain)


def mock_search_results(query: str) -> Dict[str, Any]:
    """Canned SERP response used without an API key or after a failure."""
    slug = re.sub(r"\s+", "-", query.lower())
    return {
        "organic": [
            {
                "title": f"{query} - Best Practices and Guide",
                "link": f"https://example.com/{slug}",
                "snippet": f"Comprehensive guide to {query}. Learn best practices, tips, and strategies for success.",
                "position": 1,
            },
            {
                "title": f"Understanding {query}",
                "link": f"https://blog.example.com/{slug}-guide",
                "snippet": f"Everything you need to know about {query}.",
                "position": 2,
            },
        ],
        "answerBox": {
            "title": f"What is {query}?",
            "answer": f"{query} refers to the practice of optimizing content and websites for better visibility.",
        },
        "peopleAlsoAsk": [
            {
                "question": f"How do I get started with {query}?",
                "snippet": "Start by understanding the basics and implementing best practices.",
                "title": "Getting Started Guide",
                "link": "https://example.com/getting-started",
            },
            {
                "question": f"What are the benefits of {query}?",
                "snippet": "Benefits include increased visibility, better engagement, and improved ROI.",
                "title": "Benefits Overview",
                "link": "https://example.com/benefits",
            },
        ],
        "searchParameters": {"q": query, "type": "search", "engine": "google"},
    }


def parse_serp_metrics(domain: str, brand_results: Dict[str, Any]) -> SerpMetrics:
    """
    Extract SerpMetrics for ``domain`` from a brand-name search.

    Position is the 1-based rank of the first organic result on the same
    domain; competitors are the other domains in the top 10.
    """
    clean_domain = extract_domain(domain)
    organic = brand_results.get("organic") or []

    result_domains = [extract_domain(r.get("link", "")) for r in organic]

    position = None
    for index, result_domain in enumerate(result_domains):
        if result_domain == clean_domain:
            position = index + 1
            break

    top_competitors = [
        d for d in result_domains[:10]
        if d and d != clean_domain and not any(h in d for h in IGNORED_COMPETITOR_HOSTS)
    ][:5]

    return SerpMetrics(
        position=position,
        featured=position == 1,
        has_answer_box=bool(brand_results.get("answerBox")),
        has_knowledge_graph=bool(brand_results.get("knowledgeGraph")),
        has_people_also_ask=bool(brand_results.get("peopleAlsoAsk")),
        competitor_count=len(top_competitors),
        top_competitors=top_competitors,
    )


class SerperClient:
    """
    Async client for the Serper Google Search API.

    Usage:
        client = SerperClient(api_key="your_api_key")

        metrics = await client.analyze_website_seo("example.com")
        # metrics.position = 3
        # metrics.top_competitors = ["competitor.com", ...]

        await client.close()
    """

    BASE_URL = "https://google.serper.dev"

    def __init__(
        self,
        api_key: Optional[str] = None,
        retry_config: Optional[RetryConfig] = None,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize Serper client.

        Args:
            api_key: Serper API key (mock data is served when missing)
            retry_config: Retry configuration (optional)
            timeout: Request timeout in seconds
            transport: Custom httpx transport (tests)
        """
        self.api_key = api_key
        self.retry_config = retry_config or RetryConfig()

        self._client = httpx.AsyncClient(
            base_url=self.BASE_URL,
            headers={
                "X-API-KEY": api_key or "",
                "Content-Type": "application/json",
            },
            timeout=httpx.Timeout(timeout),
            transport=transport,
        )
        self._closed = False

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    async def search_google(self, query: str) -> Dict[str, Any]:
        """
        Run one Google search.

        Returns:
            Raw Serper response, or mock results without a key or on failure
        """
        if not self.is_configured:
            logger.warning("Serper API key not configured, using mock SERP data")
            return mock_search_results(query)

        if self._closed:
            raise ExternalAPIError("Client has been closed")

        payload = {
            "q": query,
            "gl": "us",
            "hl": "en",
            "num": 20,
            "autocorrect": True,
        }

        try:
            return await request_with_retry(
                self._client, "POST", "/search", self.retry_config, "Serper", json=payload,
            )
        except ExternalAPIError as e:
            logger.warning(f"Serper search failed for '{query}': {e}. Using mock SERP data")
            return mock_search_results(query)

    async def analyze_website_seo(self, domain: str) -> SerpMetrics:
        """
        Place ``domain`` in Google results.

        Runs a ``site:`` search and a brand-name search; ranking and
        competitors come from the brand search.
        """
        domain = extract_domain(domain)

        await self.search_google(f"site:{domain}")
        brand_results = await self.search_google(brand_query(domain))

        metrics = parse_serp_metrics(domain, brand_results)
        logger.debug(
            f"SERP for {domain}: position={metrics.position}, "
            f"competitors={metrics.competitor_count}"
        )
        return metrics

    async def close(self):
        """Close the HTTP client."""
        if not self._closed:
            await self._client.aclose()
            self._closed = True

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
