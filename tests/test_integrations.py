"""
Tests for collaborator clients.

Uses httpx.MockTransport so no request leaves the process.

Tests cover:
1. Retry behavior and error surfacing
2. Serper request shape, SERP parsing and mock fallback
3. PageSpeed request shape, Lighthouse parsing and mock fallback
4. External API configuration
"""

import json
import pytest
import httpx

from geotest.integrations import (
    ExternalAPIClients,
    ExternalAPIConfig,
    PageSpeedClient,
    RetryConfig,
    SerperClient,
    create_pagespeed_client,
    create_serper_client,
    get_env_bool,
    mock_pagespeed_metrics,
    mock_search_results,
    parse_serp_metrics,
    request_with_retry,
)
from geotest.integrations.serper import brand_query
from geotest.utils.config import get_settings
from geotest.utils.errors import ExternalAPIError


NO_RETRY = RetryConfig(max_retries=0)
FAST_RETRY = RetryConfig(max_retries=2, initial_delay=0, max_delay=0)


def recording_transport(responses):
    """MockTransport that replays ``responses`` in order and records requests."""
    requests = []
    queue = list(responses)

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        template = queue.pop(0) if len(queue) > 1 else queue[0]
        return httpx.Response(template.status_code, headers=template.headers, content=template.content)

    return httpx.MockTransport(handler), requests


def failing_transport():
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError(f"Unexpected request to {request.url}")

    return httpx.MockTransport(handler)


# ============================================================================
# Retry
# ============================================================================

class TestRequestWithRetry:
    """Tests for request_with_retry"""

    async def test_success(self):
        transport, requests = recording_transport([httpx.Response(200, json={"ok": True})])
        async with httpx.AsyncClient(transport=transport, base_url="https://api.test") as client:
            data = await request_with_retry(client, "GET", "/x", NO_RETRY, "Test")
        assert data == {"ok": True}
        assert len(requests) == 1

    async def test_retryable_status_then_success(self):
        transport, requests = recording_transport([
            httpx.Response(503),
            httpx.Response(200, json={"ok": True}),
        ])
        async with httpx.AsyncClient(transport=transport, base_url="https://api.test") as client:
            data = await request_with_retry(client, "GET", "/x", FAST_RETRY, "Test")
        assert data == {"ok": True}
        assert len(requests) == 2

    async def test_gives_up_after_max_retries(self):
        transport, requests = recording_transport([httpx.Response(429, json={"error": "slow down"})])
        async with httpx.AsyncClient(transport=transport, base_url="https://api.test") as client:
            with pytest.raises(ExternalAPIError) as exc_info:
                await request_with_retry(client, "GET", "/x", FAST_RETRY, "Test")
        assert exc_info.value.status_code == 429
        assert exc_info.value.response == {"error": "slow down"}
        assert len(requests) == 3

    async def test_non_retryable_status_fails_fast(self):
        transport, requests = recording_transport([httpx.Response(400, text="bad request")])
        async with httpx.AsyncClient(transport=transport, base_url="https://api.test") as client:
            with pytest.raises(ExternalAPIError) as exc_info:
                await request_with_retry(client, "GET", "/x", FAST_RETRY, "Test")
        assert exc_info.value.status_code == 400
        assert len(requests) == 1

    async def test_invalid_json(self):
        transport, _ = recording_transport([httpx.Response(200, text="<html>")])
        async with httpx.AsyncClient(transport=transport, base_url="https://api.test") as client:
            with pytest.raises(ExternalAPIError, match="invalid JSON"):
                await request_with_retry(client, "GET", "/x", NO_RETRY, "Test")

    async def test_transport_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url="https://api.test") as client:
            with pytest.raises(ExternalAPIError, match="request failed"):
                await request_with_retry(client, "GET", "/x", NO_RETRY, "Test")


# ============================================================================
# Serper
# ============================================================================

BRAND_RESULTS = {
    "organic": [
        {"title": "Acme on Wikipedia", "link": "https://en.wikipedia.org/wiki/Acme", "position": 1},
        {"title": "Acme", "link": "https://www.acme.com/", "position": 2},
        {"title": "Rival", "link": "https://rival.com/acme-alternative", "position": 3},
        {"title": "Video", "link": "https://www.youtube.com/watch?v=1", "position": 4},
        {"title": "Review", "link": "https://reviews.io/acme", "position": 5},
    ],
    "knowledgeGraph": {"title": "Acme"},
}


class TestSerpParsing:
    """Tests for SERP parsing."""

    def test_brand_query_strips_tld(self):
        assert brand_query("acme.com") == "acme"
        assert brand_query("acme.co.uk") == "acme"
        assert brand_query("acme.dev") == "acme.dev"

    def test_parse_serp_metrics(self):
        metrics = parse_serp_metrics("acme.com", BRAND_RESULTS)

        assert metrics.position == 2
        assert metrics.featured is False
        assert metrics.has_knowledge_graph is True
        assert metrics.has_answer_box is False
        assert metrics.top_competitors == ["rival.com", "reviews.io"]
        assert metrics.competitor_count == 2

    def test_parse_empty_results(self):
        metrics = parse_serp_metrics("acme.com", {})
        assert metrics.position is None
        assert metrics.top_competitors == []

    def test_mock_results_shape(self):
        results = mock_search_results("seo tools")
        assert results["organic"][0]["link"] == "https://example.com/seo-tools"
        assert results["answerBox"]
        assert len(results["peopleAlsoAsk"]) == 2


class TestSerperClient:
    """Tests for SerperClient"""

    async def test_analyze_website_seo(self):
        transport, requests = recording_transport([
            httpx.Response(200, json={"organic": []}),
            httpx.Response(200, json=BRAND_RESULTS),
        ])
        async with SerperClient(api_key="test-key", retry_config=NO_RETRY, transport=transport) as client:
            metrics = await client.analyze_website_seo("https://www.acme.com")

        assert metrics.position == 2
        assert [json.loads(r.content)["q"] for r in requests] == ["site:acme.com", "acme"]
        assert requests[0].headers["X-API-KEY"] == "test-key"
        assert requests[0].url.path == "/search"

    async def test_without_key_serves_mock(self):
        async with SerperClient(transport=failing_transport()) as client:
            assert client.is_configured is False
            results = await client.search_google("acme")
        assert results == mock_search_results("acme")

    async def test_api_failure_serves_mock(self):
        transport, _ = recording_transport([httpx.Response(500)])
        async with SerperClient(api_key="k", retry_config=NO_RETRY, transport=transport) as client:
            results = await client.search_google("acme")
        assert results == mock_search_results("acme")

    async def test_closed_client_raises(self):
        client = SerperClient(api_key="k", transport=failing_transport())
        await client.close()
        with pytest.raises(ExternalAPIError):
            await client.search_google("acme")


# ============================================================================
# PageSpeed
# ============================================================================

LIGHTHOUSE_RESPONSE = {
    "lighthouseResult": {
        "categories": {
            "performance": {"score": 0.87},
            "accessibility": {"score": 0.91},
            "best-practices": {"score": 1.0},
            "seo": {"score": 0.78},
        },
        "audits": {
            "largest-contentful-paint": {"numericValue": 2400},
            "max-potential-fid": {"numericValue": 120},
            "cumulative-layout-shift": {"numericValue": 0.05},
            "first-contentful-paint": {"numericValue": 1500},
            "server-response-time": {"numericValue": 600},
            "total-blocking-time": {"numericValue": 250},
            "unused-css-rules": {
                "score": 0.4, "description": "Unused CSS", "details": {"overallSavingsMs": 120},
            },
            "render-blocking-resources": {
                "score": 0.5, "description": "Blocking", "details": {"overallSavingsMs": 450},
            },
            "unminified-css": {
                "score": 0.95, "description": "Minify", "details": {"overallSavingsMs": 30},
            },
            "uses-text-compression": {
                "score": 0.2, "description": "Compress", "details": {"overallSavingsMs": 0},
            },
            "dom-size": {"score": 0.5, "numericValue": 1800},
        },
    },
}


class TestPageSpeedClient:
    """Tests for PageSpeedClient"""

    async def test_parses_lighthouse_result(self):
        transport, requests = recording_transport([httpx.Response(200, json=LIGHTHOUSE_RESPONSE)])
        async with PageSpeedClient(api_key="g-key", retry_config=NO_RETRY, transport=transport) as client:
            metrics = await client.analyze_url("example.com", "desktop")

        assert metrics.performance_score == 87
        assert metrics.accessibility_score == 91
        assert metrics.best_practices_score == 100
        assert metrics.seo_score == 78
        assert metrics.strategy == "desktop"
        assert metrics.is_mock is False

        vitals = metrics.core_web_vitals
        assert (vitals.lcp, vitals.fid, vitals.cls) == (2.4, 120, 0.05)
        assert (vitals.fcp, vitals.ttfb, vitals.tbt) == (1.5, 0.6, 250)

        assert [o.title for o in metrics.opportunities] == [
            "Eliminate render-blocking resources",
            "Remove unused CSS",
        ]
        assert metrics.opportunities[0].savings == "450ms"
        assert metrics.diagnostics[0].details == "Current DOM size: 1800 elements"

        params = requests[0].url.params
        assert params["url"] == "https://example.com"
        assert params["strategy"] == "desktop"
        assert params["key"] == "g-key"
        assert params.get_list("category") == ["performance", "accessibility", "best-practices", "seo"]

    async def test_missing_audits_use_defaults(self):
        transport, _ = recording_transport([httpx.Response(200, json={"lighthouseResult": {}})])
        async with PageSpeedClient(api_key="k", retry_config=NO_RETRY, transport=transport) as client:
            metrics = await client.analyze_url("https://example.com")

        vitals = metrics.core_web_vitals
        assert (vitals.lcp, vitals.fid, vitals.cls) == (2.5, 100, 0.1)
        assert metrics.performance_score == 0
        assert metrics.opportunities == []

    async def test_without_key_serves_deterministic_mock(self):
        async with PageSpeedClient(transport=failing_transport()) as client:
            metrics = await client.analyze_url("example.com")

        assert metrics.is_mock is True
        assert metrics == mock_pagespeed_metrics("https://example.com", "mobile")
        assert 60 <= metrics.performance_score <= 95

    async def test_api_failure_serves_mock(self):
        transport, _ = recording_transport([httpx.Response(403, json={"error": "forbidden"})])
        async with PageSpeedClient(api_key="bad", retry_config=NO_RETRY, transport=transport) as client:
            metrics = await client.analyze_url("https://example.com")
        assert metrics.is_mock is True

    async def test_both_strategies(self):
        async with PageSpeedClient(transport=failing_transport()) as client:
            results = await client.analyze_both_strategies("example.com")
        assert results["mobile"].strategy == "mobile"
        assert results["desktop"].strategy == "desktop"


# ============================================================================
# Configuration
# ============================================================================

class TestExternalAPIConfig:
    """Tests for ExternalAPIConfig and ExternalAPIClients"""

    @pytest.fixture
    def fresh_settings(self):
        get_settings.cache_clear()
        yield
        get_settings.cache_clear()

    @pytest.mark.parametrize("raw,expected", [("false", False), ("0", False), ("yes", True), ("", True)])
    def test_get_env_bool(self, monkeypatch, raw, expected):
        monkeypatch.setenv("SOME_FLAG", raw)
        assert get_env_bool("SOME_FLAG", True) is expected

    def test_explicit_keys(self, monkeypatch):
        monkeypatch.delenv("SERPER_ENABLED", raising=False)
        monkeypatch.delenv("PAGESPEED_ENABLED", raising=False)
        config = ExternalAPIConfig(serper_api_key="s", google_api_key="g", timeout=5)
        assert config.has_serper is True
        assert config.has_pagespeed is True
        assert config.timeout == 5

    def test_disabled_by_env(self, monkeypatch):
        monkeypatch.setenv("SERPER_ENABLED", "false")
        config = ExternalAPIConfig(serper_api_key="s", google_api_key="g")
        assert config.has_serper is False

    async def test_clients_are_lazy_and_closeable(self, monkeypatch):
        monkeypatch.setenv("SERPER_ENABLED", "false")
        monkeypatch.setenv("PAGESPEED_ENABLED", "false")
        clients = ExternalAPIClients(ExternalAPIConfig(serper_api_key="s", google_api_key="g"))

        serper = clients.serper
        assert clients.serper is serper
        assert clients.pagespeed is clients.pagespeed

        await clients.close()
        assert clients._serper is None

    async def test_disabled_flags_override_keys_from_env(self, monkeypatch, fresh_settings):
        monkeypatch.setenv("SERPER_API_KEY", "live-key")
        monkeypatch.setenv("GOOGLE_API_KEY", "live-key")
        monkeypatch.setenv("SERPER_ENABLED", "false")
        monkeypatch.setenv("PAGESPEED_ENABLED", "false")

        clients = ExternalAPIClients(ExternalAPIConfig())

        assert clients.config.has_serper is False
        assert clients.serper.is_configured is False
        assert clients.pagespeed.is_configured is False
        await clients.close()

    async def test_enabled_clients_pick_up_keys_from_env(self, monkeypatch, fresh_settings):
        monkeypatch.setenv("SERPER_API_KEY", "live-key")
        monkeypatch.setenv("GOOGLE_API_KEY", "live-key")
        monkeypatch.delenv("SERPER_ENABLED", raising=False)
        monkeypatch.delenv("PAGESPEED_ENABLED", raising=False)

        async with ExternalAPIClients(ExternalAPIConfig()) as clients:
            assert clients.serper.api_key == "live-key"
            assert clients.pagespeed.api_key == "live-key"

    async def test_factories_respect_enabled_flag(self, monkeypatch, fresh_settings):
        monkeypatch.setenv("SERPER_API_KEY", "live-key")
        monkeypatch.setenv("GOOGLE_API_KEY", "live-key")

        serper = create_serper_client(enabled=False)
        pagespeed = create_pagespeed_client(enabled=False)
        assert serper.is_configured is False
        assert pagespeed.is_configured is False
        await serper.close()
        await pagespeed.close()


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
