"""
Pytest Configuration and Shared Fixtures

Provides common fixtures and configuration for all test modules.
"""

import pytest
from dataclasses import replace
from datetime import datetime, timedelta, timezone
from typing import Any, Dict

from geotest.analyzer import SEOGEOAnalyzer
from geotest.models import (
    AIVisibilityMetrics,
    AuthorityMetrics,
    CompetitivePositionMetrics,
    ContentMetrics,
    ContentStructureMetrics,
    CoreWebVitals,
    GEOMetrics,
    InformationAccuracyMetrics,
    OptimizationMetrics,
    SEOMetrics,
    TechnicalMetrics,
    UserExperienceMetrics,
)
from geotest.persistence import MemoryKeyValueStore
from geotest.reports import ReportService, ViewerSession
from geotest.scoring import ScoringConfig


# ============================================================================
# Clocks
# ============================================================================

class FakeClock:
    """Controllable wall clock returning timezone-aware datetimes."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs):
        self.now += timedelta(**kwargs)


class FakeMonotonic:
    """Controllable monotonic clock in seconds."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2026, 1, 15, 12, 0, 0, tzinfo=timezone.utc))


@pytest.fixture
def monotonic() -> FakeMonotonic:
    return FakeMonotonic()


# ============================================================================
# Metric Bundle Builders
# ============================================================================

def build_seo(**overrides: Any) -> SEOMetrics:
    """
    SEO bundle where no recommendation rule fires.

    Overrides use ``section__field`` keys, e.g. ``technical__https_enabled=False``.
    """
    seo = SEOMetrics(
        score=85,
        technical=TechnicalMetrics(
            score=88, page_speed=90, mobile_responsive=True, https_enabled=True,
            xml_sitemap=True, robots_txt=True, canonical_tags=True, structured_data=True,
        ),
        content=ContentMetrics(
            score=80, title_tag=True, meta_description=True, heading_structure=90,
            content_length=1800, keyword_optimization=75, readability_score=78,
        ),
        authority=AuthorityMetrics(
            score=70, domain_age="6 years", domain_age_days=2200, backlinks=1200,
            domain_authority=55, trust_flow=40,
        ),
        user_experience=UserExperienceMetrics(
            score=85, core_web_vitals=CoreWebVitals(lcp=2.1, fid=80, cls=0.08),
            bounce_rate=40, avg_time_on_page=180,
        ),
    )
    return _apply_overrides(seo, overrides)


def build_geo(**overrides: Any) -> GEOMetrics:
    """GEO bundle where no recommendation rule fires."""
    geo = GEOMetrics(
        score=78,
        ai_visibility=AIVisibilityMetrics(
            score=80, chat_gpt=True, claude=True, perplexity=True, gemini=True, bing_chat=True,
        ),
        information_accuracy=InformationAccuracyMetrics(
            score=85, business_name_correct=True, services_accurate=True,
            contact_info_correct=True, location_accurate=True,
            last_updated="2026-01-01T00:00:00+00:00",
        ),
        content_structure=ContentStructureMetrics(
            score=80, semantic_html=True, clear_headers=True, faq_schema=True,
            definitive_sentences=True, citable_content=True,
        ),
        competitive_position=CompetitivePositionMetrics(
            score=65, mention_rate=40, ranking_position=3, authority_signals=70,
            unique_value_props=75,
        ),
        optimization=OptimizationMetrics(
            score=70, entity_recognition=True, knowledge_graph_presence=True,
            wikipedia_presence=False, industry_directories=True, consistent_nap=True,
        ),
    )
    return _apply_overrides(geo, overrides)


def _apply_overrides(bundle, overrides: Dict[str, Any]):
    top_level = {k: v for k, v in overrides.items() if "__" not in k}
    sections: Dict[str, Dict[str, Any]] = {}
    for key, value in overrides.items():
        if "__" in key:
            section, name = key.split("__", 1)
            sections.setdefault(section, {})[name] = value

    for section, changes in sections.items():
        top_level[section] = replace(getattr(bundle, section), **changes)
    return replace(bundle, **top_level)


@pytest.fixture
def seo_builder():
    return build_seo


@pytest.fixture
def geo_builder():
    return build_geo


# ============================================================================
# Service Fixtures
# ============================================================================

@pytest.fixture
def scoring_config() -> ScoringConfig:
    return ScoringConfig()


@pytest.fixture
def analyzer(clock, scoring_config) -> SEOGEOAnalyzer:
    """Analyzer with no collaborators: every value is deterministic."""
    return SEOGEOAnalyzer(scoring_config=scoring_config, clock=clock)


@pytest.fixture
async def sample_analysis(analyzer):
    return await analyzer.analyze("example.com")


@pytest.fixture
def memory_store() -> MemoryKeyValueStore:
    return MemoryKeyValueStore()


@pytest.fixture
def viewer() -> ViewerSession:
    return ViewerSession(user_agent="pytest-agent", screen_width=1280, session_id="sess_test_viewer")


@pytest.fixture
def report_service(memory_store, clock, viewer) -> ReportService:
    return ReportService(
        memory_store,
        base_url="https://geotest.test",
        clock=clock,
        session=viewer,
        analytics_limit=1000,
    )


# ============================================================================
# Test Markers
# ============================================================================

def pytest_configure(config):
    """Configure custom markers."""
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
