"""
End-to-end tests for the analysis engine.

Tests cover:
1. A full run for a bare domain
2. Score overrides (self-domain demo, new-domain reweighting)
3. Error wrapping into AnalysisError
4. Narrative insights built on a finished analysis
"""

import json
import pytest
from unittest.mock import patch

from geotest.analyzer import (
    SEOGEOAnalyzer,
    build_scoring_context,
    generate_competitor_insights,
    generate_detailed_insights,
    generate_geo_metrics,
    perform_seo_geo_analysis,
)
from geotest.scoring import ScoringConfig
from geotest.scoring.helpers import get_priority_rank, round_half_up
from geotest.utils.config import get_settings
from geotest.utils.errors import AnalysisError, ErrorCategory, ValidationError, classify_error


# ============================================================================
# Full Run
# ============================================================================

class TestAnalyze:
    """Tests for SEOGEOAnalyzer.analyze"""

    async def test_bare_domain(self, sample_analysis, clock):
        analysis = sample_analysis

        assert analysis.url == "https://example.com"
        assert analysis.title == "Example.com"
        assert analysis.id.startswith("ana_")
        assert analysis.last_analyzed == clock()
        assert analysis.timestamp == clock().isoformat()

    async def test_overall_score_is_rounded_mean(self, sample_analysis):
        expected = round_half_up((sample_analysis.seo.score + sample_analysis.geo.score) / 2)
        assert sample_analysis.overall_score == expected

    async def test_recommendations_sorted(self, sample_analysis):
        ranks = [get_priority_rank(r.priority) for r in sample_analysis.recommendations]
        assert ranks == sorted(ranks)

    async def test_placeholder_competitors(self, sample_analysis):
        assert [c.name for c in sample_analysis.competitor_comparison] == [
            "Competitor A", "Competitor B", "Competitor C",
        ]

    async def test_deterministic_apart_from_id(self, analyzer, sample_analysis):
        again = await analyzer.analyze("https://www.example.com")
        assert again.id != sample_analysis.id
        assert again.overall_score == sample_analysis.overall_score
        assert again.seo == sample_analysis.seo
        assert again.geo == sample_analysis.geo

    async def test_scoring_block_recorded(self, sample_analysis):
        scoring = sample_analysis.scoring
        assert scoring["is_demo"] is False
        assert scoring["domain_age"] == sample_analysis.seo.authority.domain_age_days

    async def test_to_dict_is_json_serializable(self, sample_analysis):
        data = json.loads(json.dumps(sample_analysis.to_dict()))
        assert data["url"] == "https://example.com"
        assert data["seo"]["technical"]["https_enabled"] is True
        assert data["timestamp"] == data["last_analyzed"]


class TestScoreOverrides:
    """Tests for special scoring paths."""

    async def test_self_domain_gets_demo_scores(self, analyzer):
        analysis = await analyzer.analyze("geotest.ai")

        assert analysis.seo.score == 98
        assert analysis.geo.score == 95
        assert analysis.overall_score == 97
        assert analysis.scoring["is_demo"] is True
        assert analysis.scoring["explanation"]["title"] == "About This Score"

    async def test_new_domain_geo_score_replaced(self, clock):
        analyzer = SEOGEOAnalyzer(scoring_config=ScoringConfig(grace_period_days=10**6), clock=clock)
        analysis = await analyzer.analyze("example.com")

        assert analysis.scoring["is_new_domain"] is True
        assert analysis.geo.score == analysis.scoring["geo"]["score"]
        assert len(analysis.scoring["messages"]) == 3

    async def test_established_domain_keeps_generated_scores(self, clock):
        analyzer = SEOGEOAnalyzer(scoring_config=ScoringConfig(grace_period_days=0), clock=clock)
        analysis = await analyzer.analyze("example.com")
        generated = await generate_geo_metrics(analysis.url, now=clock())

        assert analysis.scoring["is_new_domain"] is False
        assert analysis.geo.score == generated.score

    def test_scoring_context_mapping(self, seo_builder, geo_builder):
        context = build_scoring_context(seo_builder(), geo_builder())
        assert context == {
            "domain_age": 2200,
            "technical": 88,
            "content": 80,
            "performance": 90,
            "ai_technical": 80,
            "ai_readiness": 78,
            "ai_visibility": 80,
        }


class TestErrors:
    """Tests for error wrapping."""

    async def test_empty_url_raises_analysis_error(self, analyzer):
        with pytest.raises(AnalysisError) as exc_info:
            await analyzer.analyze("   ")

        assert isinstance(exc_info.value.cause, ValidationError)
        assert classify_error(exc_info.value) == ErrorCategory.VALIDATION

    async def test_unexpected_failure_wrapped(self, analyzer):
        with patch("geotest.analyzer.engine.calculate_score", side_effect=RuntimeError("boom")):
            with pytest.raises(AnalysisError) as exc_info:
                await analyzer.analyze("example.com")

        assert exc_info.value.url == "example.com"
        assert isinstance(exc_info.value.__cause__, RuntimeError)


class TestEntryPoint:
    """Tests for perform_seo_geo_analysis"""

    async def test_uses_given_analyzer(self, analyzer):
        analysis = await perform_seo_geo_analysis("example.com", analyzer=analyzer)
        assert analysis.url == "https://example.com"

    async def test_builds_mock_clients_without_keys(self, monkeypatch):
        monkeypatch.delenv("SERPER_API_KEY", raising=False)
        monkeypatch.delenv("GOOGLE_API_KEY", raising=False)
        get_settings.cache_clear()
        try:
            analysis = await perform_seo_geo_analysis("example.com")
        finally:
            get_settings.cache_clear()

        assert analysis.url == "https://example.com"
        assert analysis.seo.user_experience.page_speed_insights is not None


# ============================================================================
# Insights
# ============================================================================

class TestInsights:
    """Tests for narrative insights."""

    async def test_detailed_insights(self, sample_analysis):
        insights = generate_detailed_insights(sample_analysis)

        assert insights.key_findings == [r.title for r in sample_analysis.recommendations[:3]]
        assert f"{sample_analysis.overall_score}/100" in insights.summary
        assert set(insights.to_dict()) == {
            "summary", "key_findings", "critical_issues", "opportunities", "competitive_advantages",
        }

    async def test_competitor_insights_flag_missing_ranking(self, sample_analysis):
        insights = generate_competitor_insights(sample_analysis)
        assert "Low search rankings allow competitors to capture majority of traffic" in insights.threats


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
