"""
Analyzer Module

Produces CombinedAnalysis results from a URL.

Example Usage:
    from geotest.analyzer import perform_seo_geo_analysis

    analysis = await perform_seo_geo_analysis("example.com")
    print(analysis.overall_score, analysis.recommendations[0].title)
"""

from .metrics import generate_seo_metrics, generate_geo_metrics, serp_position_bonus
from .competitors import generate_competitor_data
from .insights import (
    DetailedInsights,
    CompetitorInsights,
    generate_detailed_insights,
    generate_competitor_insights,
)
from .engine import (
    SEOGEOAnalyzer,
    perform_seo_geo_analysis,
    build_scoring_context,
    apply_score_overrides,
)

__all__ = [
    "generate_seo_metrics",
    "generate_geo_metrics",
    "serp_position_bonus",
    "generate_competitor_data",
    "DetailedInsights",
    "CompetitorInsights",
    "generate_detailed_insights",
    "generate_competitor_insights",
    "SEOGEOAnalyzer",
    "perform_seo_geo_analysis",
    "build_scoring_context",
    "apply_score_overrides",
]
