"""
GeoTest Analyzer - Data Models

Shared data models used across the system.
"""

from .analysis import (
    CoreWebVitals,
    Opportunity,
    Diagnostic,
    PageSpeedInsights,
    TechnicalMetrics,
    ContentMetrics,
    AuthorityMetrics,
    UserExperienceMetrics,
    SEOMetrics,
    AIVisibilityMetrics,
    InformationAccuracyMetrics,
    ContentStructureMetrics,
    CompetitivePositionMetrics,
    OptimizationMetrics,
    GEOMetrics,
    Recommendation,
    CompetitorSummary,
    CombinedAnalysis,
)
from .reports import (
    CustomBranding,
    ShareSettings,
    ReportViewStats,
    ShareableReport,
    ViewActions,
    ReportAnalytics,
    SocialShareData,
)

__all__ = [
    # Analysis
    "CoreWebVitals",
    "Opportunity",
    "Diagnostic",
    "PageSpeedInsights",
    "TechnicalMetrics",
    "ContentMetrics",
    "AuthorityMetrics",
    "UserExperienceMetrics",
    "SEOMetrics",
    "AIVisibilityMetrics",
    "InformationAccuracyMetrics",
    "ContentStructureMetrics",
    "CompetitivePositionMetrics",
    "OptimizationMetrics",
    "GEOMetrics",
    "Recommendation",
    "CompetitorSummary",
    "CombinedAnalysis",
    # Reports
    "CustomBranding",
    "ShareSettings",
    "ReportViewStats",
    "ShareableReport",
    "ViewActions",
    "ReportAnalytics",
    "SocialShareData",
]
