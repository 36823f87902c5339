"""
Scoring Module for GeoTest Analyzer

1. **Demo values** - deterministic pseudo-random metrics seeded by domain
2. **Score aggregation** - weighted SEO/GEO figures with the self-domain
   override and new-domain reweighting
3. **Recommendations** - rule-based, priority-sorted findings

Example Usage:
    from geotest.scoring import calculate_score, generate_recommendations

    result = calculate_score("example.com", {
        "domain_age": 900,
        "technical": 82,
        "content": 74,
        "performance": 88,
        "ai_technical": 70,
        "ai_readiness": 65,
        "ai_visibility": 58,
    })
    print(result.seo.score, result.geo.message)
"""

from .demo_values import (
    DemoValueGenerator,
    seeded_random,
    fnv1a_64,
    splitmix64,
)
from .helpers import (
    SCORE_THRESHOLDS,
    SCORE_BADGES,
    PRIORITY_ORDER,
    get_score_message,
    get_score_badge,
    get_priority_rank,
    round_half_up,
    clamp_score,
    mean_score,
    calculate_weighted_score,
)
from .logic import (
    GeoWeights,
    DEFAULT_WEIGHTS,
    NEW_SITE_WEIGHTS,
    ScoringConfig,
    ScoreVerdict,
    ScoreResult,
    calculate_score,
    calculate_seo_score,
    calculate_geo_score,
)
from .recommendations import (
    generate_recommendations,
    opportunity_recommendations,
    sort_by_priority,
)

__all__ = [
    # Demo values
    "DemoValueGenerator",
    "seeded_random",
    "fnv1a_64",
    "splitmix64",
    # Helpers
    "SCORE_THRESHOLDS",
    "SCORE_BADGES",
    "PRIORITY_ORDER",
    "get_score_message",
    "get_score_badge",
    "get_priority_rank",
    "round_half_up",
    "clamp_score",
    "mean_score",
    "calculate_weighted_score",
    # Aggregation
    "GeoWeights",
    "DEFAULT_WEIGHTS",
    "NEW_SITE_WEIGHTS",
    "ScoringConfig",
    "ScoreVerdict",
    "ScoreResult",
    "calculate_score",
    "calculate_seo_score",
    "calculate_geo_score",
    # Recommendations
    "generate_recommendations",
    "opportunity_recommendations",
    "sort_by_priority",
]
