"""
Score Aggregation

Combines weighted sub-components into the SEO and GEO figures.

Special cases, evaluated in order:
1. Self-domain demo override - the product's own domain returns fixed
   demonstration scores and an explanation of why a brand-new domain can
   show high readiness without being indexed by AI systems yet
2. New-domain reweighting - domains younger than the grace period shift
   weight from AI visibility (unreliable before indexing) to technical and
   AI readiness
3. Regular path - weighted sums, clamped to [0, 100] and rounded
"""

import copy
import logging
from dataclasses import dataclass, field
from typing import Dict, Any, List, Mapping, Optional

from .helpers import calculate_weighted_score, get_score_message
from ..utils.config import get_settings
from ..utils.urls import extract_domain

logger = logging.getLogger(__name__)


# =============================================================================
# CONFIGURATION
# =============================================================================

@dataclass(frozen=True)
class GeoWeights:
    """Top-level GEO weight categories (sum to 1.0)."""
    technical: float = 0.40
    ai_readiness: float = 0.30
    ai_visibility: float = 0.30

    def as_dict(self) -> Dict[str, float]:
        return {
            "ai_technical": self.technical,
            "ai_readiness": self.ai_readiness,
            "ai_visibility": self.ai_visibility,
        }


DEFAULT_WEIGHTS = GeoWeights()

# Optimization matters more than visibility before AI systems index a site
NEW_SITE_WEIGHTS = GeoWeights(technical=0.50, ai_readiness=0.40, ai_visibility=0.10)

SEO_WEIGHTS: Dict[str, float] = {
    "technical": 0.4,
    "content": 0.3,
    "performance": 0.3,
}

NEW_SITE_MESSAGES: Dict[str, str] = {
    "new_site": "This is a newer domain. AI search engines may not have indexed it yet.",
    "optimized": "Site is well-optimized for AI discovery once indexed.",
    "timeline": "AI indexing typically takes 2-6 months for new domains.",
}

DEMO_SCORES: Dict[str, Dict[str, Any]] = {
    "seo": {"score": 98, "message": "Near-perfect SEO implementation"},
    "geo": {"score": 95, "message": "Optimally configured for AI discovery"},
}

DEMO_EXPLANATION: Dict[str, Any] = {
    "title": "About This Score",
    "content": [
        "GeoTest.ai scores reflect optimization readiness, not just current visibility.",
        "New domains (like ours) may not appear in AI search results yet.",
        "High scores indicate the site is properly configured for AI indexing.",
        "AI visibility typically improves over 2-6 months as search engines discover new sites.",
    ],
}


@dataclass
class ScoringConfig:
    """
    Scoring configuration.

    Defaults come from Settings (SELF_DOMAINS, SELF_TEST_ENABLED,
    NEW_DOMAIN_GRACE_DAYS) when built with ``from_settings``.
    """
    self_domains: List[str] = field(default_factory=lambda: ["geotest.ai", "www.geotest.ai"])
    self_test_enabled: bool = True
    grace_period_days: int = 180
    weights: GeoWeights = DEFAULT_WEIGHTS
    new_site_weights: GeoWeights = NEW_SITE_WEIGHTS
    seo_weights: Dict[str, float] = field(default_factory=lambda: dict(SEO_WEIGHTS))
    demo_scores: Dict[str, Dict[str, Any]] = field(default_factory=lambda: copy.deepcopy(DEMO_SCORES))
    demo_explanation: Dict[str, Any] = field(default_factory=lambda: copy.deepcopy(DEMO_EXPLANATION))

    @classmethod
    def from_settings(cls) -> "ScoringConfig":
        settings = get_settings()
        return cls(
            self_domains=list(settings.SELF_DOMAINS),
            self_test_enabled=settings.SELF_TEST_ENABLED,
            grace_period_days=settings.NEW_DOMAIN_GRACE_DAYS,
        )

    def is_self_domain(self, domain: str) -> bool:
        bare = extract_domain(domain)
        return any(extract_domain(d) == bare for d in self.self_domains)


# =============================================================================
# RESULTS
# =============================================================================

@dataclass
class ScoreVerdict:
    score: int
    message: str

    def to_dict(self) -> Dict[str, Any]:
        return {"score": self.score, "message": self.message}


@dataclass
class ScoreResult:
    """Aggregated SEO and GEO figures plus the path that produced them."""
    seo: ScoreVerdict
    geo: ScoreVerdict
    is_demo: bool = False
    explanation: Optional[Dict[str, Any]] = None
    is_new_domain: bool = False
    domain_age: int = 0
    weights: Dict[str, float] = field(default_factory=dict)
    messages: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "seo": self.seo.to_dict(),
            "geo": self.geo.to_dict(),
            "is_demo": self.is_demo,
            "explanation": self.explanation,
            "is_new_domain": self.is_new_domain,
            "domain_age": self.domain_age,
            "weights": dict(self.weights),
            "messages": list(self.messages),
        }


# =============================================================================
# CALCULATION
# =============================================================================

def calculate_seo_score(analysis: Mapping[str, Any], config: ScoringConfig) -> ScoreVerdict:
    """Traditional SEO: technical, content and performance."""
    score = calculate_weighted_score(
        {
            "technical": analysis.get("technical", 0),
            "content": analysis.get("content", 0),
            "performance": analysis.get("performance", 0),
        },
        config.seo_weights,
    )
    return ScoreVerdict(score=score, message=get_score_message(score, "SEO"))


def calculate_geo_score(analysis: Mapping[str, Any], weights: GeoWeights) -> ScoreVerdict:
    """AI optimization: technical, readiness and visibility."""
    score = calculate_weighted_score(
        {
            "ai_technical": analysis.get("ai_technical", 0),
            "ai_readiness": analysis.get("ai_readiness", 0),
            "ai_visibility": analysis.get("ai_visibility", 0),
        },
        weights.as_dict(),
    )
    return ScoreVerdict(score=score, message=get_score_message(score, "GEO"))


def calculate_score(
    domain: str,
    analysis: Mapping[str, Any],
    config: Optional[ScoringConfig] = None,
) -> ScoreResult:
    """
    Aggregate scores for a domain.

    Args:
        domain: Domain or URL being scored
        analysis: Context with keys ``domain_age`` (days), ``technical``,
            ``content``, ``performance``, ``ai_technical``, ``ai_readiness``
            and ``ai_visibility`` (each 0-100; missing keys count as 0)
        config: Scoring configuration (defaults to settings-backed config)

    Returns:
        ScoreResult
    """
    config = config or ScoringConfig.from_settings()
    analysis = analysis or {}

    if config.self_test_enabled and config.is_self_domain(domain):
        logger.info(f"Self-domain {domain}: returning demonstration scores")
        return ScoreResult(
            seo=ScoreVerdict(**config.demo_scores["seo"]),
            geo=ScoreVerdict(**config.demo_scores["geo"]),
            is_demo=True,
            explanation=copy.deepcopy(config.demo_explanation),
        )

    domain_age = int(analysis.get("domain_age") or 0)
    is_new_domain = domain_age < config.grace_period_days
    weights = config.new_site_weights if is_new_domain else config.weights

    if is_new_domain:
        logger.debug(f"{domain} is {domain_age} days old, using new-site weights")

    return ScoreResult(
        seo=calculate_seo_score(analysis, config),
        geo=calculate_geo_score(analysis, weights),
        is_new_domain=is_new_domain,
        domain_age=domain_age,
        weights=weights.as_dict(),
        messages=list(NEW_SITE_MESSAGES.values()) if is_new_domain else [],
    )
