"""
Analysis Engine - Orchestrates one SEO + GEO analysis run.

This engine coordinates:
1. URL normalization (HTTPS, bare domain for seeding and display)
2. SEO and GEO metric generation, concurrently
3. Score aggregation (self-domain override, new-domain reweighting)
4. Recommendations and competitor summaries

Any failure surfaces as a single AnalysisError.
"""

import asyncio
import logging
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional
from uuid import uuid4

from .competitors import generate_competitor_data
from .metrics import generate_geo_metrics, generate_seo_metrics
from ..cache.ttl_cache import TTLCache
from ..integrations.config import ExternalAPIClients
from ..integrations.pagespeed import PageSpeedClient
from ..integrations.serper import SerperClient
from ..models.analysis import CombinedAnalysis, GEOMetrics, SEOMetrics
from ..scoring.helpers import mean_score, round_half_up
from ..scoring.logic import ScoreResult, ScoringConfig, calculate_score
from ..scoring.recommendations import generate_recommendations
from ..utils.errors import AnalysisError
from ..utils.urls import display_title, extract_domain, normalize_url

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def build_scoring_context(seo: SEOMetrics, geo: GEOMetrics) -> Dict[str, Any]:
    """Map metric bundles onto the aggregator's input components."""
    return {
        "domain_age": seo.authority.domain_age_days,
        "technical": seo.technical.score,
        "content": seo.content.score,
        "performance": seo.technical.page_speed,
        "ai_technical": geo.content_structure.score,
        "ai_readiness": mean_score([
            geo.optimization.score,
            geo.information_accuracy.score,
        ]),
        "ai_visibility": geo.ai_visibility.score,
    }


def apply_score_overrides(
    seo: SEOMetrics,
    geo: GEOMetrics,
    result: ScoreResult,
):
    """
    Substitute aggregator figures into the bundles where a special case applies.

    Demo results replace both top-level scores; new-domain results replace
    the GEO score. Category scores are left as generated.
    """
    if result.is_demo:
        return replace(seo, score=result.seo.score), replace(geo, score=result.geo.score)
    if result.is_new_domain:
        return seo, replace(geo, score=result.geo.score)
    return seo, geo


class SEOGEOAnalyzer:
    """
    Runs complete analyses.

    Collaborators are injected; a missing client leaves its fields on
    deterministic demo values.

    Usage:
        analyzer = SEOGEOAnalyzer(serper=serper, pagespeed=pagespeed, cache=TTLCache())
        analysis = await analyzer.analyze("example.com")
    """

    def __init__(
        self,
        serper: Optional[SerperClient] = None,
        pagespeed: Optional[PageSpeedClient] = None,
        cache: Optional[TTLCache] = None,
        scoring_config: Optional[ScoringConfig] = None,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.serper = serper
        self.pagespeed = pagespeed
        self.cache = cache
        self.scoring_config = scoring_config
        self.clock = clock

    async def analyze(self, url: str) -> CombinedAnalysis:
        """
        Run one analysis.

        Args:
            url: User input, with or without scheme

        Returns:
            CombinedAnalysis

        Raises:
            AnalysisError: wrapping whatever went wrong
        """
        try:
            return await self._analyze(url)
        except AnalysisError:
            raise
        except Exception as e:
            logger.error(f"Analysis failed for {url}: {e}")
            raise AnalysisError(url, e) from e

    async def _analyze(self, url: str) -> CombinedAnalysis:
        normalized_url = normalize_url(url)
        domain = extract_domain(normalized_url)
        now = self.clock()

        logger.info(f"Starting analysis for {domain}")

        seo, geo = await asyncio.gather(
            generate_seo_metrics(
                normalized_url,
                serper=self.serper,
                pagespeed=self.pagespeed,
                cache=self.cache,
            ),
            generate_geo_metrics(normalized_url, now=now),
        )

        scoring = calculate_score(
            domain,
            build_scoring_context(seo, geo),
            self.scoring_config,
        )
        seo, geo = apply_score_overrides(seo, geo, scoring)

        overall_score = round_half_up((seo.score + geo.score) / 2)
        recommendations = generate_recommendations(seo, geo)
        competitors = generate_competitor_data(normalized_url, seo.authority.competitors)

        logger.info(
            f"Analysis complete for {domain}: overall={overall_score}, "
            f"seo={seo.score}, geo={geo.score}, recommendations={len(recommendations)}"
        )

        return CombinedAnalysis(
            id=f"ana_{uuid4().hex[:12]}",
            url=normalized_url,
            title=display_title(domain),
            overall_score=overall_score,
            seo=seo,
            geo=geo,
            recommendations=recommendations,
            competitor_comparison=competitors,
            last_analyzed=now,
            scoring=scoring.to_dict(),
        )


async def perform_seo_geo_analysis(
    url: str,
    analyzer: Optional[SEOGEOAnalyzer] = None,
) -> CombinedAnalysis:
    """
    Analyze a URL.

    Without an analyzer, clients are built from settings for this one call
    and closed afterwards.

    Raises:
        AnalysisError: on any failure
    """
    if analyzer is not None:
        return await analyzer.analyze(url)

    async with ExternalAPIClients() as clients:
        analyzer = SEOGEOAnalyzer(
            serper=clients.serper,
            pagespeed=clients.pagespeed,
            cache=TTLCache.from_config(),
        )
        return await analyzer.analyze(url)
