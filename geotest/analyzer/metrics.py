"""
Metric Generators

Builds the SEO and GEO metric bundles for a URL.

SEO combines live collaborator data (Serper placement, PageSpeed scores)
with deterministic demo values seeded by the bare domain. GEO is fully
deterministic. The same domain always yields the same demo values, and a
collaborator failure only ever degrades a field to its demo value.
"""

import asyncio
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Awaitable, Callable, Optional

from ..cache.ttl_cache import TTLCache
from ..integrations.pagespeed import PageSpeedClient, PageSpeedMetrics
from ..integrations.serper import SerperClient, SerpMetrics
from ..models.analysis import (
    AIVisibilityMetrics,
    AuthorityMetrics,
    CompetitivePositionMetrics,
    ContentMetrics,
    ContentStructureMetrics,
    CoreWebVitals,
    GEOMetrics,
    InformationAccuracyMetrics,
    OptimizationMetrics,
    PageSpeedInsights,
    SEOMetrics,
    TechnicalMetrics,
    UserExperienceMetrics,
)
from ..scoring.demo_values import DemoValueGenerator
from ..scoring.helpers import mean_score, round_half_up
from ..utils.urls import extract_domain

logger = logging.getLogger(__name__)

# Authority never exceeds this, whatever the SERP bonus
AUTHORITY_CAP = 95

ANSWER_BOX_BONUS = 5

# Visibility flags: present when a 0-100 draw exceeds the threshold
AI_VISIBILITY_THRESHOLDS = {
    "chat_gpt": 60,
    "claude": 70,
    "perplexity": 50,
    "gemini": 65,
    "bing_chat": 55,
}


# =============================================================================
# COLLABORATOR LOOKUPS
# =============================================================================

async def _cached(
    cache: Optional[TTLCache],
    key: str,
    fetch_fn: Callable[[], Awaitable[Any]],
) -> Any:
    if cache is None:
        return await fetch_fn()
    return await cache.get_or_fetch(key, fetch_fn)


async def _lookup_serp(
    domain: str,
    serper: Optional[SerperClient],
    cache: Optional[TTLCache],
) -> Optional[SerpMetrics]:
    if serper is None:
        return None
    return await _cached(cache, f"serper:{domain}", lambda: serper.analyze_website_seo(domain))


async def _lookup_pagespeed(
    url: str,
    pagespeed: Optional[PageSpeedClient],
    cache: Optional[TTLCache],
) -> Optional[PageSpeedMetrics]:
    if pagespeed is None:
        return None
    return await _cached(cache, f"pagespeed:{url}:mobile", lambda: pagespeed.analyze_url(url, "mobile"))


# =============================================================================
# SEO
# =============================================================================

def serp_position_bonus(position: Optional[int]) -> int:
    """``(11 - position) * 2`` for positions 1-10, otherwise 0."""
    if position is None or not 1 <= position <= 10:
        return 0
    return max(0, (11 - position) * 2)


def format_domain_age(days: int) -> str:
    if days >= 365:
        years = days // 365
        return f"{years} year{'s' if years != 1 else ''}"
    months = max(1, days // 30)
    return f"{months} month{'s' if months != 1 else ''}"


def _demo_web_vitals(gen: DemoValueGenerator) -> CoreWebVitals:
    return CoreWebVitals(
        lcp=gen.uniform(1.5, 3.5, "lcp", precision=1),
        fid=gen.int_between(50, 150, "fid"),
        cls=gen.uniform(0.05, 0.2, "cls", precision=2),
    )


async def generate_seo_metrics(
    url: str,
    serper: Optional[SerperClient] = None,
    pagespeed: Optional[PageSpeedClient] = None,
    cache: Optional[TTLCache] = None,
) -> SEOMetrics:
    """
    Generate the SEO bundle for a URL.

    SERP and PageSpeed lookups run concurrently. A missing client, or one
    that raises, leaves the affected fields on their deterministic values.

    Args:
        url: Target URL or bare domain
        serper: SERP collaborator (optional)
        pagespeed: Page-speed collaborator (optional)
        cache: TTL cache in front of both collaborators (optional)

    Returns:
        SEOMetrics
    """
    domain = extract_domain(url)
    gen = DemoValueGenerator(domain, salt="seo")

    serp_result, ps_result = await asyncio.gather(
        _lookup_serp(domain, serper, cache),
        _lookup_pagespeed(url, pagespeed, cache),
        return_exceptions=True,
    )

    if isinstance(serp_result, Exception):
        logger.warning(f"SERP lookup failed for {domain}: {serp_result}")
        serp_result = None
    if isinstance(ps_result, Exception):
        logger.warning(f"PageSpeed lookup failed for {url}: {ps_result}")
        ps_result = None

    serp: Optional[SerpMetrics] = serp_result
    ps: Optional[PageSpeedMetrics] = ps_result

    # Technical
    technical = TechnicalMetrics(
        score=ps.seo_score if ps else gen.int_between(65, 95, "technical"),
        page_speed=ps.performance_score if ps else gen.int_between(60, 95, "page_speed"),
        mobile_responsive=gen.chance(20, "mobile_responsive"),
        https_enabled=url.lower().startswith("https") or gen.chance(30, "https"),
        xml_sitemap=gen.chance(40, "xml_sitemap"),
        robots_txt=gen.chance(50, "robots_txt"),
        canonical_tags=gen.chance(60, "canonical_tags"),
        structured_data=gen.chance(70, "structured_data"),
    )

    # Content
    content_score = gen.int_between(60, 90, "content")
    if serp and serp.has_answer_box:
        content_score = min(100, content_score + ANSWER_BOX_BONUS)

    content = ContentMetrics(
        score=content_score,
        title_tag=gen.chance(20, "title_tag"),
        meta_description=gen.chance(30, "meta_description"),
        heading_structure=gen.int_between(75, 95, "heading_structure"),
        content_length=gen.int_between(800, 2500, "content_length"),
        keyword_optimization=gen.int_between(60, 90, "keyword_optimization"),
        readability_score=gen.int_between(65, 85, "readability"),
    )

    # Authority
    position = serp.position if serp else None
    authority_score = min(
        AUTHORITY_CAP,
        gen.int_between(40, 85, "authority") + serp_position_bonus(position),
    )
    domain_age_days = gen.int_between(30, 15 * 365, "domain_age_days")

    authority = AuthorityMetrics(
        score=authority_score,
        domain_age=format_domain_age(domain_age_days),
        domain_age_days=domain_age_days,
        backlinks=gen.int_between(50, 5000, "backlinks"),
        domain_authority=gen.int_between(20, 70, "domain_authority"),
        trust_flow=gen.int_between(15, 60, "trust_flow"),
        serp_position=position,
        competitors=list(serp.top_competitors) if serp else [],
    )

    # User experience
    if ps:
        ux_score = round_half_up((ps.performance_score + ps.accessibility_score) / 2)
        web_vitals = ps.core_web_vitals
        insights = PageSpeedInsights(
            opportunities=list(ps.opportunities),
            diagnostics=list(ps.diagnostics),
        )
    else:
        ux_score = gen.int_between(70, 95, "user_experience")
        web_vitals = _demo_web_vitals(gen)
        insights = None

    user_experience = UserExperienceMetrics(
        score=ux_score,
        core_web_vitals=web_vitals,
        bounce_rate=gen.int_between(30, 70, "bounce_rate"),
        avg_time_on_page=gen.int_between(60, 300, "avg_time_on_page"),
        page_speed_insights=insights,
    )

    score = mean_score([technical.score, content.score, authority.score, user_experience.score])

    return SEOMetrics(
        score=score,
        technical=technical,
        content=content,
        authority=authority,
        user_experience=user_experience,
    )


# =============================================================================
# GEO
# =============================================================================

async def generate_geo_metrics(url: str, now: Optional[datetime] = None) -> GEOMetrics:
    """
    Generate the GEO bundle for a URL.

    Fully deterministic for a given domain; ``now`` only anchors the
    ``last_updated`` timestamp.
    """
    domain = extract_domain(url)
    gen = DemoValueGenerator(domain, salt="geo")
    now = now or datetime.now(timezone.utc)

    ai_visibility = AIVisibilityMetrics(
        score=gen.int_between(40, 85, "ai_visibility"),
        **{
            name: gen.chance(threshold, f"in_{name}")
            for name, threshold in AI_VISIBILITY_THRESHOLDS.items()
        },
    )

    last_updated = now - timedelta(days=gen.int_between(1, 180, "last_updated"))
    information_accuracy = InformationAccuracyMetrics(
        score=gen.int_between(50, 95, "information_accuracy"),
        business_name_correct=gen.chance(20, "business_name_correct"),
        services_accurate=gen.chance(40, "services_accurate"),
        contact_info_correct=gen.chance(30, "contact_info_correct"),
        location_accurate=gen.chance(25, "location_accurate"),
        last_updated=last_updated.isoformat(),
    )

    content_structure = ContentStructureMetrics(
        score=gen.int_between(60, 90, "content_structure"),
        semantic_html=gen.chance(40, "semantic_html"),
        clear_headers=gen.chance(35, "clear_headers"),
        faq_schema=gen.chance(70, "faq_schema"),
        definitive_sentences=gen.chance(50, "definitive_sentences"),
        citable_content=gen.chance(60, "citable_content"),
    )

    competitive_position = CompetitivePositionMetrics(
        score=gen.int_between(30, 80, "competitive_position"),
        mention_rate=gen.int_between(15, 75, "mention_rate"),
        ranking_position=gen.int_between(1, 10, "ranking_position"),
        authority_signals=gen.int_between(40, 85, "authority_signals"),
        unique_value_props=gen.int_between(50, 90, "unique_value_props"),
    )

    optimization = OptimizationMetrics(
        score=gen.int_between(45, 85, "optimization"),
        entity_recognition=gen.chance(65, "entity_recognition"),
        knowledge_graph_presence=gen.chance(80, "knowledge_graph_presence"),
        wikipedia_presence=gen.chance(90, "wikipedia_presence"),
        industry_directories=gen.chance(60, "industry_directories"),
        consistent_nap=gen.chance(40, "consistent_nap"),
    )

    score = mean_score([
        ai_visibility.score,
        information_accuracy.score,
        content_structure.score,
        competitive_position.score,
        optimization.score,
    ])

    return GEOMetrics(
        score=score,
        ai_visibility=ai_visibility,
        information_accuracy=information_accuracy,
        content_structure=content_structure,
        competitive_position=competitive_position,
        optimization=optimization,
    )
