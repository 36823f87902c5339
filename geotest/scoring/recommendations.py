"""
Recommendation Engine

Turns SEO and GEO metric bundles into an ordered list of actionable
recommendations.

Rules fire in a fixed order and are then stably sorted by priority
(critical < high < medium < low, anything else last), so recommendations of
equal priority keep the order their rules appear in below. Overlapping rules
are not deduplicated.
"""

import logging
from typing import List

from .helpers import get_priority_rank
from ..models.analysis import GEOMetrics, Opportunity, Recommendation, SEOMetrics

logger = logging.getLogger(__name__)

# Page-speed opportunities surfaced as recommendations
MAX_OPPORTUNITY_RECOMMENDATIONS = 3

IMPACT_ORDER = {"high": 0, "medium": 1, "low": 2}


# =============================================================================
# RULES
# =============================================================================

def _seo_rules(seo: SEOMetrics) -> List[Recommendation]:
    recs = []

    if not seo.technical.https_enabled:
        recs.append(Recommendation(
            category="seo",
            priority="critical",
            title="Enable HTTPS",
            description="Your site is not using HTTPS. This is a critical security and SEO issue.",
            impact="Major ranking boost and security improvement",
            effort="medium",
            estimated_time="2-4 hours",
        ))

    if seo.technical.page_speed < 70:
        recs.append(Recommendation(
            category="seo",
            priority="high",
            title="Improve Page Speed",
            description="Your page loads slowly. Optimize images, minify code, and enable caching.",
            impact="10-20% improvement in rankings and conversions",
            effort="medium",
            estimated_time="4-8 hours",
        ))

    if not seo.content.title_tag or not seo.content.meta_description:
        recs.append(Recommendation(
            category="seo",
            priority="high",
            title="Optimize Meta Tags",
            description="Missing or unoptimized title tags and meta descriptions.",
            impact="Better click-through rates from search results",
            effort="easy",
            estimated_time="1-2 hours",
        ))

    return recs


def _geo_rules(geo: GEOMetrics) -> List[Recommendation]:
    recs = []

    if geo.ai_visibility.score < 60:
        recs.append(Recommendation(
            category="geo",
            priority="critical",
            title="Improve AI Visibility",
            description=(
                "Your website has low visibility in AI search results. "
                "Focus on clear, definitive content."
            ),
            impact="Dramatically increase mentions in AI responses",
            effort="medium",
            estimated_time="6-10 hours",
        ))

    if not geo.content_structure.faq_schema:
        recs.append(Recommendation(
            category="geo",
            priority="high",
            title="Add FAQ Schema Markup",
            description="Implement FAQ schema to help AI understand your content better.",
            impact="Higher chance of being cited by AI",
            effort="easy",
            estimated_time="2-3 hours",
        ))

    if not geo.optimization.consistent_nap:
        recs.append(Recommendation(
            category="geo",
            priority="high",
            title="Fix NAP Consistency",
            description="Your business name, address, and phone are inconsistent across the web.",
            impact="Better local AI recognition and trust",
            effort="easy",
            estimated_time="1-2 hours",
        ))

    return recs


def _shared_rules(seo: SEOMetrics, geo: GEOMetrics) -> List[Recommendation]:
    recs = []

    if seo.content.content_length < 1000:
        recs.append(Recommendation(
            category="both",
            priority="high",
            title="Expand Content Depth",
            description=(
                "Your content is too thin. Both search engines and AI prefer "
                "comprehensive content."
            ),
            impact="Better rankings and AI understanding",
            effort="medium",
            estimated_time="4-6 hours",
        ))

    if not seo.technical.structured_data or not geo.content_structure.semantic_html:
        recs.append(Recommendation(
            category="both",
            priority="high",
            title="Implement Structured Data",
            description=(
                "Add schema markup and semantic HTML to help both Google and AI "
                "understand your content."
            ),
            impact="Improved visibility in both traditional and AI search",
            effort="medium",
            estimated_time="3-5 hours",
        ))

    return recs


def _discoverability_rules(seo: SEOMetrics, geo: GEOMetrics) -> List[Recommendation]:
    """Crawlability, device support and AI assistant coverage."""
    recs = []

    if not seo.technical.xml_sitemap:
        recs.append(Recommendation(
            category="both",
            priority="medium",
            title="Create XML Sitemap",
            description=(
                "Generate and submit an XML sitemap to help search engines and "
                "AI crawlers discover all your content."
            ),
            impact="Ensure 100% content discoverability",
            effort="easy",
            estimated_time="1 hour",
        ))

    if not seo.technical.mobile_responsive:
        recs.append(Recommendation(
            category="seo",
            priority="high",
            title="Make Site Mobile Responsive",
            description=(
                "Your pages do not adapt to small screens. Google indexes the "
                "mobile version of your site first."
            ),
            impact="Protects rankings under mobile-first indexing",
            effort="medium",
            estimated_time="1-2 days",
        ))

    if not geo.ai_visibility.chat_gpt and not geo.ai_visibility.claude:
        recs.append(Recommendation(
            category="geo",
            priority="high",
            title="Get Cited by Major AI Assistants",
            description=(
                "Your website has no presence in ChatGPT or Claude. Publish "
                "comprehensive, authoritative content on your key topics."
            ),
            impact="Tap into AI-driven traffic from assistant users",
            effort="hard",
            estimated_time="2-3 weeks",
        ))

    if geo.information_accuracy.score < 70:
        recs.append(Recommendation(
            category="geo",
            priority="medium",
            title="Correct Business Information",
            description=(
                "AI systems are reporting inaccurate details about your business. "
                "Keep your name, services and contact details consistent everywhere."
            ),
            impact="Fewer wrong answers about your business in AI responses",
            effort="easy",
            estimated_time="2-4 hours",
        ))

    return recs


def opportunity_recommendations(
    opportunities: List[Opportunity],
    limit: int = MAX_OPPORTUNITY_RECOMMENDATIONS,
) -> List[Recommendation]:
    """
    Convert the highest-impact page-speed opportunities to recommendations.

    High-impact opportunities become critical, everything else high.
    """
    ranked = sorted(opportunities, key=lambda o: IMPACT_ORDER.get(o.impact, len(IMPACT_ORDER)))
    return [
        Recommendation(
            category="performance",
            priority="critical" if opp.impact == "high" else "high",
            title=opp.title,
            description=opp.description,
            impact=f"Potential savings: {opp.savings}",
            effort="medium",
            estimated_time="2-4 hours",
        )
        for opp in ranked[:limit]
    ]


# =============================================================================
# PUBLIC API
# =============================================================================

def sort_by_priority(recommendations: List[Recommendation]) -> List[Recommendation]:
    """Stable sort by priority rank; unknown priorities go last."""
    return sorted(recommendations, key=lambda r: get_priority_rank(r.priority))


def generate_recommendations(seo: SEOMetrics, geo: GEOMetrics) -> List[Recommendation]:
    """
    Generate prioritized recommendations.

    Args:
        seo: SEO metric bundle
        geo: GEO metric bundle

    Returns:
        Recommendations sorted by priority
    """
    recs: List[Recommendation] = []
    recs.extend(_seo_rules(seo))
    recs.extend(_geo_rules(geo))
    recs.extend(_shared_rules(seo, geo))
    recs.extend(_discoverability_rules(seo, geo))

    insights = seo.user_experience.page_speed_insights
    if insights and insights.opportunities:
        recs.extend(opportunity_recommendations(insights.opportunities))

    logger.debug(f"Generated {len(recs)} recommendations")
    return sort_by_priority(recs)
