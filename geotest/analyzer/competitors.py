"""
Competitor Summaries

Side-by-side SEO/GEO figures for up to three competitors. Domains found in
the SERP lookup are used when available; otherwise placeholder competitors
are listed. Scores are deterministic per (target, competitor) pair.
"""

from typing import List, Optional

from ..models.analysis import CompetitorSummary
from ..scoring.demo_values import DemoValueGenerator
from ..utils.urls import display_title, extract_domain

MAX_COMPETITORS = 3

PLACEHOLDER_COMPETITORS = [
    ("Competitor A", "competitor-a.com"),
    ("Competitor B", "competitor-b.com"),
    ("Competitor C", "competitor-c.com"),
]


def _summarize(target: str, name: str, domain: str) -> CompetitorSummary:
    gen = DemoValueGenerator(f"{target}|{domain}", salt="competitor")
    seo_score = gen.int_between(60, 89, "seo")
    geo_score = gen.int_between(55, 89, "geo")

    return CompetitorSummary(
        name=name,
        url=f"https://{domain}",
        seo_score=seo_score,
        geo_score=geo_score,
        strengths=[
            "Strong technical SEO" if seo_score > 80 else "Good content optimization",
            "High AI visibility" if geo_score > 75 else "Growing AI presence",
        ],
        weaknesses=[
            "Poor page speed" if seo_score < 70 else "Limited backlinks",
            "Low AI citations" if geo_score < 65 else "Outdated information",
        ],
    )


def generate_competitor_data(
    url: str,
    serp_competitors: Optional[List[str]] = None,
) -> List[CompetitorSummary]:
    """
    Build competitor summaries for a URL.

    Args:
        url: Target URL or domain
        serp_competitors: Competitor domains from the SERP lookup

    Returns:
        Up to three CompetitorSummary entries
    """
    target = extract_domain(url)

    if serp_competitors:
        domains = [extract_domain(d) for d in serp_competitors][:MAX_COMPETITORS]
        candidates = [(display_title(d), d) for d in domains if d]
    else:
        candidates = PLACEHOLDER_COMPETITORS

    return [_summarize(target, name, domain) for name, domain in candidates]
