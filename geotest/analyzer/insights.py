"""
Analysis Insights

Narrative findings layered on top of a finished analysis:
- Detailed insights: summary, critical issues, opportunities and advantages
- Competitor insights: SWOT-style strengths, weaknesses, opportunities, threats
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List

from ..models.analysis import CombinedAnalysis


@dataclass
class DetailedInsights:
    summary: str
    key_findings: List[str] = field(default_factory=list)
    critical_issues: List[str] = field(default_factory=list)
    opportunities: List[str] = field(default_factory=list)
    competitive_advantages: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "summary": self.summary,
            "key_findings": list(self.key_findings),
            "critical_issues": list(self.critical_issues),
            "opportunities": list(self.opportunities),
            "competitive_advantages": list(self.competitive_advantages),
        }


@dataclass
class CompetitorInsights:
    strengths: List[str] = field(default_factory=list)
    weaknesses: List[str] = field(default_factory=list)
    opportunities: List[str] = field(default_factory=list)
    threats: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "strengths": list(self.strengths),
            "weaknesses": list(self.weaknesses),
            "opportunities": list(self.opportunities),
            "threats": list(self.threats),
        }


def generate_detailed_insights(analysis: CombinedAnalysis) -> DetailedInsights:
    """Summarize the analysis in plain language."""
    seo, geo = analysis.seo, analysis.geo
    critical_issues: List[str] = []
    opportunities: List[str] = []
    advantages: List[str] = []

    # SEO
    if seo.technical.score < 60:
        critical_issues.append(
            f"Technical SEO needs immediate attention (score: {seo.technical.score}). "
            "Focus on page speed and mobile optimization."
        )
    if not seo.technical.https_enabled:
        critical_issues.append(
            "Website is not using HTTPS, which is critical for security and SEO rankings."
        )
    if seo.technical.page_speed < 50:
        critical_issues.append(
            f"Page speed is critically slow ({seo.technical.page_speed}/100). "
            "This severely impacts user experience and rankings."
        )
    if seo.content.score > 80:
        advantages.append(
            f"Strong content optimization (score: {seo.content.score}) provides a solid "
            "foundation for search visibility."
        )
    position = seo.authority.serp_position
    if position and position <= 10:
        advantages.append(
            f"Currently ranking in top 10 search results (position {position}) for target keywords."
        )

    # GEO
    if geo.ai_visibility.score < 50:
        critical_issues.append(
            f"Low AI visibility score ({geo.ai_visibility.score}/100). Your content is not "
            "being effectively recognized by AI search engines."
        )
    if not geo.ai_visibility.chat_gpt and not geo.ai_visibility.claude:
        critical_issues.append(
            "Website has no presence in major AI chatbots (ChatGPT, Claude). "
            "This is a missed opportunity for AI-driven traffic."
        )
    if geo.content_structure.score > 70:
        advantages.append(
            f"Well-structured content (score: {geo.content_structure.score}) helps AI systems "
            "understand and reference your information."
        )

    # Opportunities
    if seo.authority.backlinks < 100:
        opportunities.append(
            f"Build more high-quality backlinks (current: {seo.authority.backlinks}). "
            "Aim for 100+ from authoritative domains."
        )
    if not seo.technical.structured_data:
        opportunities.append(
            "Implement structured data (Schema.org) to help search engines and AI better "
            "understand your content."
        )
    if geo.competitive_position.score < 60:
        opportunities.append(
            "Analyze top competitors and identify content gaps to improve competitive "
            "positioning in AI search results."
        )

    overall = analysis.overall_score
    overall_health = "strong" if overall >= 70 else "moderate" if overall >= 50 else "weak"
    ai_readiness = "is well-positioned" if geo.score >= 60 else "needs improvement"

    summary = (
        f"Your website has {overall_health} digital visibility with a combined score of "
        f"{overall}/100. Traditional SEO performance is "
        f"{'good' if seo.score >= 70 else 'needs work'} ({seo.score}/100), while AI search "
        f"optimization {ai_readiness} ({geo.score}/100)."
    )
    if critical_issues:
        summary += f" There are {len(critical_issues)} critical issues requiring immediate attention."
    if opportunities:
        summary += f" We've identified {len(opportunities)} key opportunities for improvement."

    return DetailedInsights(
        summary=summary,
        key_findings=[rec.title for rec in analysis.recommendations[:3]],
        critical_issues=critical_issues,
        opportunities=opportunities,
        competitive_advantages=advantages,
    )


def generate_competitor_insights(analysis: CombinedAnalysis) -> CompetitorInsights:
    """SWOT view of the analyzed site against its competitors."""
    seo, geo = analysis.seo, analysis.geo
    insights = CompetitorInsights()

    if seo.score > 70:
        insights.strengths.append("Strong traditional SEO foundation provides competitive advantage")
    if geo.score > 60:
        insights.strengths.append("Early adopter advantage in AI search optimization")
    if seo.authority.domain_authority > 50:
        insights.strengths.append(
            f"High domain authority ({seo.authority.domain_authority}) establishes trust and credibility"
        )

    if seo.technical.score < 60:
        insights.weaknesses.append("Technical SEO issues may limit growth potential")
    if geo.information_accuracy.score < 70:
        insights.weaknesses.append("Information accuracy issues could damage AI search credibility")
    if seo.authority.backlinks < 100:
        insights.weaknesses.append("Limited backlink profile compared to established competitors")

    if any(c.geo_score > geo.score for c in analysis.competitor_comparison):
        insights.opportunities.append("Content gaps identified in competitor analysis can be leveraged")
    if not geo.ai_visibility.perplexity:
        insights.opportunities.append("Opportunity to become a primary source for Perplexity AI")
    if seo.user_experience.bounce_rate > 50:
        insights.opportunities.append("Improving user experience could significantly boost engagement metrics")

    if seo.authority.serp_position is None or seo.authority.serp_position > 20:
        insights.threats.append("Low search rankings allow competitors to capture majority of traffic")
    if geo.score < 40:
        insights.threats.append("Competitors with better AI optimization will dominate future search landscape")

    return insights
