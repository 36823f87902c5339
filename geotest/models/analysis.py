"""
Analysis Data Models

SEO and GEO metric bundles, recommendations and the combined result of one
analysis run. Every ``score`` field is an integer in [0, 100].
"""

from dataclasses import dataclass, field, asdict
from datetime import datetime
from typing import Dict, Any, List, Optional


# ============================================================================
# SHARED
# ============================================================================

@dataclass
class CoreWebVitals:
    """Core Web Vitals (seconds for lcp/fcp/ttfb, ms for fid/tbt)."""
    lcp: float
    fid: float
    cls: float
    fcp: Optional[float] = None
    ttfb: Optional[float] = None
    tbt: Optional[float] = None


@dataclass
class Opportunity:
    """PageSpeed improvement opportunity."""
    title: str
    description: str
    savings: str
    impact: str  # high | medium | low


@dataclass
class Diagnostic:
    """PageSpeed diagnostic."""
    title: str
    description: str
    details: str


@dataclass
class PageSpeedInsights:
    opportunities: List[Opportunity] = field(default_factory=list)
    diagnostics: List[Diagnostic] = field(default_factory=list)


# ============================================================================
# SEO
# ============================================================================

@dataclass
class TechnicalMetrics:
    score: int
    page_speed: int
    mobile_responsive: bool
    https_enabled: bool
    xml_sitemap: bool
    robots_txt: bool
    canonical_tags: bool
    structured_data: bool


@dataclass
class ContentMetrics:
    score: int
    title_tag: bool
    meta_description: bool
    heading_structure: int
    content_length: int  # words
    keyword_optimization: int
    readability_score: int


@dataclass
class AuthorityMetrics:
    score: int
    domain_age: str
    domain_age_days: int
    backlinks: int
    domain_authority: int
    trust_flow: int
    serp_position: Optional[int] = None
    competitors: List[str] = field(default_factory=list)


@dataclass
class UserExperienceMetrics:
    score: int
    core_web_vitals: CoreWebVitals
    bounce_rate: int
    avg_time_on_page: int  # seconds
    page_speed_insights: Optional[PageSpeedInsights] = None


@dataclass
class SEOMetrics:
    """Traditional search optimization bundle."""
    score: int
    technical: TechnicalMetrics
    content: ContentMetrics
    authority: AuthorityMetrics
    user_experience: UserExperienceMetrics

    def category_scores(self) -> Dict[str, int]:
        return {
            "technical": self.technical.score,
            "content": self.content.score,
            "authority": self.authority.score,
            "user_experience": self.user_experience.score,
        }

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


# ============================================================================
# GEO
# ============================================================================

@dataclass
class AIVisibilityMetrics:
    score: int
    chat_gpt: bool
    claude: bool
    perplexity: bool
    gemini: bool
    bing_chat: bool


@dataclass
class InformationAccuracyMetrics:
    score: int
    business_name_correct: bool
    services_accurate: bool
    contact_info_correct: bool
    location_accurate: bool
    last_updated: str  # ISO timestamp


@dataclass
class ContentStructureMetrics:
    score: int
    semantic_html: bool
    clear_headers: bool
    faq_schema: bool
    definitive_sentences: bool
    citable_content: bool


@dataclass
class CompetitivePositionMetrics:
    score: int
    mention_rate: int
    ranking_position: int
    authority_signals: int
    unique_value_props: int


@dataclass
class OptimizationMetrics:
    score: int
    entity_recognition: bool
    knowledge_graph_presence: bool
    wikipedia_presence: bool
    industry_directories: bool
    consistent_nap: bool  # Name, Address, Phone


@dataclass
class GEOMetrics:
    """Generative engine optimization bundle."""
    score: int
    ai_visibility: AIVisibilityMetrics
    information_accuracy: InformationAccuracyMetrics
    content_structure: ContentStructureMetrics
    competitive_position: CompetitivePositionMetrics
    optimization: OptimizationMetrics

    def category_scores(self) -> Dict[str, int]:
        return {
            "ai_visibility": self.ai_visibility.score,
            "information_accuracy": self.information_accuracy.score,
            "content_structure": self.content_structure.score,
            "competitive_position": self.competitive_position.score,
            "optimization": self.optimization.score,
        }

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


# ============================================================================
# RESULTS
# ============================================================================

@dataclass
class Recommendation:
    """One actionable finding."""
    category: str  # seo | geo | both | technical | content | schema | performance
    priority: str  # critical | high | medium | low | info
    title: str
    description: str
    impact: str
    effort: str  # easy | medium | hard
    estimated_time: str


@dataclass
class CompetitorSummary:
    name: str
    url: str
    seo_score: int
    geo_score: int
    strengths: List[str] = field(default_factory=list)
    weaknesses: List[str] = field(default_factory=list)


@dataclass
class CombinedAnalysis:
    """
    Result of one analysis run for one URL.

    Created once per run and not mutated afterwards. Persisting it is the
    caller's decision.
    """
    id: str
    url: str
    title: str
    overall_score: int
    seo: SEOMetrics
    geo: GEOMetrics
    recommendations: List[Recommendation]
    competitor_comparison: List[CompetitorSummary]
    last_analyzed: datetime
    scoring: Dict[str, Any] = field(default_factory=dict)

    @property
    def timestamp(self) -> str:
        return self.last_analyzed.isoformat()

    def to_dict(self) -> Dict[str, Any]:
        """Convert to JSON-friendly dictionary."""
        data = asdict(self)
        data["last_analyzed"] = self.last_analyzed.isoformat()
        data["timestamp"] = self.timestamp
        return data
