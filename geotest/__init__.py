"""
GeoTest Analyzer

Scores websites for traditional search (SEO) and generative engine
optimization (GEO):
1. Generates SEO and GEO metric bundles (live signals where available)
2. Aggregates them into category and overall scores
3. Emits prioritized recommendations
4. Wraps analyses in shareable, password-gated reports with view analytics
"""

__version__ = "0.1.0"
