"""
Scoring Helper Functions and Constants

Contains score thresholds, badges, priority ordering and utility functions
used across all scoring calculations.
"""

import math
from typing import Dict, Optional, Sequence


# ============================================================================
# SCORE THRESHOLDS
# ============================================================================

SCORE_THRESHOLDS: Dict[str, int] = {
    "excellent": 90,
    "good": 80,
    "moderate": 70,
    "needs_work": 60,
    "poor": 0,
}

SCORE_BADGES: Dict[int, Dict[str, str]] = {
    90: {"text": "AI-Ready", "color": "green", "icon": "✓"},
    80: {"text": "Well Optimized", "color": "blue", "icon": "↑"},
    70: {"text": "Good Start", "color": "yellow", "icon": "→"},
    60: {"text": "Needs Work", "color": "orange", "icon": "!"},
    0: {"text": "Not Optimized", "color": "red", "icon": "✗"},
}


def get_score_message(score: float, score_type: str) -> str:
    """
    Human-readable verdict for a score.

    Args:
        score: Score (0-100)
        score_type: Category name interpolated into the message (e.g. "SEO")

    Returns:
        Message for the threshold band the score falls in
    """
    if score >= 90:
        return f"Excellent {score_type} implementation"
    if score >= 80:
        return f"Good {score_type} optimization"
    if score >= 70:
        return f"Moderate {score_type} performance"
    if score >= 60:
        return f"{score_type} needs improvement"
    return f"Poor {score_type} implementation"


def get_score_badge(score: float) -> Dict[str, str]:
    """Badge for the highest threshold the score reaches."""
    for threshold in sorted(SCORE_BADGES, reverse=True):
        if score >= threshold:
            return SCORE_BADGES[threshold]
    return SCORE_BADGES[0]


# ============================================================================
# PRIORITY ORDERING
# ============================================================================

PRIORITY_ORDER: Dict[str, int] = {
    "critical": 0,
    "high": 1,
    "medium": 2,
    "low": 3,
}


def get_priority_rank(priority: Optional[str]) -> int:
    """Sort rank for a priority; unranked priorities sort after all ranked ones."""
    if not priority:
        return len(PRIORITY_ORDER)
    return PRIORITY_ORDER.get(priority.lower(), len(PRIORITY_ORDER))


# ============================================================================
# AGGREGATION HELPERS
# ============================================================================

def round_half_up(value: float) -> int:
    """Round halves up: 2.5 -> 3, not 2."""
    return int(math.floor(value + 0.5))


def clamp_score(value: float, minimum: int = 0, maximum: int = 100) -> int:
    """Round and clamp to an integer score."""
    return min(maximum, max(minimum, round_half_up(value)))


def mean_score(values: Sequence[float]) -> int:
    """Rounded unweighted mean, clamped to [0, 100]."""
    if not values:
        return 0
    return clamp_score(sum(values) / len(values))


def calculate_weighted_score(
    values: Dict[str, float],
    weights: Dict[str, float],
) -> int:
    """
    Weighted sum of named components.

    Missing components count as 0.

    Args:
        values: Component name -> score (0-100)
        weights: Component name -> weight

    Returns:
        Rounded score clamped to [0, 100]
    """
    total = sum((values.get(name) or 0) * weight for name, weight in weights.items())
    return clamp_score(total)
