"""
Classifier

Maps probabilities to tiers and factor scores to impact labels.
Every assessment path (quantitative, holistic, legacy refiner) classifies
through these functions and nowhere else.
"""

import math
from typing import Optional

from .constants import (
    ChancesTier,
    ImpactLevel,
    TIER_BREAKPOINTS,
    TIER_ORDER,
    IMPACT_THRESHOLDS,
    MIN_PROBABILITY,
    MAX_PROBABILITY,
)


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positive values (2.5 -> 3), unlike round()."""
    return int(math.floor(value + 0.5))


def tier_from_probability(probability: float) -> ChancesTier:
    """
    Classify an admission probability (0-100) into a tier.

    Breakpoints: <15 unlikely, <30 reach, <50 target, <70 likely, else safety.
    """
    for upper, tier in TIER_BREAKPOINTS:
        if probability < upper:
            return tier
    return ChancesTier.SAFETY


def tier_rank(tier) -> int:
    """Ordinal of a tier, 0 (unlikely) to 4 (safety)."""
    return TIER_ORDER.index(ChancesTier(tier))


def impact_from_score(score: float) -> ImpactLevel:
    for lower, impact in IMPACT_THRESHOLDS:
        if score >= lower:
            return impact
    return ImpactLevel.STRONG_NEGATIVE


def clamp_probability(value: float, low: int = MIN_PROBABILITY, high: int = MAX_PROBABILITY) -> int:
    return max(low, min(high, round_half_up(value)))


def to_stored_chance(probability: int) -> float:
    """Probability as stored on a school-list row (decimal 0-1)."""
    return probability / 100


def from_stored_chance(stored: Optional[float]) -> Optional[int]:
    if stored is None:
        return None
    return round_half_up(stored * 100)
