"""
Dimension Scorers

Individual scoring functions for each quantitative factor.
Each scorer produces a FactorAssessment with a 0-100 score.
All logic is deterministic - no AI/ML components, no I/O.
Missing inputs produce a neutral score of 50, never an error.
"""

from typing import Optional, Tuple

from ..snapshot.contracts import ProfileSnapshot
from .classifier import impact_from_score, round_half_up
from .contracts import SchoolData, FactorAssessment
from .constants import (
    ImpactLevel,
    NEUTRAL_SCORE,
    GPA_AVG_SLIGHTLY_BELOW,
    GPA_SELECTIVITY_BENCHMARKS,
    GPA_BENCHMARK_STEP,
    CLASS_RANK_MAX_ADJUSTMENT,
    CLASS_RANK_CALLOUT_PERCENTILE,
    ACADEMICS_FLOOR,
    SAT_BENCHMARKS,
    SAT_BENCHMARK_STEP,
    SAT_MAX,
    TESTING_FLOOR,
    ACT_TO_SAT,
    ACT_TABLE_MIN,
    ACT_TABLE_MAX,
    ACCEPTANCE_RATE_BANDS,
    ACCEPTANCE_RATE_MAX_SCORE,
)


def _neutral(details: str) -> FactorAssessment:
    return FactorAssessment(score=NEUTRAL_SCORE, impact=ImpactLevel.NEUTRAL, details=details)


def _assessment(score: float, details: str) -> FactorAssessment:
    score = round_half_up(max(0.0, min(100.0, score)))
    return FactorAssessment(score=score, impact=impact_from_score(score), details=details)


def known_rate(school: SchoolData) -> Optional[float]:
    """Acceptance rate if usable; zero or missing counts as unknown."""
    if school.acceptance_rate is None or school.acceptance_rate <= 0:
        return None
    return school.acceptance_rate


def _benchmark_for(rate: Optional[float], benchmarks):
    # Unknown rate falls through to the least selective benchmark
    for upper, target, tolerance, label in benchmarks:
        if rate is not None and rate < upper:
            return target, tolerance, label
    _, target, tolerance, label = benchmarks[-1]
    return target, tolerance, label


# =============================================================================
# HELPER CURVES
# =============================================================================

def target_band_score(value: float, target: float, tolerance: float, step: float, floor: float = 20) -> float:
    """
    Score a value against a benchmark target.

    Meeting the target scores 85 and each `step` above adds 10 (max 100).
    Within `tolerance` below the target the score falls linearly to 50,
    then keeps falling to `floor`.
    """
    diff = value - target
    if diff >= 0:
        return min(100.0, 85 + diff / step * 10)
    if diff >= -tolerance:
        return 85 + (diff / tolerance) * 35
    return max(floor, 50 + (diff + tolerance) / tolerance * 30)


def act_to_sat(act: int) -> int:
    """Convert an ACT composite to its SAT-total equivalent."""
    if act in ACT_TO_SAT:
        return ACT_TO_SAT[act]
    if act > ACT_TABLE_MAX:
        return SAT_MAX
    # Below the table: linear extrapolation
    return 1000 + (act - 16) * 30


def school_sat_band(school: SchoolData) -> Optional[Tuple[int, int]]:
    """The school's 25th/75th SAT band, or its ACT band converted to SAT."""
    if school.sat_range_25 and school.sat_range_75:
        return school.sat_range_25, school.sat_range_75
    if school.act_range_25 and school.act_range_75:
        return act_to_sat(school.act_range_25), act_to_sat(school.act_range_75)
    return None


# =============================================================================
# FACTOR ASSESSMENTS
# =============================================================================

def assess_academics(profile: ProfileSnapshot, school: SchoolData) -> FactorAssessment:
    """
    Assess academic strength (GPA, class rank).

    Compares GPA to the school's average when published, otherwise to a
    selectivity benchmark derived from the acceptance rate.
    """
    gpa = profile.academics.gpa_unweighted
    if not gpa:
        return _neutral("GPA not provided - cannot assess academic standing")

    school_avg = school.avg_gpa_unweighted
    if not school_avg:
        target, tolerance, label = _benchmark_for(known_rate(school), GPA_SELECTIVITY_BENCHMARKS)
        score = target_band_score(gpa, target, tolerance, GPA_BENCHMARK_STEP, floor=ACADEMICS_FLOOR)
        details = f"GPA {gpa:.2f} for {label}" if label else f"GPA {gpa:.2f}"
    else:
        diff = gpa - school_avg
        if diff >= 0:
            score = 85 + min(diff * 50, 15)
            details = f"Your GPA {gpa:.2f} is at or above the school average of {school_avg:.2f}"
        elif diff >= GPA_AVG_SLIGHTLY_BELOW:
            score = 85 + diff * 175
            details = f"Your GPA {gpa:.2f} is slightly below the school average of {school_avg:.2f}"
        else:
            score = max(ACADEMICS_FLOOR, 50 + (diff - GPA_AVG_SLIGHTLY_BELOW) * 100)
            details = f"Your GPA {gpa:.2f} is below the school average of {school_avg:.2f}"

    percentile = profile.academics.percentile
    if percentile is not None:
        rank_adjustment = (percentile - 50) / 50 * CLASS_RANK_MAX_ADJUSTMENT
        rank_adjustment = max(-CLASS_RANK_MAX_ADJUSTMENT, min(CLASS_RANK_MAX_ADJUSTMENT, rank_adjustment))
        score += rank_adjustment
        if percentile >= CLASS_RANK_CALLOUT_PERCENTILE:
            details += f" (top {100 - percentile}% of class)"

    return _assessment(score, details)


def assess_testing(profile: ProfileSnapshot, school: SchoolData) -> FactorAssessment:
    """
    Assess testing strength (SAT, or ACT converted to SAT).
    """
    sat = profile.testing.sat.total if profile.testing.sat else None
    act = profile.testing.act.composite if profile.testing.act else None

    if not sat and not act:
        return _neutral("No test scores provided")

    sat_equivalent = sat or act_to_sat(act)
    shown = f"SAT {sat}" if sat else f"ACT {act} (SAT equivalent {sat_equivalent})"

    band = school_sat_band(school)
    if band is None:
        target, tolerance, tier_label = _benchmark_for(known_rate(school), SAT_BENCHMARKS)
        score = target_band_score(sat_equivalent, target, tolerance, SAT_BENCHMARK_STEP, floor=20)
        details = f"{shown} for {tier_label}" if tier_label else shown
        return _assessment(score, details)

    range25, range75 = band
    median = (range25 + range75) / 2

    if sat_equivalent >= range75:
        score = 95 + min((sat_equivalent - range75) / 30 * 5, 5)
        details = f"Your {shown} is above the 75th percentile ({range75})"
    elif sat_equivalent >= median:
        position = (sat_equivalent - median) / (range75 - median)
        score = 85 + position * 10
        details = f"Your {shown} is between the median and 75th percentile"
    elif sat_equivalent >= range25:
        position = (sat_equivalent - range25) / (median - range25)
        score = 50 + position * 35
        details = f"Your {shown} is between the 25th percentile and median"
    else:
        score = max(TESTING_FLOOR, 50 - (range25 - sat_equivalent) / 50 * 25)
        details = f"Your {shown} is below the 25th percentile ({range25})"

    return _assessment(score, details)


def assess_acceptance_rate(school: SchoolData) -> FactorAssessment:
    """
    Baseline prior from the school's acceptance rate.
    More selective schools get lower scores.
    """
    rate = known_rate(school)
    if rate is None:
        return _neutral("Acceptance rate data not available")

    rate_percent = rate * 100
    for upper, base, slope, offset, impact, label in ACCEPTANCE_RATE_BANDS:
        if rate_percent < upper:
            score = base + (rate_percent - offset) * slope
            return FactorAssessment(
                score=round_half_up(min(score, ACCEPTANCE_RATE_MAX_SCORE)),
                impact=impact,
                details=f"{rate_percent:.1f}% acceptance rate - {label}",
            )

    # Unreachable: the last band is unbounded
    return _neutral("Acceptance rate data not available")
