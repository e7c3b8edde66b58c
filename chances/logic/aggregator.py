"""
Score Aggregator

Combines the quantitative factor scores into a base probability.
Applies weighting, the selectivity ceiling, the floor and rounding.
"""

from typing import List, Tuple

from ..snapshot.contracts import ProfileSnapshot
from .classifier import round_half_up
from .contracts import SchoolData, QuantitativeResult, QuantitativeFactors
from .constants import (
    Confidence,
    FACTOR_WEIGHTS,
    ACCEPTANCE_CEILING_MULTIPLIER,
    QUANT_CEILING_MAX,
    MIN_PROBABILITY,
)
from .dimension_scorers import (
    assess_academics,
    assess_testing,
    assess_acceptance_rate,
    known_rate,
    school_sat_band,
)


def calculate_quantitative(
    profile: ProfileSnapshot,
    school: SchoolData
) -> QuantitativeResult:
    """
    Calculate quantitative chances from hard metrics.

    Args:
        profile: Student snapshot
        school: Target school statistics

    Returns:
        QuantitativeResult with base probability and factor breakdown
    """
    academics = assess_academics(profile, school)
    testing = assess_testing(profile, school)
    acceptance_rate = assess_acceptance_rate(school)

    base_probability = (
        academics.score * FACTOR_WEIGHTS["academics"]
        + testing.score * FACTOR_WEIGHTS["testing"]
        + acceptance_rate.score * FACTOR_WEIGHTS["acceptance_rate"]
    )

    # Selectivity ceiling: odds can't run far ahead of the admit rate
    rate = known_rate(school)
    if rate is not None:
        ceiling = min(rate * 100 * ACCEPTANCE_CEILING_MULTIPLIER, QUANT_CEILING_MAX)
        base_probability = min(base_probability, ceiling)

    # Floor at 1% for any school
    base_probability = max(MIN_PROBABILITY, round_half_up(base_probability))

    confidence, confidence_reason = determine_confidence(profile, school)

    return QuantitativeResult(
        base_probability=base_probability,
        factors=QuantitativeFactors(
            academics=academics,
            testing=testing,
            acceptance_rate=acceptance_rate,
        ),
        confidence=confidence,
        confidence_reason=confidence_reason,
    )


def missing_inputs(profile: ProfileSnapshot, school: SchoolData) -> List[str]:
    """Human-readable list of the inputs the scorer had to do without."""
    issues: List[str] = []
    if not profile.academics.gpa_unweighted:
        issues.append("GPA not provided")
    if profile.testing.sat is None and profile.testing.act is None:
        issues.append("no test scores")
    if known_rate(school) is None:
        issues.append("school acceptance rate unknown")
    if school_sat_band(school) is None:
        issues.append("school test score ranges unknown")
    return issues


def determine_confidence(
    profile: ProfileSnapshot,
    school: SchoolData
) -> Tuple[Confidence, str]:
    """
    0 missing inputs -> high, 1-2 -> medium, 3+ -> low.
    """
    issues = missing_inputs(profile, school)

    if not issues:
        return Confidence.HIGH, "Complete data available for assessment"
    if len(issues) <= 2:
        return Confidence.MEDIUM, f"Limited by: {', '.join(issues)}"
    return Confidence.LOW, f"Significant data gaps: {', '.join(issues)}"
