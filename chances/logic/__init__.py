"""
Chances Logic Module

Provides the quantitative scorer, the tier classifier and the engine that
orchestrates holistic and legacy admission-chances assessments.
"""

from .constants import ChancesMode, ChancesTier, ImpactLevel, Confidence, ItemStatus
from .contracts import (
    SchoolData,
    ExtendedSchoolData,
    FactorAssessment,
    QuantitativeResult,
    Improvement,
    ChancesFactors,
    ModeComparison,
    ChancesResult,
)
from .errors import (
    ProfileNotFoundError,
    SchoolNotFoundError,
    ChancesAssessmentError,
    UsageLimitExceededError,
)
from .classifier import tier_from_probability, impact_from_score, round_half_up
from .engine import ChancesEngine
from .adapter import ChancesRepository

__all__ = [
    # Main engine
    "ChancesEngine",
    "ChancesRepository",

    # Contracts
    "SchoolData",
    "ExtendedSchoolData",
    "FactorAssessment",
    "QuantitativeResult",
    "Improvement",
    "ChancesFactors",
    "ModeComparison",
    "ChancesResult",

    # Errors
    "ProfileNotFoundError",
    "SchoolNotFoundError",
    "ChancesAssessmentError",
    "UsageLimitExceededError",

    # Classification
    "tier_from_probability",
    "impact_from_score",
    "round_half_up",

    # Enums
    "ChancesMode",
    "ChancesTier",
    "ImpactLevel",
    "Confidence",
    "ItemStatus",
]
