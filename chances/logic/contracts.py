"""
Data Contracts for the Chances Engine

Defines Pydantic models for school statistics (input), the quantitative
result (intermediate) and ChancesResult (output).
These contracts are the API boundary for the chances engine.
"""

from datetime import datetime
from typing import List, Optional, Literal
from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

from .constants import ChancesMode, ChancesTier, ImpactLevel, Confidence


# =============================================================================
# INPUT CONTRACTS
# =============================================================================

class SchoolData(BaseModel):
    """
    School statistics needed by the quantitative scorer.
    Every statistic is optional - scorers degrade to neutral when missing.
    """
    id: str
    name: str
    acceptance_rate: Optional[float] = None  # decimal, e.g. 0.04

    # SAT ranges
    sat_range_25: Optional[int] = None
    sat_range_75: Optional[int] = None

    # ACT ranges
    act_range_25: Optional[int] = None
    act_range_75: Optional[int] = None

    # GPA
    avg_gpa_unweighted: Optional[float] = None
    avg_gpa_weighted: Optional[float] = None


class ExtendedSchoolData(SchoolData):
    """School data plus the institutional context consumed by the LLM prompt."""
    city: Optional[str] = None
    state: Optional[str] = None
    type: Optional[str] = None
    undergrad_enrollment: Optional[int] = None
    notes: Optional[str] = None  # what this school values, passed verbatim
    has_early_decision: bool = False
    has_early_action: bool = False
    is_restrictive_early_action: bool = False


# =============================================================================
# INTERMEDIATE DATA STRUCTURES
# =============================================================================

class FactorAssessment(BaseModel):
    """Individual factor score with explanation."""
    score: int = Field(ge=0, le=100)
    impact: ImpactLevel
    details: str = ""

    class Config:
        use_enum_values = True


class QuantitativeFactors(BaseModel):
    academics: FactorAssessment
    testing: FactorAssessment
    acceptance_rate: FactorAssessment


class QuantitativeResult(BaseModel):
    """
    Rule-based result. Deterministic for identical inputs.
    """
    base_probability: int = Field(ge=1, le=100)
    factors: QuantitativeFactors
    confidence: Confidence
    confidence_reason: str

    class Config:
        use_enum_values = True


# =============================================================================
# OUTPUT CONTRACTS
# =============================================================================

class Improvement(BaseModel):
    """Actionable suggestion to improve chances."""
    action: str
    potential_impact: str  # e.g. "+3-5%"
    priority: Literal["high", "medium", "low"] = "medium"
    category: Literal["academics", "testing", "activities", "awards", "programs", "essays"] = "activities"

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class ChancesFactors(BaseModel):
    academics: FactorAssessment
    testing: FactorAssessment
    activities: FactorAssessment
    awards: FactorAssessment


class ModeComparison(BaseModel):
    """How the projected estimate differs from the current one."""
    current_probability: int
    projected_probability: int
    projected_boost_drivers: List[str] = Field(default_factory=list)

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class ChancesResult(BaseModel):
    """
    Output contract for the chances engine.
    Built fresh for every request; the copy stored on a school-list row is a cache.
    """
    # The headline numbers
    probability: int = Field(ge=1, le=95)
    tier: ChancesTier
    mode: ChancesMode

    factors: ChancesFactors

    summary: str
    improvements: List[Improvement] = Field(default_factory=list, max_length=5)

    confidence: Confidence
    confidence_reason: str

    # Metadata
    calculated_at: datetime
    school_id: str
    school_name: str

    comparison: Optional[ModeComparison] = None

    class Config:
        use_enum_values = True
        alias_generator = to_camel
        populate_by_name = True
