"""
Holistic Chances Assessor

Asks the deep model for a complete assessment instead of combining
algorithmic weights. The model reasons over everything it knows about the
school's admissions; we only validate and normalize what it returns.

There is no fallback on this path: any failure raises ChancesAssessmentError.
"""

import logging
import time
from datetime import datetime, timezone
from typing import List, Literal

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

from ..logic.classifier import round_half_up, tier_from_probability, clamp_probability
from ..logic.constants import MAX_IMPROVEMENTS
from ..logic.contracts import (
    ChancesFactors,
    ChancesResult,
    ExtendedSchoolData,
    FactorAssessment,
    Improvement,
)
from ..logic.errors import ChancesAssessmentError
from ..snapshot.contracts import ProfileSnapshot
from ..snapshot.mode_filter import filter_snapshot_for_mode
from .prompt_builder import build_holistic_prompt

logger = logging.getLogger(__name__)

ImpactLiteral = Literal["strong_positive", "positive", "neutral", "negative", "strong_negative"]


# =============================================================================
# STRUCTURED OUTPUT SCHEMA
# =============================================================================

class AssessedFactor(BaseModel):
    score: float = Field(ge=0, le=100, description="Score from 0-100")
    impact: ImpactLiteral = Field(description="Impact level on admission chances")
    details: str = Field(description="1-2 sentence explanation of this assessment")


class AssessedFactors(BaseModel):
    academics: AssessedFactor = Field(description="Assessment of GPA, course rigor, class rank")
    testing: AssessedFactor = Field(description="Assessment of SAT/ACT/AP scores")
    activities: AssessedFactor = Field(description="Assessment of extracurriculars, leadership, depth")
    awards: AssessedFactor = Field(description="Assessment of honors, competitions, recognition")


class ChancesAssessment(BaseModel):
    """Schema the deep model must fill in."""
    probability: float = Field(ge=1, le=95, description="Estimated admission probability as a percentage (1-95)")
    tier: Literal["unlikely", "reach", "target", "likely", "safety"] = Field(
        description="unlikely (<15%), reach (15-30%), target (30-50%), likely (50-70%), safety (>70%)"
    )
    factors: AssessedFactors
    summary: str = Field(description="2-3 paragraph narrative: overall assessment, key strengths, areas of concern")
    improvements: List[Improvement] = Field(
        default_factory=list,
        max_length=MAX_IMPROVEMENTS,
        description="Top 3-5 specific actions that could improve chances",
    )
    confidence: Literal["high", "medium", "low"] = Field(
        description="Confidence in this assessment based on data completeness"
    )
    confidence_reason: str = Field(description="Brief explanation of confidence level")

    class Config:
        alias_generator = to_camel
        populate_by_name = True


def _to_factor(factor: AssessedFactor) -> FactorAssessment:
    return FactorAssessment(score=round_half_up(factor.score), impact=factor.impact, details=factor.details)


class HolisticAssessor:
    """
    Args:
        llm: client exposing `generate_object(prompt, schema, model=...)`
    """

    def __init__(self, llm):
        self.llm = llm

    async def assess(self, profile: ProfileSnapshot, school: ExtendedSchoolData, mode) -> ChancesResult:
        start_time = time.perf_counter()
        logger.info(f"🎓 Holistic assessment for {profile.display_name} at {school.name} ({mode})")

        filtered = filter_snapshot_for_mode(profile, mode)
        prompt = build_holistic_prompt(filtered, school, mode)

        try:
            assessment = await self.llm.generate_object(prompt, ChancesAssessment, model="deep")
            if not isinstance(assessment, ChancesAssessment):
                assessment = ChancesAssessment.model_validate(assessment)

            probability = clamp_probability(assessment.probability)
            tier = tier_from_probability(probability)
            if assessment.tier != tier.value:
                logger.warning(
                    f"Model tier '{assessment.tier}' disagrees with {probability}% for {school.name}; "
                    f"using '{tier.value}'"
                )

            result = ChancesResult(
                probability=probability,
                tier=tier,
                mode=mode,
                factors=ChancesFactors(
                    academics=_to_factor(assessment.factors.academics),
                    testing=_to_factor(assessment.factors.testing),
                    activities=_to_factor(assessment.factors.activities),
                    awards=_to_factor(assessment.factors.awards),
                ),
                summary=assessment.summary,
                improvements=assessment.improvements,
                confidence=assessment.confidence,
                confidence_reason=assessment.confidence_reason,
                calculated_at=datetime.now(timezone.utc),
                school_id=school.id,
                school_name=school.name,
            )
        except Exception as e:
            logger.error(f"❌ Holistic assessment failed for {school.name}: {e}")
            raise ChancesAssessmentError(f"Failed to assess chances: {e}") from e

        elapsed_ms = (time.perf_counter() - start_time) * 1000
        logger.info(f"✅ Assessment complete in {elapsed_ms:.0f}ms: {result.probability}% ({result.tier})")
        return result
