"""
Legacy Refiner

Second stage of the legacy strategy: the fast model scores the soft factors
(activities, awards) and nudges the quantitative base probability by at most
REFINER_MAX_ADJUSTMENT points.

Unlike the holistic path this never raises. Any failure degrades to the
quantitative estimate with low confidence.
"""

import logging
import re
from datetime import datetime, timezone
from typing import List, Literal

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

from ..logic.classifier import clamp_probability, round_half_up, tier_from_probability
from ..logic.constants import (
    ImpactLevel,
    Confidence,
    MAX_IMPROVEMENTS,
    REFINER_MAX_ADJUSTMENT,
    NEUTRAL_SCORE,
)
from ..logic.contracts import (
    ChancesFactors,
    ChancesResult,
    FactorAssessment,
    Improvement,
    QuantitativeResult,
    SchoolData,
)
from ..snapshot.contracts import ProfileSnapshot
from ..snapshot.mode_filter import filter_snapshot_for_mode
from .refiner_prompts import ASSESSMENT_SYSTEM_PROMPT, build_refiner_prompt

logger = logging.getLogger(__name__)

FENCED_JSON = re.compile(r"```(?:json)?\s*([\s\S]*?)```")

FALLBACK_CONFIDENCE_REASON = "Full assessment unavailable - showing quantitative estimate only"

ImpactLiteral = Literal["strong_positive", "positive", "neutral", "negative", "strong_negative"]


# =============================================================================
# RESPONSE CONTRACT (lenient: missing fields get neutral defaults)
# =============================================================================

class _Lenient(BaseModel):
    class Config:
        alias_generator = to_camel
        populate_by_name = True


class RefinerImprovement(_Lenient):
    action: str = "Improve your profile"
    potential_impact: str = "+1-2%"
    priority: Literal["high", "medium", "low"] = "medium"
    category: Literal["academics", "testing", "activities", "awards", "programs", "essays"] = "activities"


class RefinerResponse(_Lenient):
    activities_score: float = NEUTRAL_SCORE
    activities_impact: ImpactLiteral = "neutral"
    activities_details: str = "Activities assessment not available"
    awards_score: float = NEUTRAL_SCORE
    awards_impact: ImpactLiteral = "neutral"
    awards_details: str = "Awards assessment not available"
    probability_adjustment: float = 0
    adjustment_reason: str = ""
    summary: str = "Assessment summary not available."
    improvements: List[RefinerImprovement] = Field(default_factory=list)


def extract_json(text: str) -> str:
    """Strip a markdown code fence if the model wrapped its JSON in one."""
    match = FENCED_JSON.search(text)
    if match:
        return match.group(1).strip()
    return text.strip()


def parse_refiner_response(text: str) -> RefinerResponse:
    return RefinerResponse.model_validate_json(extract_json(text))


def _factor(score: float, impact: str, details: str) -> FactorAssessment:
    return FactorAssessment(score=round_half_up(max(0.0, min(100.0, score))), impact=impact, details=details)


class LegacyRefiner:
    """
    Args:
        llm: client exposing `complete_text(system, prompt, model=...)`
    """

    def __init__(self, llm):
        self.llm = llm

    async def refine(
        self,
        profile: ProfileSnapshot,
        school: SchoolData,
        mode,
        quantitative: QuantitativeResult,
    ) -> ChancesResult:
        filtered = filter_snapshot_for_mode(profile, mode)
        prompt = build_refiner_prompt(filtered, school, mode, quantitative)

        try:
            if self.llm is None:
                raise RuntimeError("no LLM client configured")
            text = await self.llm.complete_text(ASSESSMENT_SYSTEM_PROMPT, prompt, model="fast")
            parsed = parse_refiner_response(text)
            return self._build_result(parsed, school, mode, quantitative)
        except Exception as e:
            logger.warning(f"⚠️ Refiner failed for {school.name}, using quantitative estimate: {e}")
            return build_fallback_result(school, mode, quantitative)

    def _build_result(
        self,
        parsed: RefinerResponse,
        school: SchoolData,
        mode,
        quantitative: QuantitativeResult,
    ) -> ChancesResult:
        adjustment = max(-REFINER_MAX_ADJUSTMENT, min(REFINER_MAX_ADJUSTMENT, parsed.probability_adjustment))
        probability = clamp_probability(quantitative.base_probability + adjustment)
        logger.info(
            f"Refined {school.name}: {quantitative.base_probability}% {adjustment:+g} -> {probability}%"
        )

        improvements = [
            Improvement(**imp.model_dump()) for imp in parsed.improvements[:MAX_IMPROVEMENTS]
        ]

        return ChancesResult(
            probability=probability,
            tier=tier_from_probability(probability),
            mode=mode,
            factors=ChancesFactors(
                academics=quantitative.factors.academics,
                testing=quantitative.factors.testing,
                activities=_factor(parsed.activities_score, parsed.activities_impact, parsed.activities_details),
                awards=_factor(parsed.awards_score, parsed.awards_impact, parsed.awards_details),
            ),
            summary=parsed.summary,
            improvements=improvements,
            confidence=quantitative.confidence,
            confidence_reason=quantitative.confidence_reason,
            calculated_at=datetime.now(timezone.utc),
            school_id=school.id,
            school_name=school.name,
        )


def build_fallback_result(school: SchoolData, mode, quantitative: QuantitativeResult) -> ChancesResult:
    """Quantitative-only result used whenever refinement fails."""
    probability = quantitative.base_probability
    return ChancesResult(
        probability=probability,
        tier=tier_from_probability(probability),
        mode=mode,
        factors=ChancesFactors(
            academics=quantitative.factors.academics,
            testing=quantitative.factors.testing,
            activities=FactorAssessment(
                score=NEUTRAL_SCORE, impact=ImpactLevel.NEUTRAL, details="Activities assessment unavailable"
            ),
            awards=FactorAssessment(
                score=NEUTRAL_SCORE, impact=ImpactLevel.NEUTRAL, details="Awards assessment unavailable"
            ),
        ),
        summary=(
            f"Based on your academic metrics, your estimated chance at {school.name} is {probability}%. "
            "This is a preliminary estimate - full assessment temporarily unavailable."
        ),
        improvements=[],
        confidence=Confidence.LOW,
        confidence_reason=FALLBACK_CONFIDENCE_REASON,
        calculated_at=datetime.now(timezone.utc),
        school_id=school.id,
        school_name=school.name,
    )
