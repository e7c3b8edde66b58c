"""
LLM-backed assessors for the chances engine.
"""

from .llm_client import LLMClient
from .holistic_assessor import HolisticAssessor, ChancesAssessment
from .refiner import LegacyRefiner, build_fallback_result

__all__ = [
    "LLMClient",
    "HolisticAssessor",
    "ChancesAssessment",
    "LegacyRefiner",
    "build_fallback_result",
]
