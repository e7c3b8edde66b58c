"""
Tests for the legacy refiner: parsing, clamping and the quantitative fallback.
"""

import asyncio
import json

import pytest

from chances.ai.refiner import LegacyRefiner, extract_json, FALLBACK_CONFIDENCE_REASON
from chances.ai.refiner_prompts import build_refiner_prompt, ASSESSMENT_SYSTEM_PROMPT
from chances.logic.aggregator import calculate_quantitative
from chances.logic.classifier import tier_from_probability


@pytest.fixture
def state_school(repository):
    return repository.load_school("school-state")


@pytest.fixture
def quantitative(snapshot, state_school):
    return calculate_quantitative(snapshot, state_school)


def refiner_json(**fields):
    body = {
        "activitiesScore": 82,
        "activitiesImpact": "positive",
        "activitiesDetails": "Deep robotics commitment",
        "awardsScore": 74.6,
        "awardsImpact": "positive",
        "awardsDetails": "National math recognition",
        "probabilityAdjustment": 5,
        "adjustmentReason": "Strong spike",
        "summary": "A strong candidate.",
        "improvements": [{"action": "Write a strong essay", "potentialImpact": "+2%", "category": "essays"}],
    }
    body.update(fields)
    return json.dumps(body)


def refine(llm, snapshot, school, quantitative, mode="projected"):
    return asyncio.run(LegacyRefiner(llm).refine(snapshot, school, mode, quantitative))


def test_extract_json_strips_code_fence():
    assert extract_json('```json\n{"a": 1}\n```') == '{"a": 1}'
    assert extract_json('Here you go:\n```\n{"a": 1}\n```') == '{"a": 1}'
    assert extract_json('  {"a": 1} ') == '{"a": 1}'


def test_refined_result(fake_llm, snapshot, state_school, quantitative):
    llm = fake_llm(texts=[f"```json\n{refiner_json(probabilityAdjustment=-12)}\n```"])

    result = refine(llm, snapshot, state_school, quantitative)

    assert quantitative.base_probability == 80
    assert result.probability == 68
    assert result.tier == "likely"
    assert result.factors.academics == quantitative.factors.academics
    assert result.factors.activities.score == 82
    assert result.factors.awards.score == 75
    assert result.confidence == quantitative.confidence
    assert result.improvements[0].priority == "medium"
    assert llm.calls[0]["model"] == "fast"
    assert llm.calls[0]["system"] == ASSESSMENT_SYSTEM_PROMPT


def test_adjustment_is_clamped(fake_llm, snapshot, state_school, quantitative):
    up = refine(fake_llm(texts=[refiner_json(probabilityAdjustment=50)]), snapshot, state_school, quantitative)
    down = refine(fake_llm(texts=[refiner_json(probabilityAdjustment=-50)]), snapshot, state_school, quantitative)

    assert up.probability == 95
    assert down.probability == 60


def test_missing_fields_get_neutral_defaults(fake_llm, snapshot, state_school, quantitative):
    result = refine(fake_llm(texts=['{"summary": "Short."}']), snapshot, state_school, quantitative)

    assert result.probability == quantitative.base_probability
    assert result.factors.activities.score == 50
    assert result.factors.activities.impact == "neutral"
    assert result.improvements == []


@pytest.mark.parametrize("failure", [
    RuntimeError("provider down"),
    "not json at all",
    '{"activitiesImpact": "fantastic"}',
])
def test_any_failure_falls_back_to_quantitative(fake_llm, snapshot, state_school, quantitative, failure):
    result = refine(fake_llm(texts=[failure]), snapshot, state_school, quantitative)

    assert result.probability == quantitative.base_probability
    assert result.tier == tier_from_probability(quantitative.base_probability).value
    assert result.confidence == "low"
    assert result.confidence_reason == FALLBACK_CONFIDENCE_REASON
    assert result.factors.activities.score == 50
    assert result.factors.activities.impact == "neutral"
    assert result.factors.awards.score == 50
    assert result.factors.awards.impact == "neutral"
    assert result.improvements == []


def test_refiner_prompt_sections(snapshot, state_school, quantitative):
    prompt = build_refiner_prompt(snapshot, state_school, "current", quantitative)

    assert "**Ada**, 11th" in prompt
    assert "SAT: 1520 (780M/740RW)" in prompt
    assert "Robotics Captain at Central Robotics [LEADERSHIP] [SPIKE]" in prompt
    assert "Acceptance Rate: 60.0%" in prompt
    assert "Base Probability: 80%" in prompt
    assert "Mode: CURRENT\nOnly consider completed achievements." in prompt
    assert "In Progress Goals" not in prompt


def test_refiner_prompt_goals_by_mode(snapshot, state_school, quantitative):
    projected = build_refiner_prompt(snapshot, state_school, "projected", quantitative)
    simulated = build_refiner_prompt(snapshot, state_school, "simulated", quantitative)

    assert "Publish research paper (research) - 1/2 tasks done" in projected
    assert "Planned Goals" not in projected
    assert "Planned Goals:\n- Start a tutoring nonprofit" in simulated


def test_no_llm_client_falls_back_to_quantitative(snapshot, state_school, quantitative):
    result = refine(None, snapshot, state_school, quantitative)

    assert result.probability == quantitative.base_probability
    assert result.confidence == "low"
    assert result.confidence_reason == FALLBACK_CONFIDENCE_REASON
