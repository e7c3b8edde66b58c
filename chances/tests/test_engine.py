"""
Tests for the chances engine orchestration.
"""

import asyncio

import pytest

from chances.logic.classifier import from_stored_chance
from chances.logic.engine import ChancesEngine
from chances.logic.errors import ChancesAssessmentError, ProfileNotFoundError, SchoolNotFoundError
from chances.models import StudentSchool


def test_holistic_is_the_default_strategy(fake_llm, assessment_payload, repository, seeded):
    llm = fake_llm(objects=[assessment_payload(probability=37)])
    engine = ChancesEngine(repository, llm)

    result = asyncio.run(engine.calculate_chances(seeded["profile_id"], "school-elite"))

    assert result.probability == 37
    assert result.mode == "projected"
    assert llm.calls[0]["kind"] == "object"


def test_legacy_strategy_refines_quantitative(fake_llm, repository, seeded):
    llm = fake_llm(texts=['{"probabilityAdjustment": 3, "summary": "Good odds."}'])
    engine = ChancesEngine(repository, llm)

    result = asyncio.run(engine.calculate_chances(seeded["profile_id"], "school-elite", strategy="legacy"))

    assert result.probability == 13
    assert result.tier == "unlikely"
    assert llm.calls[0]["kind"] == "text"


def test_missing_profile_and_school(fake_llm, repository, seeded):
    engine = ChancesEngine(repository, fake_llm())

    with pytest.raises(ProfileNotFoundError):
        asyncio.run(engine.calculate_chances("ghost", "school-elite"))
    with pytest.raises(SchoolNotFoundError):
        asyncio.run(engine.calculate_chances(seeded["profile_id"], "no-such-school"))
    with pytest.raises(ValueError):
        asyncio.run(engine.calculate_chances(seeded["profile_id"], "school-elite", mode="someday"))


def test_holistic_failure_propagates(fake_llm, repository, seeded):
    engine = ChancesEngine(repository, fake_llm(objects=[RuntimeError("overloaded")]))
    with pytest.raises(ChancesAssessmentError):
        asyncio.run(engine.calculate_chances(seeded["profile_id"], "school-elite"))


def test_quantitative_only(fake_llm, repository, seeded):
    engine = ChancesEngine(repository, fake_llm())
    result = engine.calculate_quantitative_only(seeded["profile_id"], "school-state")
    assert result.base_probability == 80


def test_multiple_excludes_failed_schools(fake_llm, assessment_payload, repository, seeded):
    llm = fake_llm(objects=[assessment_payload(probability=20), RuntimeError("boom"), assessment_payload()])
    engine = ChancesEngine(repository, llm)

    results = asyncio.run(engine.calculate_chances_multiple(
        seeded["profile_id"], ["school-elite", "school-state", "no-such-school"]
    ))

    assert list(results) == ["school-elite"]
    assert results["school-elite"].probability == 20


def test_update_stored_chances(fake_llm, assessment_payload, db, repository, seeded):
    llm = fake_llm(objects=[assessment_payload(probability=18), assessment_payload(probability=73)])
    engine = ChancesEngine(repository, llm)

    updated = asyncio.run(engine.update_stored_chances(seeded["profile_id"]))
    db.commit()

    assert updated == 2
    rows = {row.id: row for row in db.query(StudentSchool).all()}
    assert from_stored_chance(rows["list-1"].calculated_chance) == 18
    assert from_stored_chance(rows["list-2"].calculated_chance) == 73
    assert rows["list-1"].chance_updated_at is not None
    assert rows["list-3"].calculated_chance is None


def test_comparison_attaches_current_and_projected(fake_llm, assessment_payload, repository, seeded):
    llm = fake_llm(objects=[assessment_payload(probability=22), assessment_payload(probability=31)])
    engine = ChancesEngine(repository, llm)

    result = asyncio.run(engine.calculate_with_comparison(seeded["profile_id"], "school-elite"))

    assert result.mode == "projected"
    assert result.probability == 31
    assert result.comparison.current_probability == 22
    assert result.comparison.projected_probability == 31
    assert set(result.comparison.projected_boost_drivers) == {"Publish research paper", "RSI", "AP Chemistry"}
    dumped = result.model_dump(by_alias=True)
    assert dumped["comparison"]["projectedBoostDrivers"]
