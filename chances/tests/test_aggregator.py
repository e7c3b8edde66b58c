"""
Tests for the quantitative aggregation and confidence rules.
"""

from chances.logic.aggregator import calculate_quantitative, determine_confidence
from chances.logic.contracts import SchoolData
from chances.snapshot.contracts import (
    ProfileSnapshot,
    AcademicsSnapshot,
    TestingSnapshot,
    SatSnapshot,
)


def make_profile(gpa=None, sat=None) -> ProfileSnapshot:
    return ProfileSnapshot(
        id="p-1",
        first_name="Sam",
        academics=AcademicsSnapshot(gpa_unweighted=gpa),
        testing=TestingSnapshot(sat=SatSnapshot(total=sat, math=sat // 2, reading=sat - sat // 2) if sat else None),
    )


def test_selectivity_ceiling_caps_strong_profile():
    profile = make_profile(gpa=4.0, sat=1550)
    school = SchoolData(id="s", name="Elite", acceptance_rate=0.04, sat_range_25=1500, sat_range_75=1570)

    result = calculate_quantitative(profile, school)

    assert result.factors.academics.score >= 85
    assert result.factors.testing.score >= 85
    assert result.factors.acceptance_rate.score <= 20
    assert result.base_probability <= 10
    assert result.base_probability == 10
    assert result.confidence == "high"


def test_no_data_gives_neutral_fifty_with_low_confidence():
    result = calculate_quantitative(make_profile(), SchoolData(id="s", name="Unknown U"))

    assert result.base_probability == 50
    assert result.confidence == "low"
    assert result.confidence_reason.startswith("Significant data gaps")
    for factor in (result.factors.academics, result.factors.testing, result.factors.acceptance_rate):
        assert factor.score == 50
        assert factor.impact == "neutral"


def test_global_ceiling_of_eighty():
    profile = make_profile(gpa=4.0, sat=1600)
    school = SchoolData(id="s", name="Open", acceptance_rate=0.9, sat_range_25=1000, sat_range_75=1200,
                        avg_gpa_unweighted=3.0)
    assert calculate_quantitative(profile, school).base_probability == 80


def test_identical_inputs_give_identical_results():
    profile = make_profile(gpa=3.7, sat=1420)
    school = SchoolData(id="s", name="Mid", acceptance_rate=0.3, sat_range_25=1300, sat_range_75=1480)

    first = calculate_quantitative(profile, school)
    second = calculate_quantitative(profile, school)
    assert first == second


def test_confidence_degrades_with_missing_inputs():
    full_school = SchoolData(id="s", name="S", acceptance_rate=0.3, sat_range_25=1300, sat_range_75=1480)

    high, _ = determine_confidence(make_profile(gpa=3.7, sat=1400), full_school)
    medium, reason = determine_confidence(make_profile(gpa=3.7), full_school)
    low, _ = determine_confidence(make_profile(), SchoolData(id="s", name="S"))

    assert (high, medium, low) == ("high", "medium", "low")
    assert reason == "Limited by: no test scores"


def test_act_band_counts_as_known_test_ranges():
    school = SchoolData(id="s", name="S", acceptance_rate=0.3, act_range_25=28, act_range_75=32)
    level, _ = determine_confidence(make_profile(gpa=3.7, sat=1400), school)
    assert level == "high"


def test_seeded_profile_at_each_school(repository, snapshot):
    elite = calculate_quantitative(snapshot, repository.load_school("school-elite"))
    state = calculate_quantitative(snapshot, repository.load_school("school-state"))
    bare = calculate_quantitative(snapshot, repository.load_school("school-bare"))

    assert elite.base_probability == 10
    assert state.base_probability == 80
    assert bare.base_probability == 85
    assert bare.confidence == "medium"
