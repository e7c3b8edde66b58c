"""
Profile Snapshot Builder

Builds a ProfileSnapshot from the persisted profile records.

This is a pure READ + TRANSFORM layer:
- NO scoring logic
- NO DB writes
- NO AI/LLM usage
"""

import logging
from typing import Callable, Iterable, Optional, Sequence, TypeVar

from ..logic.classifier import round_half_up
from ..logic.constants import (
    ItemStatus,
    NATIONAL_AWARD_LEVELS,
    SELECTIVE_PROGRAM_LEVELS,
    ADVANCED_COURSE_LEVELS,
)
from .contracts import (
    ProfileSnapshot,
    AcademicsSnapshot,
    TestingSnapshot,
    SatSnapshot,
    ActSnapshot,
    ApScoreItem,
    ActivityItem,
    AwardItem,
    ProgramItem,
    CourseItem,
    GoalItem,
    SchoolListItem,
    SchoolStats,
    HighSchoolInfo,
    SnapshotCounts,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Program status -> item status. Anything else (attending, completed) is actual.
PROGRAM_STATUS_MAP = {
    "interested": ItemStatus.IN_PROGRESS,
    "applying": ItemStatus.IN_PROGRESS,
    "applied": ItemStatus.IN_PROGRESS,
}

COURSE_STATUS_MAP = {
    "completed": ItemStatus.ACTUAL,
    "in_progress": ItemStatus.IN_PROGRESS,
    "planned": ItemStatus.PLANNING,
}


# =============================================================================
# MAIN BUILDER
# =============================================================================

def build_profile_snapshot(
    repository,
    profile_id: str,
    include_goals: bool = True,
    include_schools: bool = True,
) -> Optional[ProfileSnapshot]:
    """
    Load a profile through the repository and build its snapshot.

    Returns None when the profile does not exist.
    """
    record = repository.load_profile(profile_id)
    if record is None:
        logger.info(f"Profile {profile_id} not found, no snapshot built")
        return None
    return snapshot_from_record(record, include_goals=include_goals, include_schools=include_schools)


def snapshot_from_record(
    profile,
    include_goals: bool = True,
    include_schools: bool = True,
) -> ProfileSnapshot:
    """
    Transform a StudentProfile ORM record (with relations) into a ProfileSnapshot.
    """
    activities = build_activities(profile.activities or [])
    awards = build_awards(profile.awards or [])
    programs = build_programs(profile.programs or [])
    courses = build_courses(profile.courses or [])
    goals = build_goals(profile.goals or []) if include_goals else []
    schools = build_school_list(profile.school_list or []) if include_schools else []

    return ProfileSnapshot(
        id=profile.id,
        first_name=profile.first_name,
        preferred_name=profile.preferred_name,
        grade=profile.grade,
        graduation_year=profile.graduation_year,
        high_school=HighSchoolInfo(
            name=profile.high_school_name,
            city=profile.high_school_city,
            state=profile.high_school_state,
            type=profile.high_school_type,
        ),
        academics=build_academics_snapshot(profile.academics),
        testing=build_testing_snapshot(profile.testing),
        activities=tuple(activities),
        awards=tuple(awards),
        programs=tuple(programs),
        courses=tuple(courses),
        goals=tuple(goals),
        schools=tuple(schools),
        counts=compute_counts(activities, awards, programs, courses, goals),
        created_at=profile.created_at,
        updated_at=profile.updated_at,
    )


def compute_counts(
    activities: Sequence[ActivityItem],
    awards: Sequence[AwardItem],
    programs: Sequence[ProgramItem],
    courses: Sequence[CourseItem],
    goals: Sequence[GoalItem],
) -> SnapshotCounts:
    """Summary counts. Only called while building a snapshot."""
    return SnapshotCounts(
        activities=len(activities),
        leadership_positions=sum(1 for a in activities if a.is_leadership),
        spike_activities=sum(1 for a in activities if a.is_spike),
        awards=len(awards),
        national_awards=sum(1 for a in awards if a.level in NATIONAL_AWARD_LEVELS),
        programs=len(programs),
        selective_programs=sum(1 for p in programs if p.selectivity in SELECTIVE_PROGRAM_LEVELS),
        ap_courses=sum(1 for c in courses if c.level in ADVANCED_COURSE_LEVELS),
        goals_in_progress=sum(1 for g in goals if g.status == "in_progress"),
        goals_planning=sum(1 for g in goals if g.status == "planning"),
    )


# =============================================================================
# HELPER BUILDERS
# =============================================================================

def build_academics_snapshot(academics) -> AcademicsSnapshot:
    if academics is None:
        return AcademicsSnapshot()

    # Percentile only when both rank and size are known
    percentile = None
    if academics.class_rank and academics.class_size and academics.class_size > 0:
        percentile = round_half_up((1 - academics.class_rank / academics.class_size) * 100)

    return AcademicsSnapshot(
        gpa_unweighted=academics.school_reported_gpa_unweighted,
        gpa_weighted=academics.school_reported_gpa_weighted,
        gpa_scale=academics.gpa_scale,
        class_rank=academics.class_rank,
        class_size=academics.class_size,
        percentile=percentile,
    )


def pick_primary(attempts: Sequence[T], key: Callable[[T], float]) -> Optional[T]:
    """
    Choose the attempt that represents the student.

    An attempt flagged primary wins (first flagged if several). Otherwise the
    highest key wins and ties go to the first-recorded attempt.
    """
    if not attempts:
        return None
    for attempt in attempts:
        if attempt.is_primary:
            return attempt
    best = attempts[0]
    for attempt in attempts[1:]:
        if key(attempt) > key(best):
            best = attempt
    return best


def build_testing_snapshot(testing) -> TestingSnapshot:
    if testing is None:
        return TestingSnapshot()

    sat = None
    primary_sat = pick_primary(list(testing.sat_scores or []), key=lambda s: s.total)
    if primary_sat is not None:
        sat = SatSnapshot(total=primary_sat.total, math=primary_sat.math, reading=primary_sat.reading)

    act = None
    primary_act = pick_primary(list(testing.act_scores or []), key=lambda a: a.composite)
    if primary_act is not None:
        act = ActSnapshot(
            composite=primary_act.composite,
            english=primary_act.english,
            math=primary_act.math,
            reading=primary_act.reading,
            science=primary_act.science,
        )

    return TestingSnapshot(
        sat=sat,
        act=act,
        psat=testing.psat_total,
        ap_scores=tuple(ApScoreItem(subject=ap.subject, score=ap.score) for ap in testing.ap_scores or []),
    )


def build_activities(activities: Iterable) -> list:
    # Activities on the profile are always actual
    return [
        ActivityItem(
            id=a.id,
            title=a.title,
            organization=a.organization or "",
            category=a.category,
            is_leadership=bool(a.is_leadership),
            is_spike=bool(a.is_spike),
            years_active=a.years_active,
            hours_per_week=a.hours_per_week,
            description=a.description,
            status=ItemStatus.ACTUAL,
        )
        for a in activities
    ]


def build_awards(awards: Iterable) -> list:
    return [
        AwardItem(
            id=a.id,
            title=a.title,
            organization=a.organization,
            level=a.level,
            category=a.category,
            year=a.year,
            status=ItemStatus.ACTUAL,
        )
        for a in awards
    ]


def build_programs(programs: Iterable) -> list:
    return [
        ProgramItem(
            id=p.id,
            name=p.name,
            organization=p.organization,
            type=p.type,
            selectivity=p.selectivity,
            year=p.year,
            status=PROGRAM_STATUS_MAP.get(p.status, ItemStatus.ACTUAL),
        )
        for p in programs
    ]


def build_courses(courses: Iterable) -> list:
    return [
        CourseItem(
            id=c.id,
            name=c.name,
            subject=c.subject,
            level=c.level,
            grade=c.grade,
            status=COURSE_STATUS_MAP.get(c.status, ItemStatus.ACTUAL),
        )
        for c in courses
    ]


def build_goals(goals: Iterable) -> list:
    return [
        GoalItem(
            id=g.id,
            title=g.title,
            description=g.description,
            category=g.category,
            status=g.status,
            priority=g.priority,
            target_date=g.target_date,
            impact_description=g.impact_description,
            tasks_total=len(g.tasks),
            tasks_completed=sum(1 for t in g.tasks if t.status == "completed"),
        )
        for g in goals
    ]


def build_school_list(school_list: Iterable) -> list:
    items = []
    for row in school_list:
        school = row.school
        stats = SchoolStats()
        if school is not None:
            stats = SchoolStats(
                acceptance_rate=school.acceptance_rate,
                sat_range_25=school.sat_range_25,
                sat_range_75=school.sat_range_75,
                act_range_25=school.act_range_25,
                act_range_75=school.act_range_75,
                avg_gpa_unweighted=school.avg_gpa_unweighted,
            )
        items.append(SchoolListItem(
            id=row.id,
            school_id=row.school_id,
            school_name=school.name if school is not None else (row.custom_name or "Unknown school"),
            tier=row.tier,
            is_dream=bool(row.is_dream),
            interest_level=row.interest_level,
            application_status=row.status,
            application_type=row.application_type,
            calculated_chance=row.calculated_chance,
            chance_updated_at=row.chance_updated_at,
            school=stats,
        ))
    return items
