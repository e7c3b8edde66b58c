"""
Profile Snapshot Contracts

ProfileSnapshot is a structured, read-only view of a student's profile at
assessment time. It is used for chances calculation and any other
algorithmic assessment.

Snapshots are frozen: once built they are never mutated, only rebuilt.
The derived `counts` are computed once by the builder.
"""

from datetime import date, datetime
from typing import Optional, Tuple
from pydantic import BaseModel

from ..logic.constants import ItemStatus


class _Frozen(BaseModel):
    class Config:
        frozen = True
        use_enum_values = True
        validate_default = True


# =============================================================================
# CORE TYPES
# =============================================================================

class AcademicsSnapshot(_Frozen):
    gpa_unweighted: Optional[float] = None
    gpa_weighted: Optional[float] = None
    gpa_scale: Optional[float] = None  # usually 4.0 or 5.0
    class_rank: Optional[int] = None
    class_size: Optional[int] = None
    percentile: Optional[int] = None  # derived from rank/size


class SatSnapshot(_Frozen):
    total: int
    math: int
    reading: int


class ActSnapshot(_Frozen):
    composite: int
    english: int
    math: int
    reading: int
    science: int


class ApScoreItem(_Frozen):
    subject: str
    score: int


class TestingSnapshot(_Frozen):
    sat: Optional[SatSnapshot] = None
    act: Optional[ActSnapshot] = None
    psat: Optional[int] = None
    ap_scores: Tuple[ApScoreItem, ...] = ()


class ActivityItem(_Frozen):
    id: str
    title: str
    organization: str = ""
    category: Optional[str] = None
    is_leadership: bool = False
    is_spike: bool = False
    years_active: Optional[str] = None
    hours_per_week: Optional[float] = None
    description: Optional[str] = None
    status: ItemStatus = ItemStatus.ACTUAL


class AwardItem(_Frozen):
    id: str
    title: str
    organization: Optional[str] = None
    level: str = "school"  # school/regional/state/national/international
    category: Optional[str] = None
    year: Optional[int] = None
    status: ItemStatus = ItemStatus.ACTUAL


class ProgramItem(_Frozen):
    id: str
    name: str
    organization: Optional[str] = None
    type: str = "summer"
    selectivity: Optional[str] = None
    year: Optional[int] = None
    status: ItemStatus = ItemStatus.ACTUAL


class CourseItem(_Frozen):
    id: str
    name: str
    subject: Optional[str] = None
    level: Optional[str] = None  # regular/honors/ap/ib/college
    grade: Optional[str] = None
    status: ItemStatus = ItemStatus.ACTUAL


class GoalItem(_Frozen):
    id: str
    title: str
    description: Optional[str] = None
    category: str = "other"
    status: str = "planning"  # planning | in_progress | completed | abandoned | parking_lot, stored as entered
    priority: Optional[str] = None
    target_date: Optional[date] = None
    impact_description: Optional[str] = None
    tasks_total: int = 0
    tasks_completed: int = 0


class SchoolStats(_Frozen):
    acceptance_rate: Optional[float] = None
    sat_range_25: Optional[int] = None
    sat_range_75: Optional[int] = None
    act_range_25: Optional[int] = None
    act_range_75: Optional[int] = None
    avg_gpa_unweighted: Optional[float] = None


class SchoolListItem(_Frozen):
    id: str  # school-list row id
    school_id: Optional[str] = None
    school_name: str
    tier: str
    is_dream: bool = False
    interest_level: Optional[str] = None
    application_status: str
    application_type: Optional[str] = None
    calculated_chance: Optional[float] = None
    chance_updated_at: Optional[datetime] = None
    school: SchoolStats = SchoolStats()


class HighSchoolInfo(_Frozen):
    name: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    type: Optional[str] = None


class SnapshotCounts(_Frozen):
    activities: int = 0
    leadership_positions: int = 0
    spike_activities: int = 0
    awards: int = 0
    national_awards: int = 0
    programs: int = 0
    selective_programs: int = 0
    ap_courses: int = 0
    goals_in_progress: int = 0
    goals_planning: int = 0


# =============================================================================
# MAIN PROFILE SNAPSHOT
# =============================================================================

class ProfileSnapshot(_Frozen):
    id: str
    first_name: str
    preferred_name: Optional[str] = None
    grade: Optional[str] = None
    graduation_year: Optional[int] = None
    high_school: HighSchoolInfo = HighSchoolInfo()

    academics: AcademicsSnapshot = AcademicsSnapshot()
    testing: TestingSnapshot = TestingSnapshot()

    activities: Tuple[ActivityItem, ...] = ()
    awards: Tuple[AwardItem, ...] = ()
    programs: Tuple[ProgramItem, ...] = ()
    courses: Tuple[CourseItem, ...] = ()

    goals: Tuple[GoalItem, ...] = ()
    schools: Tuple[SchoolListItem, ...] = ()

    counts: SnapshotCounts = SnapshotCounts()

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def display_name(self) -> str:
        return self.preferred_name or self.first_name
