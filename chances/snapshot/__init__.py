"""
Profile Snapshot Module

Normalized, immutable read-model of a student profile used by assessments.
"""

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
from .builder import build_profile_snapshot, snapshot_from_record, compute_counts, pick_primary
from .mode_filter import filter_snapshot_for_mode

__all__ = [
    "ProfileSnapshot",
    "AcademicsSnapshot",
    "TestingSnapshot",
    "SatSnapshot",
    "ActSnapshot",
    "ApScoreItem",
    "ActivityItem",
    "AwardItem",
    "ProgramItem",
    "CourseItem",
    "GoalItem",
    "SchoolListItem",
    "SchoolStats",
    "HighSchoolInfo",
    "SnapshotCounts",
    "build_profile_snapshot",
    "snapshot_from_record",
    "compute_counts",
    "pick_primary",
    "filter_snapshot_for_mode",
]
