"""
Data Adapter for the Chances Engine

Reads student profiles and school reference data from the production tables
and transforms school rows into the format the engine consumes.

This is a READ + TRANSFORM layer:
- NO scoring logic
- NO AI/LLM usage
- the only write is the cached chance on a school-list row
"""

import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from ..models import (
    StudentProfile,
    StudentTesting,
    Goal,
    School,
    StudentSchool,
)
from .classifier import to_stored_chance
from .contracts import ExtendedSchoolData

logger = logging.getLogger(__name__)


def school_to_data(school: School) -> ExtendedSchoolData:
    """Transform a School row into ExtendedSchoolData."""
    return ExtendedSchoolData(
        id=school.id,
        name=school.name,
        city=school.city,
        state=school.state,
        type=school.type,
        acceptance_rate=school.acceptance_rate,
        sat_range_25=school.sat_range_25,
        sat_range_75=school.sat_range_75,
        act_range_25=school.act_range_25,
        act_range_75=school.act_range_75,
        avg_gpa_unweighted=school.avg_gpa_unweighted,
        avg_gpa_weighted=school.avg_gpa_weighted,
        undergrad_enrollment=school.undergrad_enrollment,
        notes=school.notes,
        has_early_decision=bool(school.has_early_decision),
        has_early_action=bool(school.has_early_action),
        is_restrictive_early_action=bool(school.is_restrictive_early_action),
    )


class ChancesRepository:
    """
    Persistence boundary for the chances engine.

    Args:
        db: SQLAlchemy session owned by the caller
    """

    def __init__(self, db: Session):
        self.db = db

    def load_profile(self, profile_id: str) -> Optional[StudentProfile]:
        """Profile with every relation the snapshot builder reads."""
        query = (
            select(StudentProfile)
            .where(StudentProfile.id == profile_id)
            .options(
                selectinload(StudentProfile.academics),
                selectinload(StudentProfile.testing).selectinload(StudentTesting.sat_scores),
                selectinload(StudentProfile.testing).selectinload(StudentTesting.act_scores),
                selectinload(StudentProfile.testing).selectinload(StudentTesting.ap_scores),
                selectinload(StudentProfile.activities),
                selectinload(StudentProfile.awards),
                selectinload(StudentProfile.programs),
                selectinload(StudentProfile.courses),
                selectinload(StudentProfile.goals).selectinload(Goal.tasks),
                selectinload(StudentProfile.school_list).selectinload(StudentSchool.school),
            )
        )
        return self.db.execute(query).scalar_one_or_none()

    def profile_for_user(self, user_id: str) -> Optional[StudentProfile]:
        return self.db.execute(
            select(StudentProfile).where(StudentProfile.user_id == user_id)
        ).scalar_one_or_none()

    def load_school(self, school_id: str) -> Optional[ExtendedSchoolData]:
        school = self.db.get(School, school_id)
        if school is None:
            return None
        return school_to_data(school)

    def linked_school_list(self, profile_id: str) -> List[StudentSchool]:
        """School-list rows linked to reference data (school_id set)."""
        return list(self.db.execute(
            select(StudentSchool)
            .where(StudentSchool.student_profile_id == profile_id)
            .where(StudentSchool.school_id.is_not(None))
            .order_by(StudentSchool.display_order)
        ).scalars())

    def update_cached_chance(self, school_list_id: str, probability: int, timestamp: datetime) -> None:
        row = self.db.get(StudentSchool, school_list_id)
        if row is None:
            logger.warning(f"School-list row {school_list_id} disappeared before chance update")
            return
        row.calculated_chance = to_stored_chance(probability)
        row.chance_updated_at = timestamp
        self.db.flush()
