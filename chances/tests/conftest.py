"""
Shared fixtures for the chances tests.

In-memory SQLite (StaticPool so every session sees the same database),
a seeded student profile with two linked schools, and fake LLM clients.
"""

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from db import Base
from models.models_user import User
from chances.models import (
    StudentProfile,
    StudentAcademics,
    StudentTesting,
    SatScore,
    ActScore,
    ApScore,
    Activity,
    Award,
    StudentProgram,
    Course,
    Goal,
    GoalTask,
    School,
    StudentSchool,
)
from chances.logic.adapter import ChancesRepository
from chances.snapshot.builder import build_profile_snapshot


# =============================================================================
# FAKE LLM
# =============================================================================

class FakeLLM:
    """
    Stands in for LLMClient.

    `objects` / `texts` are returned in order (the last one repeats).
    An Exception instance in either list is raised instead of returned.
    """

    def __init__(self, objects=None, texts=None):
        self.objects = list(objects or [])
        self.texts = list(texts or [])
        self.calls = []

    @staticmethod
    def _next(queue):
        item = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(item, Exception):
            raise item
        return item

    async def generate_object(self, prompt, schema, model="deep", system=None):
        self.calls.append({"kind": "object", "model": model, "prompt": prompt})
        return schema.model_validate(self._next(self.objects))

    async def complete_text(self, system, prompt, model="fast"):
        self.calls.append({"kind": "text", "model": model, "prompt": prompt, "system": system})
        return self._next(self.texts)


def _assessment_payload(probability=42.4, tier="target", **overrides):
    """A valid holistic assessment as the deep model would return it."""
    factor = {"score": 80, "impact": "positive", "details": "Solid"}
    payload = {
        "probability": probability,
        "tier": tier,
        "factors": {
            "academics": dict(factor, score=88.6),
            "testing": factor,
            "activities": factor,
            "awards": dict(factor, score=61, impact="neutral"),
        },
        "summary": "Competitive applicant with a strong science spike.",
        "improvements": [
            {"action": "Retake the SAT", "potentialImpact": "+2-3%", "priority": "high", "category": "testing"},
        ],
        "confidence": "high",
        "confidenceReason": "Complete data available",
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def fake_llm():
    return FakeLLM


@pytest.fixture
def assessment_payload():
    return _assessment_payload


# =============================================================================
# DATABASE
# =============================================================================

@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def seeded(db):
    """
    One free user with a complete profile.

    Schools: a highly selective one (4% admit) and a state school (60% admit),
    both on the school list, plus an unlinked custom entry.
    """
    user = User(id="user-1", email="ada@example.com", full_name="Ada Park")
    db.add(user)

    profile = StudentProfile(
        id="profile-1",
        user_id=user.id,
        first_name="Adaline",
        preferred_name="Ada",
        grade="11th",
        graduation_year=2027,
        high_school_name="Central High",
        high_school_city="Austin",
        high_school_state="TX",
        high_school_type="public",
    )
    db.add(profile)

    db.add(StudentAcademics(
        student_profile_id=profile.id,
        school_reported_gpa_unweighted=3.9,
        school_reported_gpa_weighted=4.4,
        gpa_scale=4.0,
        class_rank=20,
        class_size=400,
    ))

    testing = StudentTesting(id="testing-1", student_profile_id=profile.id, psat_total=1450)
    db.add(testing)
    db.flush()
    db.add_all([
        SatScore(testing_id=testing.id, total=1480, math=760, reading=720),
        SatScore(testing_id=testing.id, total=1520, math=780, reading=740),
        ActScore(testing_id=testing.id, composite=33, english=34, math=33, reading=32, science=33),
        ApScore(testing_id=testing.id, subject="Calculus BC", score=5, year=2025),
    ])

    db.add_all([
        Activity(id="act-1", student_profile_id=profile.id, title="Robotics Captain", organization="Central Robotics",
                 is_leadership=True, is_spike=True, years_active="9-11", hours_per_week=12, display_order=0),
        Activity(id="act-2", student_profile_id=profile.id, title="Hospital Volunteer", organization="St. Mary's",
                 display_order=1),
        Award(id="award-1", student_profile_id=profile.id, title="USAMO Qualifier", level="national", year=2025),
        Award(id="award-2", student_profile_id=profile.id, title="Honor Roll", level="school", display_order=1),
        StudentProgram(id="prog-1", student_profile_id=profile.id, name="RSI", selectivity="highly_selective",
                       year=2026, status="applying"),
        StudentProgram(id="prog-2", student_profile_id=profile.id, name="Math Camp", selectivity="selective",
                       year=2025, status="completed"),
        Course(id="course-1", student_profile_id=profile.id, name="AP Physics C", level="ap", grade="A",
               academic_year="2025-2026", status="completed"),
        Course(id="course-2", student_profile_id=profile.id, name="AP Chemistry", level="ap",
               academic_year="2026-2027", status="in_progress"),
        Course(id="course-3", student_profile_id=profile.id, name="Multivariable Calculus", level="college",
               academic_year="2027-2028", status="planned"),
    ])

    goal = Goal(id="goal-1", student_profile_id=profile.id, title="Publish research paper",
                category="research", status="in_progress", display_order=0)
    db.add(goal)
    db.add_all([
        Goal(id="goal-2", student_profile_id=profile.id, title="Start a tutoring nonprofit",
             status="planning", display_order=1),
        Goal(id="goal-3", student_profile_id=profile.id, title="Learn piano", status="abandoned", display_order=2),
        GoalTask(goal_id=goal.id, title="Find mentor", status="completed"),
        GoalTask(goal_id=goal.id, title="Draft paper", status="pending"),
    ])

    db.add_all([
        School(id="school-elite", name="Stanford University", city="Stanford", state="CA", type="private",
               acceptance_rate=0.04, sat_range_25=1500, sat_range_75=1570, act_range_25=33, act_range_75=35,
               avg_gpa_unweighted=3.95, undergrad_enrollment=7800, has_early_action=True,
               is_restrictive_early_action=True, notes="Values intellectual vitality."),
        School(id="school-state", name="State University", city="Austin", state="TX", type="public",
               acceptance_rate=0.6, sat_range_25=1100, sat_range_75=1300, avg_gpa_unweighted=3.4),
        School(id="school-bare", name="Mystery College"),
    ])

    db.add_all([
        StudentSchool(id="list-1", student_profile_id=profile.id, school_id="school-elite",
                      tier="reach", is_dream=True, display_order=0),
        StudentSchool(id="list-2", student_profile_id=profile.id, school_id="school-state",
                      tier="safety", display_order=1),
        StudentSchool(id="list-3", student_profile_id=profile.id, custom_name="Local Art Institute",
                      tier="target", display_order=2),
    ])
    db.commit()

    return {"user_id": user.id, "profile_id": profile.id}


@pytest.fixture
def repository(db, seeded):
    return ChancesRepository(db)


@pytest.fixture
def snapshot(repository, seeded):
    return build_profile_snapshot(repository, seeded["profile_id"])
