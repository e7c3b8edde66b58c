# Export all chances models for easy imports
from .base import Base
from .student_profile import StudentProfile, StudentAcademics
from .testing import StudentTesting, SatScore, ActScore, ApScore
from .achievements import Activity, Award, StudentProgram, Course
from .goal import Goal, GoalTask
from .school import School
from .student_school import StudentSchool

__all__ = [
    "Base",
    "StudentProfile",
    "StudentAcademics",
    "StudentTesting",
    "SatScore",
    "ActScore",
    "ApScore",
    "Activity",
    "Award",
    "StudentProgram",
    "Course",
    "Goal",
    "GoalTask",
    "School",
    "StudentSchool",
]
