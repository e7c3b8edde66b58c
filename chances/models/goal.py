from sqlalchemy import Column, String, Integer, Text, Date, ForeignKey
from sqlalchemy.orm import relationship

from .base import Base, new_id


class Goal(Base):
    __tablename__ = "goals"

    id = Column(String(36), primary_key=True, default=new_id)
    student_profile_id = Column(String(36), ForeignKey("student_profiles.id"), nullable=False, index=True)
    title = Column(String, nullable=False)
    description = Column(Text)
    category = Column(String, nullable=False, default="other")
    # planning/in_progress/completed/abandoned/parking_lot
    status = Column(String, nullable=False, default="planning")
    priority = Column(String)
    target_date = Column(Date)
    impact_description = Column(Text)
    display_order = Column(Integer, default=0, nullable=False)

    profile = relationship("StudentProfile", back_populates="goals")
    tasks = relationship("GoalTask", back_populates="goal")


class GoalTask(Base):
    __tablename__ = "goal_tasks"

    id = Column(String(36), primary_key=True, default=new_id)
    goal_id = Column(String(36), ForeignKey("goals.id"), nullable=False, index=True)
    title = Column(String, nullable=False)
    status = Column(String, nullable=False, default="pending")  # pending/completed

    goal = relationship("Goal", back_populates="tasks")
