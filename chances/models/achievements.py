from sqlalchemy import Column, String, Integer, Float, Boolean, Text, ForeignKey
from sqlalchemy.orm import relationship

from .base import Base, new_id


class Activity(Base):
    __tablename__ = "activities"

    id = Column(String(36), primary_key=True, default=new_id)
    student_profile_id = Column(String(36), ForeignKey("student_profiles.id"), nullable=False, index=True)
    title = Column(String, nullable=False)
    organization = Column(String, nullable=False, default="")
    category = Column(String)
    is_leadership = Column(Boolean, default=False, nullable=False)
    is_spike = Column(Boolean, default=False, nullable=False)
    years_active = Column(String)
    hours_per_week = Column(Float)
    description = Column(Text)
    is_continuing = Column(Boolean, default=True, nullable=False)
    display_order = Column(Integer, default=0, nullable=False)

    profile = relationship("StudentProfile", back_populates="activities")


class Award(Base):
    __tablename__ = "awards"

    id = Column(String(36), primary_key=True, default=new_id)
    student_profile_id = Column(String(36), ForeignKey("student_profiles.id"), nullable=False, index=True)
    title = Column(String, nullable=False)
    organization = Column(String)
    level = Column(String, nullable=False, default="school")  # school/regional/state/national/international
    category = Column(String)
    year = Column(Integer)
    display_order = Column(Integer, default=0, nullable=False)

    profile = relationship("StudentProfile", back_populates="awards")


class StudentProgram(Base):
    __tablename__ = "student_programs"

    id = Column(String(36), primary_key=True, default=new_id)
    student_profile_id = Column(String(36), ForeignKey("student_profiles.id"), nullable=False, index=True)
    name = Column(String, nullable=False)
    organization = Column(String)
    type = Column(String, nullable=False, default="summer")  # summer/research/internship/...
    selectivity = Column(String)  # highly_selective/selective/open
    year = Column(Integer)
    # interested/applying/applied/attending/completed
    status = Column(String, nullable=False, default="completed")

    profile = relationship("StudentProfile", back_populates="programs")


class Course(Base):
    __tablename__ = "courses"

    id = Column(String(36), primary_key=True, default=new_id)
    student_profile_id = Column(String(36), ForeignKey("student_profiles.id"), nullable=False, index=True)
    name = Column(String, nullable=False)
    subject = Column(String)
    level = Column(String)  # regular/honors/ap/ib/college
    grade = Column(String)
    academic_year = Column(String)
    # completed/in_progress/planned
    status = Column(String, nullable=False, default="completed")

    profile = relationship("StudentProfile", back_populates="courses")
