from datetime import datetime

from sqlalchemy import Column, String, Integer, Float, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from .base import Base, new_id


class StudentProfile(Base):
    __tablename__ = "student_profiles"

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String(36), ForeignKey("users.id"), unique=True, index=True)

    # Basics
    first_name = Column(String, nullable=False)
    last_name = Column(String)
    preferred_name = Column(String)
    grade = Column(String)
    graduation_year = Column(Integer)

    # High school
    high_school_name = Column(String)
    high_school_city = Column(String)
    high_school_state = Column(String)
    high_school_type = Column(String)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    academics = relationship("StudentAcademics", uselist=False, back_populates="profile")
    testing = relationship("StudentTesting", uselist=False, back_populates="profile")
    activities = relationship("Activity", order_by="Activity.display_order", back_populates="profile")
    awards = relationship("Award", order_by="Award.display_order", back_populates="profile")
    programs = relationship("StudentProgram", order_by="StudentProgram.year.desc()", back_populates="profile")
    courses = relationship("Course", order_by="Course.academic_year.desc()", back_populates="profile")
    goals = relationship("Goal", order_by="Goal.display_order", back_populates="profile")
    school_list = relationship("StudentSchool", order_by="StudentSchool.display_order", back_populates="profile")


class StudentAcademics(Base):
    __tablename__ = "student_academics"

    id = Column(String(36), primary_key=True, default=new_id)
    student_profile_id = Column(String(36), ForeignKey("student_profiles.id"), unique=True, nullable=False)

    school_reported_gpa_unweighted = Column(Float)
    school_reported_gpa_weighted = Column(Float)
    gpa_scale = Column(Float)
    class_rank = Column(Integer)
    class_size = Column(Integer)

    profile = relationship("StudentProfile", back_populates="academics")
