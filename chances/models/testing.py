from sqlalchemy import Column, String, Integer, Boolean, Date, ForeignKey
from sqlalchemy.orm import relationship

from .base import Base, new_id


class StudentTesting(Base):
    __tablename__ = "student_testing"

    id = Column(String(36), primary_key=True, default=new_id)
    student_profile_id = Column(String(36), ForeignKey("student_profiles.id"), unique=True, nullable=False)
    psat_total = Column(Integer)

    profile = relationship("StudentProfile", back_populates="testing")
    # Attempts are read in insertion order; primary selection breaks ties on that order
    sat_scores = relationship("SatScore", order_by="SatScore.seq")
    act_scores = relationship("ActScore", order_by="ActScore.seq")
    ap_scores = relationship("ApScore", order_by="ApScore.seq")


class SatScore(Base):
    __tablename__ = "sat_scores"

    seq = Column(Integer, primary_key=True, autoincrement=True)
    testing_id = Column(String(36), ForeignKey("student_testing.id"), nullable=False)
    total = Column(Integer, nullable=False)
    math = Column(Integer, nullable=False)
    reading = Column(Integer, nullable=False)
    test_date = Column(Date)
    is_primary = Column(Boolean, default=False, nullable=False)


class ActScore(Base):
    __tablename__ = "act_scores"

    seq = Column(Integer, primary_key=True, autoincrement=True)
    testing_id = Column(String(36), ForeignKey("student_testing.id"), nullable=False)
    composite = Column(Integer, nullable=False)
    english = Column(Integer, nullable=False)
    math = Column(Integer, nullable=False)
    reading = Column(Integer, nullable=False)
    science = Column(Integer, nullable=False)
    test_date = Column(Date)
    is_primary = Column(Boolean, default=False, nullable=False)


class ApScore(Base):
    __tablename__ = "ap_scores"

    seq = Column(Integer, primary_key=True, autoincrement=True)
    testing_id = Column(String(36), ForeignKey("student_testing.id"), nullable=False)
    subject = Column(String, nullable=False)
    score = Column(Integer, nullable=False)
    year = Column(Integer)
