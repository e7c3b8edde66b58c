from sqlalchemy import Column, String, Integer, Float, Boolean, Text

from .base import Base, new_id


class School(Base):
    __tablename__ = "schools"

    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(String, nullable=False)
    city = Column(String)
    state = Column(String)
    type = Column(String)  # public/private

    # Admission statistics
    acceptance_rate = Column(Float)  # decimal, e.g. 0.04
    sat_range_25 = Column(Integer)
    sat_range_75 = Column(Integer)
    act_range_25 = Column(Integer)
    act_range_75 = Column(Integer)
    avg_gpa_unweighted = Column(Float)
    avg_gpa_weighted = Column(Float)
    undergrad_enrollment = Column(Integer)

    # Admission plans
    has_early_decision = Column(Boolean, default=False, nullable=False)
    has_early_action = Column(Boolean, default=False, nullable=False)
    is_restrictive_early_action = Column(Boolean, default=False, nullable=False)

    # LLM context about what the school values
    notes = Column(Text)
