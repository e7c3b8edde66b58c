from sqlalchemy import Column, String, Integer, Float, Boolean, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from .base import Base, new_id


class StudentSchool(Base):
    __tablename__ = "student_schools"

    id = Column(String(36), primary_key=True, default=new_id)
    student_profile_id = Column(String(36), ForeignKey("student_profiles.id"), nullable=False, index=True)
    # Null for schools the student typed in that are not linked to reference data
    school_id = Column(String(36), ForeignKey("schools.id"), nullable=True)
    custom_name = Column(String)

    tier = Column(String, nullable=False, default="target")  # reach/target/safety
    is_dream = Column(Boolean, default=False, nullable=False)
    interest_level = Column(String)
    status = Column(String, nullable=False, default="researching")
    application_type = Column(String)  # ed/ea/rea/rd
    display_order = Column(Integer, default=0, nullable=False)

    # Cached chances (decimal 0-1), can go stale
    calculated_chance = Column(Float)
    chance_updated_at = Column(DateTime)

    profile = relationship("StudentProfile", back_populates="school_list")
    school = relationship("School")
