import uuid
from datetime import datetime
from sqlalchemy import Column, String, Integer, DateTime
from db import Base

class User(Base):
    __tablename__ = "users"
    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    email = Column(String(255), unique=True, index=True, nullable=False)
    full_name = Column(String(255))
    # "free" | "paid"
    subscription_tier = Column(String(16), nullable=False, default="free")
    chances_used = Column(Integer, nullable=False, default=0)
    usage_period_start = Column(DateTime(timezone=False), nullable=True)
    created_at = Column(DateTime(timezone=False), default=datetime.utcnow, nullable=False)

    @property
    def is_paid(self) -> bool:
        return self.subscription_tier == "paid"
