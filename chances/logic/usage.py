"""
Subscription Usage Gate

Free users get a fixed number of chances assessments per calendar month;
paid users are unlimited. The chances engine never reads subscription data
itself, routes consult this gate before calling it.
"""

import os
import logging
from datetime import datetime
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel
from sqlalchemy.orm import Session

from models.models_user import User
from .errors import UsageLimitExceededError

load_dotenv()

logger = logging.getLogger(__name__)

FREE_MONTHLY_LIMIT = int(os.getenv("CHANCES_FREE_MONTHLY_LIMIT", "3"))


class UsageCheck(BaseModel):
    tier: str  # "free" | "paid"
    allowed: bool
    used: int
    limit: Optional[int] = None  # None = unlimited
    remaining: Optional[int] = None


def _period_start(now: datetime) -> datetime:
    return now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)


def _used_this_period(user: User, now: datetime) -> int:
    if user.usage_period_start is None or user.usage_period_start < _period_start(now):
        return 0
    return user.chances_used or 0


def check_usage(user: User, now: Optional[datetime] = None, limit: int = FREE_MONTHLY_LIMIT) -> UsageCheck:
    now = now or datetime.utcnow()
    used = _used_this_period(user, now)

    if user.is_paid:
        return UsageCheck(tier="paid", allowed=True, used=used)

    return UsageCheck(
        tier="free",
        allowed=used < limit,
        used=used,
        limit=limit,
        remaining=max(0, limit - used),
    )


def require_quota(usage: UsageCheck, needed: int = 1) -> None:
    """Raise UsageLimitExceededError unless `needed` more assessments fit this month."""
    if not usage.allowed or (usage.remaining is not None and usage.remaining < needed):
        raise UsageLimitExceededError(usage.tier, usage.used, usage.limit)


def record_usage(db: Session, user: User, now: Optional[datetime] = None) -> int:
    """Count one assessment against the user's month. Returns the new total."""
    now = now or datetime.utcnow()
    if user.usage_period_start is None or user.usage_period_start < _period_start(now):
        user.usage_period_start = _period_start(now)
        user.chances_used = 0
        logger.info(f"Usage period reset for user {user.id}")

    user.chances_used = (user.chances_used or 0) + 1
    db.flush()
    return user.chances_used
