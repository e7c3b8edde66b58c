"""
Tests for the monthly usage gate.
"""

from datetime import datetime

import pytest

from chances.logic.errors import UsageLimitExceededError
from chances.logic.usage import check_usage, record_usage, require_quota
from models.models_user import User


def test_free_user_limit(db, seeded):
    user = db.get(User, seeded["user_id"])
    now = datetime(2026, 3, 15)

    assert check_usage(user, now=now, limit=3).remaining == 3
    for _ in range(3):
        record_usage(db, user, now=now)

    usage = check_usage(user, now=now, limit=3)
    assert usage.tier == "free"
    assert usage.used == 3
    assert usage.allowed is False
    assert usage.remaining == 0


def test_usage_resets_each_month(db, seeded):
    user = db.get(User, seeded["user_id"])
    for _ in range(3):
        record_usage(db, user, now=datetime(2026, 3, 30))

    april = datetime(2026, 4, 1, 8)
    assert check_usage(user, now=april, limit=3).allowed is True
    assert record_usage(db, user, now=april) == 1
    assert user.usage_period_start == datetime(2026, 4, 1)


def test_paid_user_is_unlimited(db, seeded):
    user = db.get(User, seeded["user_id"])
    user.subscription_tier = "paid"
    for _ in range(10):
        record_usage(db, user)

    usage = check_usage(user)
    assert usage.allowed is True
    assert usage.limit is None
    assert usage.used == 10


def test_require_quota_counts_what_is_needed(db, seeded):
    user = db.get(User, seeded["user_id"])
    now = datetime(2026, 3, 15)
    record_usage(db, user, now=now)

    require_quota(check_usage(user, now=now, limit=3), needed=2)
    with pytest.raises(UsageLimitExceededError) as exc:
        require_quota(check_usage(user, now=now, limit=3), needed=3)
    assert exc.value.used == 1
    assert exc.value.limit == 3
