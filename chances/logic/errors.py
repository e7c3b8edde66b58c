"""
Chances engine errors.

Routes translate these into HTTP responses. The quantitative scorer never
raises; the holistic assessor raises ChancesAssessmentError on any failure.
"""


class ProfileNotFoundError(LookupError):
    def __init__(self, profile_id: str):
        super().__init__(f"Profile not found: {profile_id}")
        self.profile_id = profile_id


class SchoolNotFoundError(LookupError):
    def __init__(self, school_id: str):
        super().__init__(f"School not found: {school_id}")
        self.school_id = school_id


class ChancesAssessmentError(RuntimeError):
    """The holistic assessment could not be produced. Safe to retry."""

    retryable = True


class UsageLimitExceededError(RuntimeError):
    def __init__(self, tier: str, used: int, limit: int):
        super().__init__(f"Monthly chances limit reached for {tier} tier ({used}/{limit})")
        self.tier = tier
        self.used = used
        self.limit = limit
