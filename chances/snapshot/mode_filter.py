"""
Mode Filter

Restricts a snapshot to the achievements a given mode may consider, before
any prompt text is generated:

- current:   actual items only, no goals
- projected: actual + in-progress items, in-progress goals
- simulated: every item, in-progress + planning goals

The input snapshot is left untouched; a rebuilt snapshot (with its counts
recomputed by the builder) is returned.
"""

from ..logic.constants import ChancesMode, ItemStatus
from .builder import compute_counts
from .contracts import ProfileSnapshot


ITEM_STATUSES_BY_MODE = {
    ChancesMode.CURRENT: {ItemStatus.ACTUAL.value},
    ChancesMode.PROJECTED: {ItemStatus.ACTUAL.value, ItemStatus.IN_PROGRESS.value},
    ChancesMode.SIMULATED: {ItemStatus.ACTUAL.value, ItemStatus.IN_PROGRESS.value, ItemStatus.PLANNING.value},
}

GOAL_STATUSES_BY_MODE = {
    ChancesMode.CURRENT: set(),
    ChancesMode.PROJECTED: {"in_progress"},
    ChancesMode.SIMULATED: {"in_progress", "planning"},
}


def filter_snapshot_for_mode(snapshot: ProfileSnapshot, mode) -> ProfileSnapshot:
    mode = ChancesMode(mode)
    allowed = ITEM_STATUSES_BY_MODE[mode]
    allowed_goals = GOAL_STATUSES_BY_MODE[mode]

    activities = [a for a in snapshot.activities if a.status in allowed]
    awards = [a for a in snapshot.awards if a.status in allowed]
    programs = [p for p in snapshot.programs if p.status in allowed]
    courses = [c for c in snapshot.courses if c.status in allowed]
    goals = [g for g in snapshot.goals if g.status in allowed_goals]

    return snapshot.model_copy(update={
        "activities": tuple(activities),
        "awards": tuple(awards),
        "programs": tuple(programs),
        "courses": tuple(courses),
        "goals": tuple(goals),
        "counts": compute_counts(activities, awards, programs, courses, goals),
    })
