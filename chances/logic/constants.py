"""
Chances Engine Constants

Defines the weights, breakpoints, benchmarks and enums used by the
quantitative scorer and the tier classifier.
All values are deterministic - changing any of them changes every result.
"""

from enum import Enum
from typing import Dict, List, Tuple


# =============================================================================
# ENUMS
# =============================================================================

class ChancesMode(str, Enum):
    """Which subset of achievements feeds an assessment."""
    CURRENT = "current"        # actual items only
    PROJECTED = "projected"    # actual + in-progress
    SIMULATED = "simulated"    # everything, including planned


class ChancesTier(str, Enum):
    """Ordinal classification of admission probability (worst to best)."""
    UNLIKELY = "unlikely"
    REACH = "reach"
    TARGET = "target"
    LIKELY = "likely"
    SAFETY = "safety"


class ImpactLevel(str, Enum):
    STRONG_POSITIVE = "strong_positive"
    POSITIVE = "positive"
    NEUTRAL = "neutral"
    NEGATIVE = "negative"
    STRONG_NEGATIVE = "strong_negative"


class Confidence(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class ItemStatus(str, Enum):
    ACTUAL = "actual"
    IN_PROGRESS = "in_progress"
    PLANNING = "planning"


# =============================================================================
# TIER BREAKPOINTS
# =============================================================================

# (exclusive upper bound, tier) checked in order; anything above is SAFETY
TIER_BREAKPOINTS: List[Tuple[float, ChancesTier]] = [
    (15, ChancesTier.UNLIKELY),
    (30, ChancesTier.REACH),
    (50, ChancesTier.TARGET),
    (70, ChancesTier.LIKELY),
]

TIER_ORDER: List[ChancesTier] = [
    ChancesTier.UNLIKELY,
    ChancesTier.REACH,
    ChancesTier.TARGET,
    ChancesTier.LIKELY,
    ChancesTier.SAFETY,
]

# (inclusive lower bound, impact) checked in order
IMPACT_THRESHOLDS: List[Tuple[float, ImpactLevel]] = [
    (85, ImpactLevel.STRONG_POSITIVE),
    (70, ImpactLevel.POSITIVE),
    (50, ImpactLevel.NEUTRAL),
    (35, ImpactLevel.NEGATIVE),
]

# =============================================================================
# PROBABILITY BOUNDS
# =============================================================================

MIN_PROBABILITY = 1
MAX_PROBABILITY = 95           # LLM paths never report more than this
QUANT_CEILING_MAX = 80         # hard cap for the quantitative blend
ACCEPTANCE_CEILING_MULTIPLIER = 2.5

# =============================================================================
# FACTOR WEIGHTS
# =============================================================================

# Weights for each quantitative factor (must sum to 1.0)
FACTOR_WEIGHTS: Dict[str, float] = {
    "academics": 0.35,
    "testing": 0.35,
    "acceptance_rate": 0.30,
}

NEUTRAL_SCORE = 50

# =============================================================================
# ACADEMICS
# =============================================================================

# Signed distance from a school's average GPA
GPA_AVG_SLIGHTLY_BELOW = -0.2

# (acceptance rate upper bound, target GPA, tolerance, label) when the school
# publishes no average GPA. Last entry is the catch-all.
GPA_SELECTIVITY_BENCHMARKS: List[Tuple[float, float, float, str]] = [
    (0.15, 3.95, 0.1, "highly selective school"),
    (0.40, 3.7, 0.2, "selective school"),
    (1.01, 3.3, 0.3, ""),
]
GPA_BENCHMARK_STEP = 0.1

# Class rank percentile adds at most +/- this many points
CLASS_RANK_MAX_ADJUSTMENT = 10
CLASS_RANK_CALLOUT_PERCENTILE = 90

ACADEMICS_FLOOR = 20

# =============================================================================
# TESTING
# =============================================================================

SAT_BENCHMARKS: List[Tuple[float, int, int, str]] = [
    (0.10, 1550, 30, "highly selective school"),
    (0.25, 1480, 40, "very selective school"),
    (0.50, 1350, 60, "selective school"),
    (1.01, 1200, 80, ""),
]
SAT_BENCHMARK_STEP = 30
SAT_MAX = 1600
TESTING_FLOOR = 15

# Concordance table (ACT composite -> SAT total)
ACT_TO_SAT: Dict[int, int] = {
    36: 1600, 35: 1570, 34: 1530, 33: 1500, 32: 1470,
    31: 1440, 30: 1410, 29: 1380, 28: 1350, 27: 1320,
    26: 1290, 25: 1260, 24: 1230, 23: 1200, 22: 1170,
    21: 1140, 20: 1110, 19: 1080, 18: 1050, 17: 1020,
}
ACT_TABLE_MIN = 17
ACT_TABLE_MAX = 36

# =============================================================================
# ACCEPTANCE RATE PRIOR
# =============================================================================

# (rate percent upper bound, base score, slope, offset, impact, label)
# score = base + (rate_percent - offset) * slope
ACCEPTANCE_RATE_BANDS: List[Tuple[float, float, float, float, ImpactLevel, str]] = [
    (10, 0.0, 2.0, 0.0, ImpactLevel.STRONG_NEGATIVE, "extremely selective"),
    (25, 20.0, 1.5, 10.0, ImpactLevel.NEGATIVE, "highly selective"),
    (50, 42.5, 1.1, 25.0, ImpactLevel.NEUTRAL, "selective"),
    (75, 70.0, 0.6, 50.0, ImpactLevel.POSITIVE, "moderately selective"),
    (float("inf"), 85.0, 0.4, 75.0, ImpactLevel.STRONG_POSITIVE, "less selective"),
]
ACCEPTANCE_RATE_MAX_SCORE = 95

# =============================================================================
# LLM ASSESSMENT
# =============================================================================

MAX_IMPROVEMENTS = 5
REFINER_MAX_ADJUSTMENT = 20

# Simultaneous LLM calls when computing chances for a school list
CHANCES_CONCURRENCY = 2

DEFAULT_MODE = ChancesMode.PROJECTED

# =============================================================================
# SNAPSHOT COUNTS
# =============================================================================

NATIONAL_AWARD_LEVELS = ("national", "international")
SELECTIVE_PROGRAM_LEVELS = ("highly_selective", "selective")
ADVANCED_COURSE_LEVELS = ("ap", "ib")
