"""
Chances Engine

Main orchestrator for admission-chances assessments.
This is the primary entry point for routes and background refreshes.

Pipeline flow:
1. Snapshot - Build the student's ProfileSnapshot through the repository
2. School - Load the target school's statistics
3. Assessment - Holistic (deep model) or legacy (quantitative + refiner)
4. Persistence - Optionally cache the probability on school-list rows
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Dict, List, Sequence

from ..ai.holistic_assessor import HolisticAssessor
from ..ai.refiner import LegacyRefiner
from ..snapshot.builder import build_profile_snapshot
from ..snapshot.contracts import ProfileSnapshot
from .aggregator import calculate_quantitative
from .constants import ChancesMode, ItemStatus, CHANCES_CONCURRENCY, DEFAULT_MODE
from .contracts import ChancesResult, ExtendedSchoolData, ModeComparison, QuantitativeResult
from .errors import ProfileNotFoundError, SchoolNotFoundError

logger = logging.getLogger(__name__)

STRATEGIES = ("holistic", "legacy")


class ChancesEngine:
    """
    Args:
        repository: ChancesRepository (or anything with the same reads/writes)
        llm: LLMClient used to build the default assessors
        holistic: optional pre-built HolisticAssessor
        refiner: optional pre-built LegacyRefiner
    """

    def __init__(self, repository, llm=None, holistic=None, refiner=None):
        self.repository = repository
        self.holistic = holistic or HolisticAssessor(llm)
        self.refiner = refiner or LegacyRefiner(llm)

    # =========================================================================
    # LOADING
    # =========================================================================

    def _load_snapshot(self, profile_id: str) -> ProfileSnapshot:
        snapshot = build_profile_snapshot(self.repository, profile_id, include_goals=True, include_schools=True)
        if snapshot is None:
            raise ProfileNotFoundError(profile_id)
        return snapshot

    def _load_school(self, school_id: str) -> ExtendedSchoolData:
        school = self.repository.load_school(school_id)
        if school is None:
            raise SchoolNotFoundError(school_id)
        return school

    # =========================================================================
    # SINGLE SCHOOL
    # =========================================================================

    async def calculate_chances(
        self,
        profile_id: str,
        school_id: str,
        mode=DEFAULT_MODE,
        strategy: str = "holistic",
    ) -> ChancesResult:
        """
        Assess one student at one school.

        Raises:
            ProfileNotFoundError, SchoolNotFoundError, ChancesAssessmentError (holistic only)
        """
        mode = ChancesMode(mode)
        snapshot = self._load_snapshot(profile_id)
        school = self._load_school(school_id)
        return await self._assess(snapshot, school, mode, strategy)

    async def _assess(
        self,
        snapshot: ProfileSnapshot,
        school: ExtendedSchoolData,
        mode: ChancesMode,
        strategy: str,
    ) -> ChancesResult:
        if strategy not in STRATEGIES:
            raise ValueError(f"Unknown strategy: {strategy}")

        if strategy == "legacy":
            quantitative = calculate_quantitative(snapshot, school)
            logger.info(f"Quantitative base for {school.name}: {quantitative.base_probability}%")
            return await self.refiner.refine(snapshot, school, mode, quantitative)

        return await self.holistic.assess(snapshot, school, mode)

    def calculate_quantitative_only(self, profile_id: str, school_id: str) -> QuantitativeResult:
        """Deterministic estimate, no LLM involved."""
        snapshot = self._load_snapshot(profile_id)
        school = self._load_school(school_id)
        return calculate_quantitative(snapshot, school)

    # =========================================================================
    # MULTIPLE SCHOOLS
    # =========================================================================

    async def calculate_chances_multiple(
        self,
        profile_id: str,
        school_ids: Sequence[str],
        mode=DEFAULT_MODE,
        strategy: str = "holistic",
    ) -> Dict[str, ChancesResult]:
        """
        Assess several schools, CHANCES_CONCURRENCY at a time.

        Schools that fail (missing, assessment error) are logged and left out
        of the returned mapping. Nothing is retried.
        """
        mode = ChancesMode(mode)
        snapshot = self._load_snapshot(profile_id)

        results: Dict[str, ChancesResult] = {}
        ids = list(dict.fromkeys(school_ids))

        for i in range(0, len(ids), CHANCES_CONCURRENCY):
            batch = ids[i:i + CHANCES_CONCURRENCY]
            outcomes = await asyncio.gather(
                *(self._assess_by_id(snapshot, school_id, mode, strategy) for school_id in batch),
                return_exceptions=True,
            )
            for school_id, outcome in zip(batch, outcomes):
                if isinstance(outcome, BaseException):
                    logger.error(f"❌ Chances for school {school_id} failed: {outcome}")
                    continue
                results[school_id] = outcome

        logger.info(f"Calculated chances for {len(results)}/{len(ids)} schools")
        return results

    async def _assess_by_id(self, snapshot, school_id, mode, strategy) -> ChancesResult:
        school = self._load_school(school_id)
        return await self._assess(snapshot, school, mode, strategy)

    async def update_stored_chances(
        self,
        profile_id: str,
        mode=DEFAULT_MODE,
        strategy: str = "holistic",
    ) -> int:
        """
        Recompute and cache chances on every linked school-list row.

        Returns:
            Number of rows updated
        """
        rows = self.repository.linked_school_list(profile_id)
        if not rows:
            return 0

        results = await self.calculate_chances_multiple(
            profile_id, [row.school_id for row in rows], mode=mode, strategy=strategy
        )

        now = datetime.now(timezone.utc)
        updated = 0
        for row in rows:
            result = results.get(row.school_id)
            if result is None:
                continue
            self.repository.update_cached_chance(row.id, result.probability, now)
            updated += 1

        logger.info(f"Updated stored chances on {updated}/{len(rows)} school-list rows")
        return updated

    # =========================================================================
    # MODE COMPARISON
    # =========================================================================

    async def calculate_with_comparison(self, profile_id: str, school_id: str) -> ChancesResult:
        """
        Projected assessment with the current-mode probability attached, plus
        the in-progress items that account for the difference.
        """
        snapshot = self._load_snapshot(profile_id)
        school = self._load_school(school_id)

        current, projected = await asyncio.gather(
            self.holistic.assess(snapshot, school, ChancesMode.CURRENT),
            self.holistic.assess(snapshot, school, ChancesMode.PROJECTED),
        )

        comparison = ModeComparison(
            current_probability=current.probability,
            projected_probability=projected.probability,
            projected_boost_drivers=projected_boost_drivers(snapshot),
        )
        return projected.model_copy(update={"comparison": comparison})


def projected_boost_drivers(snapshot: ProfileSnapshot) -> List[str]:
    """Titles of everything projected mode counts that current mode does not."""
    in_progress = ItemStatus.IN_PROGRESS.value
    drivers = [g.title for g in snapshot.goals if g.status == "in_progress"]
    drivers += [a.title for a in snapshot.activities if a.status == in_progress]
    drivers += [a.title for a in snapshot.awards if a.status == in_progress]
    drivers += [p.name for p in snapshot.programs if p.status == in_progress]
    drivers += [c.name for c in snapshot.courses if c.status == in_progress]
    return drivers
