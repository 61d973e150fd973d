"""
Readiness Adjustment
Maps a daily self-report to a readiness level and session multipliers

Ratings are 1-5. Sleep is higher-is-better; soreness and stress are
inverted before they are combined so that the composite score is
higher-is-better for all three.
"""

import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Dict, List, Optional, Tuple

from .models import Modality, PlannedSet, ReadinessCheckIn

logger = logging.getLogger(__name__)

RATING_MIN = 1
RATING_MAX = 5


class ReadinessLevel(str, Enum):
    """Adjustment levels, least to most restrictive"""
    FULL = "full"
    REDUCED = "reduced"
    LIGHT = "light"
    REST = "rest"

    @property
    def severity(self) -> int:
        return list(ReadinessLevel).index(self)

    def at_least(self, other: 'ReadinessLevel') -> 'ReadinessLevel':
        """The more restrictive of the two levels"""
        return self if self.severity >= other.severity else other


class LevelSource(str, Enum):
    COMPUTED = "computed"
    OVERRIDDEN = "overridden"


@dataclass(frozen=True)
class AdjustmentMultipliers:
    intensity: float
    volume: float
    rpe_offset: float
    rest_multiplier: float
    sets_dropped: int = 0
    mobility_only: bool = False

    def to_dict(self) -> Dict:
        return {
            'intensity': self.intensity,
            'volume': self.volume,
            'rpe_offset': self.rpe_offset,
            'rest_multiplier': self.rest_multiplier,
            'sets_dropped': self.sets_dropped,
            'mobility_only': self.mobility_only
        }


@dataclass
class ReadinessAssessment:
    """Computed readiness for one day"""
    score: int
    level: ReadinessLevel
    forced_downgrade: bool
    factors: Dict[str, str] = field(default_factory=dict)
    recommendations: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict:
        return {
            'score': self.score,
            'level': self.level.value,
            'forced_downgrade': self.forced_downgrade,
            'factors': self.factors,
            'recommendations': self.recommendations
        }


@dataclass(frozen=True)
class LevelDecision:
    """
    The level that governs today's session.

    Either the computed suggestion or the athlete's override; the
    suggestion is kept alongside an override, never replaced by it.
    """
    source: LevelSource
    level: ReadinessLevel
    suggested: ReadinessLevel

    @property
    def is_overridden(self) -> bool:
        return self.source == LevelSource.OVERRIDDEN

    def to_dict(self) -> Dict:
        return {
            'source': self.source.value,
            'level': self.level.value,
            'suggested': self.suggested.value
        }


class ReadinessAdjuster:
    """
    Turns sleep/soreness/stress ratings into a readiness level.

    Score = sleep*8 + (6 - soreness)*6 + (6 - stress)*6, a weighted average
    of the higher-is-better ratings scaled to 20-100.
    """

    # Minimum score for each level, checked in order
    LEVEL_CUTOFFS = [
        (80, ReadinessLevel.FULL),
        (60, ReadinessLevel.REDUCED),
        (40, ReadinessLevel.LIGHT),
    ]

    WEIGHTS = {'sleep': 8, 'soreness': 6, 'stress': 6}

    # Two or more ratings at the extreme force at least this level
    EXTREME_RATING = 1
    EXTREME_COUNT = 2
    EXTREME_FLOOR = ReadinessLevel.LIGHT

    LEVEL_ADJUSTMENTS = {
        ReadinessLevel.FULL: AdjustmentMultipliers(
            intensity=1.0, volume=1.0, rpe_offset=0, rest_multiplier=1.0),
        ReadinessLevel.REDUCED: AdjustmentMultipliers(
            intensity=0.85, volume=0.9, rpe_offset=-0.5, rest_multiplier=1.1, sets_dropped=1),
        ReadinessLevel.LIGHT: AdjustmentMultipliers(
            intensity=0.7, volume=0.7, rpe_offset=-1, rest_multiplier=1.25, sets_dropped=2),
        ReadinessLevel.REST: AdjustmentMultipliers(
            intensity=0.6, volume=0.5, rpe_offset=-2, rest_multiplier=1.5, mobility_only=True),
    }

    def assess(self, sleep_quality: Optional[int], muscle_soreness: Optional[int],
               stress_level: Optional[int]) -> Optional[ReadinessAssessment]:
        """
        Args:
            sleep_quality: 1 (terrible) to 5 (great)
            muscle_soreness: 1 (fresh) to 5 (wrecked)
            stress_level: 1 (calm) to 5 (chaos)

        Returns:
            ReadinessAssessment, or None ("no assessment yet") when a rating
            is missing or out of range
        """
        ratings = (sleep_quality, muscle_soreness, stress_level)
        if not all(_is_valid_rating(r) for r in ratings):
            logger.debug("Invalid readiness ratings %s, declining to assess", ratings)
            return None

        score = (sleep_quality * self.WEIGHTS['sleep']
                 + (6 - muscle_soreness) * self.WEIGHTS['soreness']
                 + (6 - stress_level) * self.WEIGHTS['stress'])

        level = ReadinessLevel.REST
        for cutoff, candidate in self.LEVEL_CUTOFFS:
            if score >= cutoff:
                level = candidate
                break

        forced = False
        extremes = sum(1 for r in ratings if r == self.EXTREME_RATING)
        if extremes >= self.EXTREME_COUNT:
            floored = level.at_least(self.EXTREME_FLOOR)
            forced = floored != level
            level = floored

        return ReadinessAssessment(
            score=score,
            level=level,
            forced_downgrade=forced,
            factors={
                'sleep': _impact(sleep_quality, higher_is_better=True),
                'soreness': _impact(muscle_soreness, higher_is_better=False),
                'stress': _impact(stress_level, higher_is_better=False),
            },
            recommendations=self._recommendations(sleep_quality, muscle_soreness,
                                                  stress_level, level)
        )

    def assess_check_in(self, check_in: ReadinessCheckIn) -> Optional[ReadinessAssessment]:
        return self.assess(check_in.sleep_quality, check_in.muscle_soreness,
                           check_in.stress_level)

    def decide_check_in(self, check_in: ReadinessCheckIn
                        ) -> Tuple[Optional[ReadinessAssessment], Optional[LevelDecision]]:
        """
        Assess a stored check-in and resolve the level for its day.

        The level already applied to the day (adjustment_applied) is the
        athlete's override. An unknown stored level is ignored.

        Returns:
            (assessment, decision), or (None, None) when the ratings cannot
            be assessed
        """
        assessment = self.assess_check_in(check_in)
        if assessment is None:
            return None, None

        applied = check_in.adjustment_applied
        override = None
        if isinstance(applied, ReadinessLevel):
            override = applied
        elif applied:
            try:
                override = ReadinessLevel(applied.lower())
            except ValueError:
                logger.debug("Ignoring unknown applied level %r", applied)
        return assessment, self.resolve_level(assessment, override)

    def resolve_level(self, assessment: ReadinessAssessment,
                      override: Optional[ReadinessLevel] = None) -> LevelDecision:
        """Today's authoritative level: the override when given, else the suggestion"""
        if override is not None:
            return LevelDecision(LevelSource.OVERRIDDEN, ReadinessLevel(override), assessment.level)
        return LevelDecision(LevelSource.COMPUTED, assessment.level, assessment.level)

    def multipliers_for(self, level: ReadinessLevel) -> AdjustmentMultipliers:
        return self.LEVEL_ADJUSTMENTS[ReadinessLevel(level)]

    def apply_adjustments(self, planned_sets: List[PlannedSet],
                          level: ReadinessLevel) -> List[PlannedSet]:
        """
        Apply a level's multipliers to an upcoming session plan.

        Warm-ups pass through untouched. Each exercise keeps at least one
        working set. At rest level only mobility work remains, all optional.
        Returns new PlannedSet objects in the original set order.
        """
        multipliers = self.multipliers_for(level)

        if multipliers.mobility_only:
            return [
                replace(s, optional=True, adjusted=True,
                        original_load=s.target_load, original_rpe=s.target_rpe)
                for s in planned_sets
                if s.exercise.modality == Modality.MOBILITY
            ]

        by_exercise: Dict[str, List[PlannedSet]] = {}
        for s in planned_sets:
            by_exercise.setdefault(s.exercise.id, []).append(s)

        adjusted = []
        for sets in by_exercise.values():
            working = [s for s in sets if not s.is_warmup]
            keep = max(1, len(working) - multipliers.sets_dropped) if working else 0
            adjusted.extend(s for s in sets if s.is_warmup)
            adjusted.extend(self._scale(s, multipliers) for s in working[:keep])

        return sorted(adjusted, key=lambda s: s.set_order)

    def _scale(self, planned: PlannedSet, multipliers: AdjustmentMultipliers) -> PlannedSet:
        load = planned.target_load
        rpe = planned.target_rpe
        return replace(
            planned,
            target_load=round(load * multipliers.intensity) if load else load,
            target_rpe=max(5, min(10, rpe + multipliers.rpe_offset)) if rpe else rpe,
            original_load=load,
            original_rpe=rpe,
            adjusted=True
        )

    def _recommendations(self, sleep: int, soreness: int, stress: int,
                         level: ReadinessLevel) -> List[str]:
        recommendations = []

        if sleep <= 2:
            recommendations.append("Poor sleep - limit high-skill movements and max attempts")
        if soreness >= 4:
            recommendations.append("High soreness - reduce volume on affected muscle groups")
        if stress >= 4:
            recommendations.append("Elevated stress - keep the session controlled")

        if level == ReadinessLevel.FULL:
            recommendations.append("Good day to push intensity or attempt PRs")
        elif level == ReadinessLevel.REDUCED:
            recommendations.append("Drop one working set per exercise and ease the load")
        elif level == ReadinessLevel.LIGHT:
            recommendations.append("Focus on movement quality at clearly reduced loads")
        else:
            recommendations.append("Swap the session for optional mobility work or rest")

        return recommendations


def _is_valid_rating(value) -> bool:
    if isinstance(value, bool) or not isinstance(value, int):
        return False
    return RATING_MIN <= value <= RATING_MAX


def _impact(value: int, higher_is_better: bool) -> str:
    oriented = value if higher_is_better else 6 - value
    if oriented >= 4:
        return 'positive'
    if oriented >= 3:
        return 'neutral'
    return 'negative'
