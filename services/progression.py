"""
Progression Recommendations
Proposes the next session's target weight, reps and effort for an exercise

CONCEPTS:
1. Effort band - recent RPE compared with the top of the intended band
2. Rep scheme - only sets close to the latest rep target are compared
3. Trend - least-squares slope of estimated 1RM separates a bad day
   from a stall that needs a deload
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

import numpy as np
from sklearn.linear_model import LinearRegression

from .metrics import calculate_1rm
from .models import Exercise, ExerciseClass, LoggedSet

logger = logging.getLogger(__name__)


class ProgressionAction(str, Enum):
    INCREASE_WEIGHT = "increase_weight"
    INCREASE_REPS = "increase_reps"
    HOLD = "hold"
    DELOAD = "deload"


@dataclass
class ProgressionPolicy:
    """
    Tunable progression constants.

    Increments are hand-tuned per exercise class and have no derivation
    beyond coaching convention.
    """
    effort_band_top: float = 8.5
    default_rpe: float = 8.0
    min_qualifying_sets: int = 2
    history_window: int = 10
    rep_tolerance: int = 2
    comparable_sets: int = 3
    deload_rpe: float = 9.5
    deload_factor: float = 0.9
    load_step: float = 2.5
    increments: Dict[ExerciseClass, float] = field(default_factory=lambda: {
        ExerciseClass.COMPOUND_LOWER: 10.0,
        ExerciseClass.COMPOUND_UPPER: 5.0,
        ExerciseClass.ISOLATION: 2.5,
    })

    def increment_for(self, exercise: Exercise) -> float:
        return self.increments.get(exercise.progression_class, self.load_step)

    def round_load(self, weight: float) -> float:
        if self.load_step <= 0:
            return weight
        return round(weight / self.load_step) * self.load_step


@dataclass
class ProgressionSuggestion:
    """Structured targets for the next session plus advisory text"""
    exercise_id: str
    action: ProgressionAction
    target_weight: float
    target_reps: int
    target_rpe: float
    message: str
    last_weight: float
    last_reps: int
    recent_efforts: List[float]
    e1rm_trend: Optional[float] = None

    def to_dict(self) -> Dict:
        return {
            'exercise_id': self.exercise_id,
            'action': self.action.value,
            'target_weight': self.target_weight,
            'target_reps': self.target_reps,
            'target_rpe': self.target_rpe,
            'message': self.message,
            'last_weight': self.last_weight,
            'last_reps': self.last_reps,
            'recent_efforts': self.recent_efforts,
            'e1rm_trend': self.e1rm_trend
        }


class ProgressionRecommender:
    """
    Suggests the next load/rep/effort target from recent set history.

    Rules:
    - Effort consistently below the band top -> add the class increment
    - Effort at or above the band top -> hold weight and cut a rep,
      or deload when effort is maxed out or e1RM is trending down
    - Sparse, mixed or non-load history -> no suggestion
    """

    def __init__(self, policy: Optional[ProgressionPolicy] = None):
        self.policy = policy or ProgressionPolicy()

    def recommend(self, exercise: Exercise,
                  history: List[LoggedSet]) -> Optional[ProgressionSuggestion]:
        """
        Args:
            exercise: The exercise to progress
            history: Prior sets of the exercise, most recent first

        Returns:
            ProgressionSuggestion, or None for "no suggestion"
        """
        policy = self.policy

        if not exercise.is_load_based:
            logger.debug("%s is not load based, no suggestion", exercise.name)
            return None

        window = [s for s in history[:policy.history_window] if not s.is_warmup]
        if any(s.is_endurance for s in window):
            logger.debug("Mixed modality history for %s, no suggestion", exercise.name)
            return None

        qualifying = [s for s in window if s.is_comparable]
        if len(qualifying) < policy.min_qualifying_sets:
            logger.debug("Only %d qualifying sets for %s, no suggestion",
                         len(qualifying), exercise.name)
            return None

        last = qualifying[0]
        comparable = [
            s for s in qualifying
            if abs(s.reps - last.reps) <= policy.rep_tolerance
        ][:policy.comparable_sets]

        efforts = [s.rpe if s.rpe is not None else policy.default_rpe for s in comparable]
        trend = self._e1rm_trend(qualifying)
        top = policy.effort_band_top

        if all(effort < top for effort in efforts):
            return self._progress(exercise, last, efforts, trend)

        if max(efforts) >= policy.deload_rpe or (trend is not None and trend < 0):
            target_weight = policy.round_load(last.weight * policy.deload_factor)
            return ProgressionSuggestion(
                exercise_id=exercise.id,
                action=ProgressionAction.DELOAD,
                target_weight=target_weight,
                target_reps=last.reps,
                target_rpe=top - 1,
                message=f"Deload to {target_weight:g} lb - effort is maxed and progress has stalled",
                last_weight=last.weight,
                last_reps=last.reps,
                recent_efforts=efforts,
                e1rm_trend=trend
            )

        target_reps = max(1, last.reps - 1)
        return ProgressionSuggestion(
            exercise_id=exercise.id,
            action=ProgressionAction.HOLD,
            target_weight=last.weight,
            target_reps=target_reps,
            target_rpe=top,
            message=f"Hold {last.weight:g} lb for {target_reps} reps (high effort last sessions)",
            last_weight=last.weight,
            last_reps=last.reps,
            recent_efforts=efforts,
            e1rm_trend=trend
        )

    def _progress(self, exercise: Exercise, last: LoggedSet,
                  efforts: List[float], trend: Optional[float]) -> ProgressionSuggestion:
        policy = self.policy
        target_rpe = min(policy.effort_band_top, max(efforts) + 0.5)

        # Bodyweight work progresses by reps
        if last.weight == 0:
            return ProgressionSuggestion(
                exercise_id=exercise.id,
                action=ProgressionAction.INCREASE_REPS,
                target_weight=0,
                target_reps=last.reps + 1,
                target_rpe=target_rpe,
                message="+1 rep (bodyweight)",
                last_weight=last.weight,
                last_reps=last.reps,
                recent_efforts=efforts,
                e1rm_trend=trend
            )

        increment = policy.increment_for(exercise)
        return ProgressionSuggestion(
            exercise_id=exercise.id,
            action=ProgressionAction.INCREASE_WEIGHT,
            target_weight=last.weight + increment,
            target_reps=last.reps,
            target_rpe=target_rpe,
            message=f"+{increment:g} lb",
            last_weight=last.weight,
            last_reps=last.reps,
            recent_efforts=efforts,
            e1rm_trend=trend
        )

    def _e1rm_trend(self, qualifying: List[LoggedSet]) -> Optional[float]:
        """Slope of estimated 1RM per logged set, oldest to newest"""
        e1rms = [calculate_1rm(s.weight, s.reps) for s in reversed(qualifying)]
        if len(e1rms) < 2 or not any(e1rms):
            return None

        X = np.arange(len(e1rms)).reshape(-1, 1)
        y = np.array(e1rms, dtype=float)
        model = LinearRegression().fit(X, y)
        return round(float(model.coef_[0]), 3)
