"""
Session Quality Evaluation
Classifies a completed workout into a single verdict

Read-only: the verdict is returned, never written back.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

from .metrics import set_e1rm
from .models import LoggedSet, Workout, WorkoutContext, WorkoutExercise
from .record_detector import ComparisonType, compare_sets, find_previous_set

logger = logging.getLogger(__name__)

# Structured blocks need this many completed sessions before verdicts are trusted
CALIBRATION_SESSIONS = 3


class SessionVerdict(str, Enum):
    PRODUCTIVE = "productive"
    MAINTAINING = "maintaining"
    SUBOPTIMAL = "suboptimal"
    JUNK = "junk"
    RECOVERY = "recovery"


class ExerciseStatus(str, Enum):
    RECORD = "record"
    IMPROVED = "improved"
    MATCHED = "matched"
    REGRESSED = "regressed"
    NO_HISTORY = "no_history"
    NO_DATA = "no_data"

    @property
    def is_evaluable(self) -> bool:
        return self not in (ExerciseStatus.NO_HISTORY, ExerciseStatus.NO_DATA)


@dataclass
class ExerciseOutcome:
    exercise_id: str
    name: str
    status: ExerciseStatus
    working_sets: int
    pr_count: int = 0
    improved_sets: int = 0
    regressed_sets: int = 0
    comparison: Optional[ComparisonType] = None
    message: str = ''

    def to_dict(self) -> Dict:
        return {
            'exercise_id': self.exercise_id,
            'name': self.name,
            'status': self.status.value,
            'working_sets': self.working_sets,
            'pr_count': self.pr_count,
            'improved_sets': self.improved_sets,
            'regressed_sets': self.regressed_sets,
            'comparison': self.comparison.value if self.comparison else None,
            'message': self.message
        }


@dataclass
class SessionEvaluation:
    verdict: SessionVerdict
    calibrating: bool = False
    prior_block_sessions: int = 0
    exercises: List[ExerciseOutcome] = field(default_factory=list)

    @property
    def pr_count(self) -> int:
        return sum(e.pr_count for e in self.exercises)

    def to_dict(self) -> Dict:
        return {
            'verdict': self.verdict.value,
            'calibrating': self.calibrating,
            'prior_block_sessions': self.prior_block_sessions,
            'pr_count': self.pr_count,
            'exercises': [e.to_dict() for e in self.exercises]
        }


class SessionEvaluator:
    """
    Aggregates per-exercise outcomes into one verdict.

    Priority:
    1. Planned light / deload day -> recovery
    2. Nothing comparable to prior history -> junk
    3. Any record -> productive (a record outweighs a regression elsewhere)
    4. Any regression -> suboptimal
    5. Otherwise -> maintaining
    """

    def evaluate(self, workout: Workout,
                 history: Optional[Dict[str, List[LoggedSet]]] = None,
                 prior_block_sessions: int = 0,
                 planned_light: bool = False) -> SessionEvaluation:
        """
        Args:
            workout: The completed workout
            history: Prior sets per exercise id, most recent first,
                     excluding this workout
            prior_block_sessions: Completed sessions of the same block
                                  before this one
            planned_light: Caller-side tag for a planned light day
        """
        history = history or {}
        calibrating = workout.is_structured and prior_block_sessions < CALIBRATION_SESSIONS
        outcomes = [
            self._evaluate_exercise(we, history.get(we.exercise.id, []))
            for we in workout.exercises
        ]

        if planned_light or workout.context == WorkoutContext.DELOADING:
            verdict = SessionVerdict.RECOVERY
        else:
            verdict = self._aggregate(outcomes)

        if verdict == SessionVerdict.JUNK:
            logger.debug("Workout %s has no comparable history", workout.id)

        return SessionEvaluation(
            verdict=verdict,
            calibrating=calibrating,
            prior_block_sessions=prior_block_sessions,
            exercises=outcomes
        )

    def _aggregate(self, outcomes: List[ExerciseOutcome]) -> SessionVerdict:
        statuses = [o.status for o in outcomes if o.status.is_evaluable]
        if not statuses:
            return SessionVerdict.JUNK
        if ExerciseStatus.RECORD in statuses:
            return SessionVerdict.PRODUCTIVE
        if ExerciseStatus.REGRESSED in statuses:
            return SessionVerdict.SUBOPTIMAL
        return SessionVerdict.MAINTAINING

    def _evaluate_exercise(self, workout_exercise: WorkoutExercise,
                           prior: List[LoggedSet]) -> ExerciseOutcome:
        exercise = workout_exercise.exercise
        sets = [s for s in workout_exercise.sets if s.is_comparable]
        prior = [s for s in prior if s.is_comparable]

        outcome = ExerciseOutcome(
            exercise_id=exercise.id,
            name=exercise.name,
            status=ExerciseStatus.NO_DATA,
            working_sets=len(sets)
        )
        if not sets:
            return outcome

        # The stored flag is the logging-time classification against full history
        outcome.pr_count = sum(1 for s in sets if s.is_pr)

        if not prior:
            outcome.status = ExerciseStatus.RECORD if outcome.pr_count else ExerciseStatus.NO_HISTORY
            return outcome

        # Each set is matched to the same set of the last exposure when it exists
        exposure = _last_exposure(prior, len(sets))
        for s in sets:
            comparison = compare_sets(s, find_previous_set(s, exposure))
            if comparison is None:
                continue
            if comparison.type == ComparisonType.REGRESSED:
                outcome.regressed_sets += 1
            elif comparison.type.is_progression:
                outcome.improved_sets += 1

        top = _top_set(sets)
        top_comparison = compare_sets(top, find_previous_set(top, exposure))
        if top_comparison is not None:
            outcome.comparison = top_comparison.type
            outcome.message = top_comparison.message

        if outcome.pr_count:
            outcome.status = ExerciseStatus.RECORD
        elif outcome.improved_sets:
            outcome.status = ExerciseStatus.IMPROVED
        elif outcome.regressed_sets:
            outcome.status = ExerciseStatus.REGRESSED
        else:
            outcome.status = ExerciseStatus.MATCHED

        return outcome


def _top_set(sets: List[LoggedSet]) -> LoggedSet:
    return max(sets, key=lambda s: (set_e1rm(s), s.weight, s.reps))


def _last_exposure(prior: List[LoggedSet], session_sets: int) -> List[LoggedSet]:
    """Sets of the most recent previous session of the exercise"""
    latest = prior[0]
    if latest.workout_id is not None:
        return [s for s in prior if s.workout_id == latest.workout_id]
    if latest.performed_at is not None:
        day = latest.performed_at.date()
        return [s for s in prior if s.performed_at is not None and s.performed_at.date() == day]
    return prior[:max(1, session_sets)]
