"""
Training Records
Shared record and history types consumed by every analyzer

Records are plain dataclasses already materialized by the caller.
Analyzers read them and never mutate them.
"""

from dataclasses import dataclass, field, asdict
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, List, Optional


class Modality(str, Enum):
    """How an exercise is trained"""
    STRENGTH = "strength"
    CARDIO = "cardio"
    MOBILITY = "mobility"


class PrimaryMetric(str, Enum):
    """What an exercise is measured by"""
    LOAD = "load"
    DURATION = "duration"
    PACE = "pace"


class ExerciseClass(str, Enum):
    """Load progression class of an exercise"""
    COMPOUND_LOWER = "compound_lower"
    COMPOUND_UPPER = "compound_upper"
    ISOLATION = "isolation"


class WorkoutContext(str, Enum):
    """Explicit training context of a workout"""
    BUILDING = "building"
    MAINTAINING = "maintaining"
    DELOADING = "deloading"
    TESTING = "testing"
    UNSTRUCTURED = "unstructured"


class PatternType(str, Enum):
    """Kinds of recurring structure the pattern detector can infer"""
    TRAINING_SPLIT = "training_split"
    EXERCISE_PAIRING = "exercise_pairing"
    PREFERRED_TRAINING_DAY = "training_day"
    REP_RANGE_PREFERENCE = "rep_range_preference"


LOWER_BODY_GROUPS = {'legs', 'quads', 'quadriceps', 'hamstrings', 'glutes', 'calves', 'lower body'}


@dataclass(frozen=True)
class Exercise:
    """Catalog entry, referenced (never owned) by logged sets"""
    id: str
    name: str
    modality: Modality = Modality.STRENGTH
    muscle_group: str = ''
    primary_metric: PrimaryMetric = PrimaryMetric.LOAD
    is_compound: bool = False

    @property
    def is_load_based(self) -> bool:
        return self.modality == Modality.STRENGTH and self.primary_metric == PrimaryMetric.LOAD

    @property
    def progression_class(self) -> ExerciseClass:
        if not self.is_compound:
            return ExerciseClass.ISOLATION
        if self.muscle_group.strip().lower() in LOWER_BODY_GROUPS:
            return ExerciseClass.COMPOUND_LOWER
        return ExerciseClass.COMPOUND_UPPER


@dataclass
class LoggedSet:
    """
    One logged set of one exercise.

    weight/reps are None for duration or distance based work.
    Bodyweight movements log weight = 0.
    """
    weight: Optional[float] = None
    reps: Optional[int] = None
    rpe: Optional[float] = None
    is_warmup: bool = False
    is_pr: bool = False
    set_order: int = 0
    exercise_id: Optional[str] = None
    workout_id: Optional[str] = None
    performed_at: Optional[datetime] = None
    duration_seconds: Optional[int] = None
    distance_meters: Optional[int] = None
    avg_pace: Optional[str] = None

    @property
    def is_comparable(self) -> bool:
        """Non-warm-up set with a usable weight/reps pair"""
        return (not self.is_warmup
                and self.weight is not None and self.weight >= 0
                and self.reps is not None and self.reps > 0)

    @property
    def is_endurance(self) -> bool:
        return (self.weight is None and self.reps is None
                and (self.duration_seconds is not None or self.distance_meters is not None))


@dataclass
class WorkoutExercise:
    """The sets of one exercise inside one workout, in logged order"""
    exercise: Exercise
    sets: List[LoggedSet] = field(default_factory=list)

    @property
    def working_sets(self) -> List[LoggedSet]:
        return [s for s in self.sets if not s.is_warmup]


@dataclass
class Workout:
    """A session: sets grouped by exercise"""
    id: str
    exercises: List[WorkoutExercise] = field(default_factory=list)
    focus: str = ''
    scheduled_date: Optional[date] = None
    date_completed: Optional[datetime] = None
    duration_minutes: Optional[int] = None
    block_id: Optional[str] = None
    week_number: Optional[int] = None
    day_number: Optional[int] = None
    context: Optional[WorkoutContext] = None

    @property
    def is_completed(self) -> bool:
        return self.date_completed is not None

    @property
    def is_structured(self) -> bool:
        return bool(self.block_id or self.week_number or self.day_number)

    @property
    def muscle_groups(self) -> List[str]:
        groups = {e.exercise.muscle_group.strip().lower() for e in self.exercises if e.exercise.muscle_group}
        return sorted(groups)


@dataclass
class ReadinessCheckIn:
    """One self-report per athlete per calendar day"""
    check_in_date: date
    sleep_quality: Optional[int] = None
    muscle_soreness: Optional[int] = None
    stress_level: Optional[int] = None
    adjustment_applied: Optional[str] = None
    notes: Optional[str] = None


@dataclass
class HistoricalRecord:
    """Best-known performance for one exercise, computed on demand"""
    max_weight: float
    best_e1rm: int
    reps_at_weight: Dict[float, int] = field(default_factory=dict)
    set_count: int = 0

    def max_reps_at(self, weight: float) -> Optional[int]:
        return self.reps_at_weight.get(float(weight))


@dataclass
class DetectedPattern:
    """An inferred recurring structure with its confidence in [0, 1]"""
    type: PatternType
    name: str
    description: str
    confidence: float
    data: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict:
        result = asdict(self)
        result['type'] = self.type.value
        return result


@dataclass
class PlannedSet:
    """A prescribed set of an upcoming session"""
    exercise: Exercise
    set_order: int
    target_load: Optional[float] = None
    target_reps: Optional[int] = None
    target_rpe: Optional[float] = None
    is_warmup: bool = False
    optional: bool = False
    original_load: Optional[float] = None
    original_rpe: Optional[float] = None
    adjusted: bool = False
