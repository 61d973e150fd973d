"""Builders for the in-memory records the analyzers consume"""
from datetime import datetime, timedelta

from services.models import LoggedSet, Workout, WorkoutExercise


def make_set(weight=None, reps=None, rpe=None, **kwargs) -> LoggedSet:
    return LoggedSet(weight=weight, reps=reps, rpe=rpe, **kwargs)


def make_workout(workout_id, exercises, completed=None, **kwargs) -> Workout:
    """exercises: list of (Exercise, [LoggedSet, ...])"""
    return Workout(
        id=workout_id,
        exercises=[WorkoutExercise(exercise=e, sets=list(sets)) for e, sets in exercises],
        date_completed=completed,
        **kwargs
    )


def days_after(start: datetime, days: int) -> datetime:
    return start + timedelta(days=days)
