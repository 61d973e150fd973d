"""
Training History Repository
Read-only SQL that materializes stored workouts into analyzer records

The analyzers never touch the database; routers call these functions
to fetch the history window and hand the records over.
"""

import logging
from datetime import datetime
from typing import Dict, Iterable, List, Optional

from sqlalchemy import text
from sqlalchemy.orm import Session

from services.models import (
    Exercise, LoggedSet, Modality, PrimaryMetric, Workout, WorkoutContext, WorkoutExercise
)

logger = logging.getLogger(__name__)

SET_COLUMNS = """
    ws.workout_id, ws.exercise_id, ws.set_order,
    ws.actual_weight, ws.actual_reps, ws.actual_rpe,
    ws.is_warmup, ws.is_pr,
    ws.duration_seconds, ws.distance_meters, ws.avg_pace,
    w.date_completed
"""

EXERCISE_COLUMNS = """
    e.id, e.name, e.modality, e.primary_metric, e.muscle_group,
    COALESCE(e.is_compound, FALSE) AS is_compound
"""

WORKOUT_COLUMNS = """
    w.id, w.focus, w.scheduled_date, w.date_completed, w.duration_minutes,
    w.block_id, w.week_number, w.day_number, w.context
"""


def _float(value) -> Optional[float]:
    # Postgres DECIMAL columns come back as Decimal
    return float(value) if value is not None else None


def _enum(enum_cls, value, default):
    if value is None:
        return default
    try:
        return enum_cls(str(value).lower())
    except ValueError:
        return default


def row_to_exercise(row) -> Exercise:
    m = row._mapping
    metric = str(m['primary_metric'] or '').lower()
    return Exercise(
        id=str(m['id']),
        name=m['name'],
        modality=_enum(Modality, m['modality'], Modality.STRENGTH),
        muscle_group=m['muscle_group'] or '',
        # Catalog stores 'Weight' for load based exercises
        primary_metric=PrimaryMetric.LOAD if metric in ('weight', 'load', '')
        else _enum(PrimaryMetric, metric, PrimaryMetric.DURATION),
        is_compound=bool(m['is_compound'])
    )


def row_to_set(row) -> LoggedSet:
    m = row._mapping
    return LoggedSet(
        weight=_float(m['actual_weight']),
        reps=m['actual_reps'],
        rpe=_float(m['actual_rpe']),
        is_warmup=bool(m['is_warmup']),
        is_pr=bool(m['is_pr']),
        set_order=m['set_order'] or 0,
        exercise_id=str(m['exercise_id']),
        workout_id=str(m['workout_id']),
        performed_at=m['date_completed'],
        duration_seconds=m['duration_seconds'],
        distance_meters=m['distance_meters'],
        avg_pace=m['avg_pace']
    )


def get_exercise(db: Session, exercise_id: str) -> Optional[Exercise]:
    row = db.execute(
        text(f"SELECT {EXERCISE_COLUMNS} FROM exercises e WHERE e.id = CAST(:id AS UUID)"),
        {"id": exercise_id}
    ).fetchone()
    return row_to_exercise(row) if row else None


def get_exercise_history(db: Session, exercise_id: str, limit: int = 10,
                         exclude_workout_id: Optional[str] = None,
                         before: Optional[datetime] = None) -> List[LoggedSet]:
    """
    Most recent non-warm-up sets of an exercise from completed workouts.

    Args:
        exclude_workout_id: Workout whose own sets are left out
        before: Only workouts completed strictly before this time

    Returns:
        Sets ordered most recent first
    """
    query = text(f"""
        SELECT {SET_COLUMNS}
        FROM workout_sets ws
        JOIN workouts w ON ws.workout_id = w.id
        WHERE ws.exercise_id = CAST(:exercise_id AS UUID)
          AND w.date_completed IS NOT NULL
          AND ws.is_warmup = FALSE
          AND (CAST(:exclude_workout_id AS UUID) IS NULL
               OR w.id <> CAST(:exclude_workout_id AS UUID))
          AND (CAST(:before AS TIMESTAMPTZ) IS NULL
               OR w.date_completed < CAST(:before AS TIMESTAMPTZ))
        ORDER BY w.date_completed DESC, ws.set_order ASC
        LIMIT :limit
    """)
    rows = db.execute(query, {
        "exercise_id": exercise_id,
        "exclude_workout_id": exclude_workout_id,
        "before": before,
        "limit": limit
    }).fetchall()
    return [row_to_set(r) for r in rows]


def get_histories(db: Session, exercise_ids: Iterable[str], limit: int = 30,
                  exclude_workout_id: Optional[str] = None,
                  before: Optional[datetime] = None) -> Dict[str, List[LoggedSet]]:
    return {
        exercise_id: get_exercise_history(db, exercise_id, limit, exclude_workout_id, before)
        for exercise_id in exercise_ids
    }


def _build_workouts(workout_rows, set_rows) -> List[Workout]:
    """Assemble workouts with their sets grouped by exercise in logged order"""
    workouts: Dict[str, Workout] = {}
    for row in workout_rows:
        m = row._mapping
        workouts[str(m['id'])] = Workout(
            id=str(m['id']),
            focus=m['focus'] or '',
            scheduled_date=m['scheduled_date'],
            date_completed=m['date_completed'],
            duration_minutes=m['duration_minutes'],
            block_id=str(m['block_id']) if m['block_id'] else None,
            week_number=m['week_number'],
            day_number=m['day_number'],
            context=_enum(WorkoutContext, m['context'], None)
        )

    grouped: Dict[tuple, WorkoutExercise] = {}
    for row in set_rows:
        logged = row_to_set(row)
        workout = workouts.get(logged.workout_id)
        if workout is None:
            continue
        key = (logged.workout_id, logged.exercise_id)
        if key not in grouped:
            grouped[key] = WorkoutExercise(exercise=Exercise(
                id=str(row._mapping['exercise_id']),
                name=row._mapping['exercise_name'],
                modality=_enum(Modality, row._mapping['modality'], Modality.STRENGTH),
                muscle_group=row._mapping['muscle_group'] or ''
            ))
            workout.exercises.append(grouped[key])
        grouped[key].sets.append(logged)

    return list(workouts.values())


def _sets_for(db: Session, workout_ids: List[str]):
    if not workout_ids:
        return []
    query = text(f"""
        SELECT {SET_COLUMNS},
               e.name AS exercise_name, e.modality, e.muscle_group
        FROM workout_sets ws
        JOIN workouts w ON ws.workout_id = w.id
        JOIN exercises e ON ws.exercise_id = e.id
        WHERE CAST(ws.workout_id AS TEXT) = ANY(:workout_ids)
        ORDER BY w.date_completed, ws.set_order
    """)
    return db.execute(query, {"workout_ids": workout_ids}).fetchall()


def get_workout(db: Session, workout_id: str) -> Optional[Workout]:
    row = db.execute(
        text(f"SELECT {WORKOUT_COLUMNS} FROM workouts w WHERE w.id = CAST(:id AS UUID)"),
        {"id": workout_id}
    ).fetchone()
    if not row:
        return None
    return _build_workouts([row], _sets_for(db, [workout_id]))[0]


def get_completed_workouts(db: Session, weeks: int = 8) -> List[Workout]:
    """Completed workouts of the last N weeks, oldest first"""
    rows = db.execute(text(f"""
        SELECT {WORKOUT_COLUMNS}
        FROM workouts w
        WHERE w.date_completed IS NOT NULL
          AND w.date_completed >= NOW() - make_interval(weeks => CAST(:weeks AS INTEGER))
        ORDER BY w.date_completed
    """), {"weeks": weeks}).fetchall()
    workout_ids = [str(r._mapping['id']) for r in rows]
    return _build_workouts(rows, _sets_for(db, workout_ids))


def count_prior_block_sessions(db: Session, block_id: Optional[str],
                               before: Optional[datetime]) -> int:
    """Completed sessions of a training block before the given time"""
    if not block_id or before is None:
        return 0
    result = db.execute(text("""
        SELECT COUNT(*)
        FROM workouts
        WHERE block_id = CAST(:block_id AS UUID)
          AND date_completed IS NOT NULL
          AND date_completed < :before
    """), {"block_id": block_id, "before": before}).scalar()
    return int(result or 0)
