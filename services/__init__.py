"""
Training Intelligence Services

Pure analyzers over already-fetched training history:
- calculate_1rm: Epley estimated one-rep-max
- detect_personal_record: Weight / reps / e1RM record classification
- ProgressionRecommender: Next-session load, rep and effort targets
- ReadinessAdjuster: Daily readiness level and session multipliers
- SessionEvaluator: One verdict per completed session
- PatternDetector: Recurring weekly structure with confidence scores
"""

from .metrics import calculate_1rm, best_e1rm
from .record_detector import (
    RecordType,
    PersonalRecord,
    build_historical_record,
    detect_personal_record,
    compare_sets,
)
from .progression import ProgressionRecommender, ProgressionPolicy, ProgressionAction
from .readiness import ReadinessAdjuster, ReadinessLevel, LevelSource
from .session_evaluator import SessionEvaluator, SessionVerdict
from .pattern_detector import PatternDetector

__all__ = [
    'calculate_1rm',
    'best_e1rm',
    'RecordType',
    'PersonalRecord',
    'build_historical_record',
    'detect_personal_record',
    'compare_sets',
    'ProgressionRecommender',
    'ProgressionPolicy',
    'ProgressionAction',
    'ReadinessAdjuster',
    'ReadinessLevel',
    'LevelSource',
    'SessionEvaluator',
    'SessionVerdict',
    'PatternDetector'
]
