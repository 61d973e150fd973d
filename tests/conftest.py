"""
Pytest configuration and fixtures

No database is needed anywhere in the suite: analyzers get in-memory
records and API tests override the session dependency.
"""
import os
import sys
from datetime import datetime

import pytest

# Add the parent directory to the path so we can import from services
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from services.models import Exercise, Modality, PrimaryMetric  # noqa: E402


@pytest.fixture
def squat():
    return Exercise(id='ex-squat', name='Back Squat', muscle_group='Legs', is_compound=True)


@pytest.fixture
def bench():
    return Exercise(id='ex-bench', name='Bench Press', muscle_group='Chest', is_compound=True)


@pytest.fixture
def row():
    return Exercise(id='ex-row', name='Barbell Row', muscle_group='Back', is_compound=True)


@pytest.fixture
def curl():
    return Exercise(id='ex-curl', name='Barbell Curl', muscle_group='Biceps', is_compound=False)


@pytest.fixture
def pull_up():
    return Exercise(id='ex-pullup', name='Pull Up', muscle_group='Back', is_compound=True)


@pytest.fixture
def rower():
    return Exercise(id='ex-row-erg', name='Rowing Erg', modality=Modality.CARDIO,
                    muscle_group='Full Body', primary_metric=PrimaryMetric.DURATION)


@pytest.fixture
def stretch():
    return Exercise(id='ex-stretch', name='Hip Flexor Stretch', modality=Modality.MOBILITY,
                    muscle_group='Hips', primary_metric=PrimaryMetric.DURATION)


@pytest.fixture
def monday():
    # 2024-01-01 is a Monday
    return datetime(2024, 1, 1, 18, 0)
