"""
API Routers Package
"""

from .records import router as records_router
from .progression import router as progression_router
from .readiness import router as readiness_router
from .sessions import router as sessions_router
from .patterns import router as patterns_router

__all__ = ['records_router', 'progression_router', 'readiness_router',
           'sessions_router', 'patterns_router']
