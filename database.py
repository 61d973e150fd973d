"""
Database Configuration
Handles connection to PostgreSQL using SQLAlchemy

The engine is built on first use, so importing the app needs no database.
"""

import os
from functools import lru_cache

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from dotenv import load_dotenv

# Load environment variables
load_dotenv()


def get_database_url() -> str:
    """DATABASE_URL if set, otherwise built from the DB_* variables"""
    url = os.getenv('DATABASE_URL')
    if url:
        return url
    return (
        f"postgresql://{os.getenv('DB_USER', 'postgres')}:{os.getenv('DB_PASSWORD', '')}"
        f"@{os.getenv('DB_HOST', 'localhost')}:{os.getenv('DB_PORT', '5432')}"
        f"/{os.getenv('DB_NAME', 'workout_tracker')}"
    )


@lru_cache(maxsize=1)
def get_session_factory():
    # - pool_pre_ping: Tests connections before using them
    # - pool_size: Number of connections to keep open
    engine = create_engine(
        get_database_url(),
        pool_pre_ping=True,
        pool_size=int(os.getenv('DB_POOL_SIZE', 5)),
        max_overflow=int(os.getenv('DB_MAX_OVERFLOW', 10))
    )
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db():
    """
    Dependency that provides a database session.
    Use with FastAPI's Depends() for automatic cleanup.

    Usage:
        @router.get("/items")
        def get_items(db: Session = Depends(get_db)):
            ...
    """
    db = get_session_factory()()
    try:
        yield db
    finally:
        db.close()
