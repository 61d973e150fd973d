"""
Training Intelligence Service
FastAPI application exposing the workout training analyzers

Run with: uvicorn main:app --reload --port 8000
"""

import logging
import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)

# Import routers
from routers import (
    records_router,
    progression_router,
    readiness_router,
    sessions_router,
    patterns_router,
)

VERSION = "1.0.0"

DEFAULT_ORIGINS = [
    "http://localhost:3000",   # Node.js API
    "http://localhost:8080",   # Frontend dev server
    "http://localhost:8081",   # Expo web
]

# Create FastAPI app
app = FastAPI(
    title="Training Intelligence",
    description="""
    ## Training Decisions from Logged Sets

    Stateless analyzers over the athlete's already-logged history:

    ### Records
    - **Estimated 1RM**: Epley estimate from a weight/rep pair
    - **PR Check**: Weight, reps or estimated-1RM record for a new set

    ### Progression
    - **Next Targets**: Weight, reps and RPE for the next session

    ### Readiness
    - **Assessment**: Readiness level from sleep, soreness and stress
    - **Adjustment**: Load/volume multipliers applied to a planned session

    ### Sessions
    - **Evaluation**: Productive, maintaining, suboptimal, junk or recovery

    ### Patterns
    - **Discovery**: Training split, preferred days, pairings, rep ranges

    ---

    **Tech Stack**: Python, FastAPI, pandas, scikit-learn, SQLAlchemy
    """,
    version=VERSION,
    docs_url="/docs",  # Swagger UI
    redoc_url="/redoc"  # ReDoc alternative
)

cors_origins = os.getenv("CORS_ORIGINS")

app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in cors_origins.split(",")] if cors_origins else DEFAULT_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Health check endpoint
@app.get("/health", tags=["Health"])
async def health_check():
    """Check if the training service is running"""
    return {
        "status": "healthy",
        "service": "training-intelligence",
        "version": VERSION
    }


# Include routers
app.include_router(records_router)
app.include_router(progression_router)
app.include_router(readiness_router)
app.include_router(sessions_router)
app.include_router(patterns_router)


# Root endpoint with service info
@app.get("/", tags=["Info"])
async def root():
    """Service information and available endpoints"""
    return {
        "service": "Training Intelligence",
        "version": VERSION,
        "documentation": "/docs",
        "endpoints": {
            "records": {
                "e1rm": "GET /records/e1rm",
                "check": "POST /records/check"
            },
            "progression": {
                "next_target": "GET /progression/{exercise_id}"
            },
            "readiness": {
                "assess": "POST /readiness/assess",
                "adjust": "POST /readiness/adjust"
            },
            "sessions": {
                "evaluation": "GET /sessions/{workout_id}/evaluation"
            },
            "patterns": {
                "detect": "GET /patterns"
            }
        }
    }


if __name__ == "__main__":
    import uvicorn
    port = int(os.getenv("PORT", 8000))
    uvicorn.run("main:app", host="0.0.0.0", port=port, reload=True)
