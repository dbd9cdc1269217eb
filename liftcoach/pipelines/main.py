"""
FastAPI entry point for the Liftcoach analytics backend.

Endpoint:
    POST /api/session/analyze
        Receives a finished workout session (pose frames + completed reps)
        from the mobile app, runs the analytics engine and returns the
        workout report with recommendations, overall score and grade.

Run:
    cd <project_root>
    uvicorn liftcoach.pipelines.main:app --host 0.0.0.0 --port 8000 --reload
"""

import logging
import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from liftcoach.analytics import Session, WorkoutAnalyzer, load_thresholds
from liftcoach.analytics.state import (
    ExerciseKind,
    ExerciseSpecificMetrics,
    FormConsistencyAnalysis,
    RangeOfMotionAnalysis,
    RepetitionAnalysis,
    SymmetryAnalysis,
    TempoAnalysis,
)
from liftcoach.pipelines.config import (
    API_TITLE,
    API_VERSION,
    LOG_FORMAT,
    LOG_LEVEL,
    THRESHOLDS_PATH,
)

logger = logging.getLogger("liftcoach")
logging.basicConfig(level=LOG_LEVEL, format=LOG_FORMAT)


# ============================================================================
# Pydantic response models
# ============================================================================

class SessionResponse(BaseModel):
    session_id: str
    exercise: ExerciseKind
    total_reps: int
    good_reps: int
    bad_reps: int
    average_quality: float
    duration_ms: int
    overall_score: float = Field(..., description="0-100")
    grade: str = Field(..., description="Letter grade A-F")
    range_of_motion: RangeOfMotionAnalysis
    tempo: TempoAnalysis
    symmetry: SymmetryAnalysis
    form_consistency: FormConsistencyAnalysis
    rep_analyses: list[RepetitionAnalysis]
    exercise_metrics: Optional[ExerciseSpecificMetrics] = None
    recommendations: list[str]


class ErrorResponse(BaseModel):
    error_code: str
    message: str


# ============================================================================
# App lifecycle: thresholds are loaded once at startup
# ============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Load analysis thresholds once at startup."""
    logger.info("Starting Liftcoach analytics backend …")
    app.state.analyzer = WorkoutAnalyzer(load_thresholds(THRESHOLDS_PATH or None))
    logger.info("Analyzer ready (%s).", THRESHOLDS_PATH or "default thresholds")
    yield
    logger.info("Shutting down.")


app = FastAPI(
    title=API_TITLE,
    version=API_VERSION,
    lifespan=lifespan,
)

# CORS for browser clients
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


# ============================================================================
# Health-check
# ============================================================================

@app.get("/health")
async def health():
    return {"status": "ok"}


# ============================================================================
# Analysis endpoint
# ============================================================================

@app.post(
    "/api/session/analyze",
    response_model=SessionResponse,
    responses={
        422: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
def analyze_session(session: Session, request: Request):
    """Run the analytics engine on one finished session.

    NOTE: sync endpoint, so FastAPI runs it in its threadpool. The shared
    analyzer holds no mutable state.
    """
    t0 = time.time()
    analyzer: WorkoutAnalyzer = getattr(request.app.state, "analyzer", None) or WorkoutAnalyzer()

    try:
        report = analyzer.analyze(session)
    except Exception as exc:
        logger.exception("Analysis failed for session '%s'", session.id)
        return JSONResponse(
            status_code=500,
            content={
                "error_code": "ANALYSIS_FAILED",
                "message": f"Analysis error: {exc}",
            },
        )

    logger.info(
        "Session '%s' analyzed in %.3fs: exercise='%s' reps=%d grade=%s",
        session.id, time.time() - t0, session.exercise.value, report.total_reps, report.grade,
    )
    return SessionResponse(**report.to_dict())
