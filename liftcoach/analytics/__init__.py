"""
Analytics module for Liftcoach.

This module contains the biomechanical analytics engine that turns a recorded
strength-training session into a workout report: per-rep analysis, session
aggregates, exercise-specific metrics and coaching recommendations.
"""

from .config import AnalysisThresholds, DEFAULT_THRESHOLDS, load_thresholds
from .exercise_analyzers import create_exercise_analyzer
from .recommendations import recommend
from .rep_analyzer import analyze_repetition
from .session_builder import SessionBuilder
from .state import (
    Detected,
    DetectionFailed,
    ExerciseKind,
    Frame,
    Landmark,
    NotDetected,
    Repetition,
    Session,
    WorkoutReport,
)
from .workout_analyzer import WorkoutAnalyzer, analyze

__all__ = [
    "AnalysisThresholds",
    "DEFAULT_THRESHOLDS",
    "load_thresholds",
    "create_exercise_analyzer",
    "recommend",
    "analyze_repetition",
    "SessionBuilder",
    "Detected",
    "DetectionFailed",
    "ExerciseKind",
    "Frame",
    "Landmark",
    "NotDetected",
    "Repetition",
    "Session",
    "WorkoutReport",
    "WorkoutAnalyzer",
    "analyze",
]
