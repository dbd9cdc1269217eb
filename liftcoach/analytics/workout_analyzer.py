"""
Workout analyzer - assembles the full report for a finished session.

Pipeline:
    1. Per-rep analysis (depth, tempo, peak frame, form issues)
    2. Session aggregates (range of motion, tempo, symmetry, form consistency)
    3. Exercise-specific metrics (squat / deadlift / bench press)
    4. Coaching recommendations (rule-based, reads 1-3)

Every step is a pure function of the session, so one analyzer instance can
be shared across threads and sessions.
"""

import logging
from typing import Optional

from .config import DEFAULT_THRESHOLDS, AnalysisThresholds
from .exercise_analyzers import create_exercise_analyzer
from .recommendations import recommend
from .rep_analyzer import analyze_repetition
from .session_analyzers import (
    analyze_form_consistency,
    analyze_range_of_motion,
    analyze_symmetry,
    analyze_tempo,
)
from .state import ExerciseSpecificMetrics, RepetitionAnalysis, Session, WorkoutReport

logger = logging.getLogger(__name__)


class WorkoutAnalyzer:
    """
    Turns a recorded session into a ``WorkoutReport``.

    Example usage:
        analyzer = WorkoutAnalyzer()
        report = analyzer.analyze(session)
        print(report.grade, report.recommendations)
    """

    def __init__(self, thresholds: AnalysisThresholds = DEFAULT_THRESHOLDS):
        self.thresholds = thresholds

    def analyze_reps(self, session: Session) -> list[RepetitionAnalysis]:
        return [
            analyze_repetition(rep, session.frames_for_rep(rep.rep_number), session.exercise, self.thresholds)
            for rep in session.repetitions
        ]

    def analyze_exercise_metrics(self, session: Session) -> Optional[ExerciseSpecificMetrics]:
        """Exercise-specific metrics, or None when no frame has a detected pose."""
        poses = session.detected_poses()
        if not poses:
            return None
        analyzer = create_exercise_analyzer(session.exercise, self.thresholds)
        return analyzer.analyze(poses)

    def analyze(self, session: Session) -> WorkoutReport:
        rep_analyses = self.analyze_reps(session)
        rom = analyze_range_of_motion(rep_analyses)
        tempo = analyze_tempo(session, rep_analyses)
        symmetry = analyze_symmetry(session, self.thresholds)
        form_consistency = analyze_form_consistency(session, self.thresholds)
        exercise_metrics = self.analyze_exercise_metrics(session)

        recommendations = recommend(
            session, rep_analyses, rom, tempo, symmetry, exercise_metrics, self.thresholds,
        )

        report = WorkoutReport(
            session_id=session.id,
            exercise=session.exercise,
            total_reps=session.total_reps,
            good_reps=session.good_reps,
            bad_reps=session.bad_reps,
            average_quality=session.average_quality,
            duration_ms=session.duration_ms,
            range_of_motion=rom,
            tempo=tempo,
            symmetry=symmetry,
            form_consistency=form_consistency,
            rep_analyses=rep_analyses,
            recommendations=recommendations,
            exercise_metrics=exercise_metrics,
        )
        logger.info(
            "Analyzed session '%s' (%s): %d reps, %d frames, score=%.1f (%s), %d recommendation(s)",
            session.id, session.exercise.display_name, session.total_reps, len(session.frames),
            report.overall_score, report.grade, len(recommendations),
        )
        return report


def analyze(session: Session, thresholds: AnalysisThresholds = DEFAULT_THRESHOLDS) -> WorkoutReport:
    """Analyze a finished session and return its report."""
    return WorkoutAnalyzer(thresholds).analyze(session)
