"""
Rule-based coaching recommendations.

Rules are evaluated in a fixed priority order (safety first, then range of
motion, tempo, symmetry, reinforcement) and each appends at most one message,
so the output order is the rule order.
"""

from typing import Optional, Sequence

import numpy as np

from .config import DEFAULT_THRESHOLDS, AnalysisThresholds
from .state import (
    BenchPressMetrics,
    DeadliftMetrics,
    ExerciseKind,
    ExerciseSpecificMetrics,
    RangeOfMotionAnalysis,
    RepetitionAnalysis,
    Session,
    SquatMetrics,
    SymmetryAnalysis,
    TempoAnalysis,
)

# ---------------------------------------------------------------------------
# Messages
# ---------------------------------------------------------------------------
SPINE_ROUNDING = "CRITICAL: Spine rounding detected. Lower the weight and focus on a neutral lower back."
INCOMPLETE_LOCKOUT = "Drive your hips through fully at the top to complete the lockout."
KNEES_CAVING = "Knees caving: Think about 'screwing' your feet into the floor to drive your knees out."
FORWARD_LEAN = "You're leaning too far forward. Keep your chest up and lead with your heart."
SHOULDER_SAFETY = "Shoulder Safety: Tuck your elbows slightly more toward your ribs to avoid shoulder strain."
SHALLOW_SQUAT = "Work on your mobility; your squats are currently a bit shallow."
INCONSISTENT_ROM = "Consistency is key. Focus on hitting the same depth/turnaround point on every rep."
FAST_ECCENTRIC = "Slow down your descent. Aim for a 2-second 'eccentric' phase for better muscle growth."
GRINDING_REPS = "Your rep speed is slowing down significantly. You're approaching technical failure."
FAVORING_SIDE = "You're favoring one side. Focus on an even weight distribution across both feet."
ELITE_PERFORMANCE = "Masterful performance! Your technique and consistency are elite level."
SOLID_SESSION = "Solid session. Keep maintaining this level of control."


def _safety_recommendations(
    metrics: Optional[ExerciseSpecificMetrics],
    t: AnalysisThresholds,
) -> list[str]:
    recs: list[str] = []
    if isinstance(metrics, DeadliftMetrics):
        if metrics.back_straightness.spine_neutral < t.critical_spine_rounding:
            recs.append(SPINE_ROUNDING)
        if metrics.lockout_completion < t.lockout_completion:
            recs.append(INCOMPLETE_LOCKOUT)
    elif isinstance(metrics, SquatMetrics):
        if metrics.knee_tracking.knee_cave_percentage > t.knee_cave_percentage:
            recs.append(KNEES_CAVING)
        if metrics.torso_angle.average_forward_lean > t.torso_lean_degrees:
            recs.append(FORWARD_LEAN)
    elif isinstance(metrics, BenchPressMetrics):
        if metrics.elbow_angle.tucking < t.shoulder_safety_tucking:
            recs.append(SHOULDER_SAFETY)
    return recs


def recommend(
    session: Session,
    reps: Sequence[RepetitionAnalysis],
    rom: RangeOfMotionAnalysis,
    tempo: TempoAnalysis,
    symmetry: SymmetryAnalysis,
    exercise_metrics: Optional[ExerciseSpecificMetrics],
    thresholds: AnalysisThresholds = DEFAULT_THRESHOLDS,
) -> list[str]:
    """
    Produce ordered coaching recommendations for a session.

    Args:
        session: The analyzed session (exercise kind and rep counters).
        reps: Per-rep analyses.
        rom: Range-of-motion analysis.
        tempo: Tempo analysis.
        symmetry: Symmetry analysis.
        exercise_metrics: Exercise-specific metrics, or None.
        thresholds: Rule thresholds.

    Returns:
        Non-empty list of human-readable recommendations.
    """
    t = thresholds

    # 1. Safety criticals
    recs = _safety_recommendations(exercise_metrics, t)

    # 2. Range of motion / consistency
    if rom.average_depth > t.shallow_squat_degrees and session.exercise == ExerciseKind.SQUAT:
        recs.append(SHALLOW_SQUAT)
    elif rom.consistency < t.rom_consistency:
        recs.append(INCONSISTENT_ROM)

    # 3. Tempo and control
    eccentric = [r.tempo.eccentric_ms for r in reps if r.tempo is not None]
    concentric = [r.tempo.concentric_ms for r in reps if r.tempo is not None]
    if eccentric and np.mean(eccentric) < t.slow_eccentric_ms:
        recs.append(FAST_ECCENTRIC)
    if concentric and np.mean(concentric) > t.grinding_rep_ms and session.good_reps > 0:
        recs.append(GRINDING_REPS)

    # 4. Symmetry
    if symmetry.overall_symmetry < t.symmetry_imbalance:
        recs.append(FAVORING_SIDE)

    # 5. Reinforcement
    if not recs and session.total_reps > 0:
        if session.good_reps / session.total_reps > t.elite_performance_ratio:
            recs.append(ELITE_PERFORMANCE)

    # 6. Fallback
    return recs or [SOLID_SESSION]
