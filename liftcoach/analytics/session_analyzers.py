"""
Session-wide aggregate analyzers.

Four independent analyses over a finished session: range of motion, tempo,
left/right symmetry and form-quality consistency. None of them depend on
each other, so they can be evaluated in any order.
"""

import logging
from typing import Optional, Sequence

import numpy as np

from .config import DEFAULT_THRESHOLDS, AnalysisThresholds
from .geometry import PRIMARY_JOINTS, consistency_score, side_angles
from .state import (
    Detected,
    ExerciseKind,
    FormConsistencyAnalysis,
    RangeOfMotionAnalysis,
    RepetitionAnalysis,
    Session,
    SymmetryAnalysis,
    TempoAnalysis,
)

logger = logging.getLogger(__name__)

IMBALANCED_DRIVE = "Imbalanced drive"


# ============================================================================
# Range of Motion
# ============================================================================

def analyze_range_of_motion(rep_analyses: Sequence[RepetitionAnalysis]) -> RangeOfMotionAnalysis:
    """Average/min/max rep depth and how repeatable it was."""
    depths = [r.depth for r in rep_analyses if r.depth is not None]
    if not depths:
        return RangeOfMotionAnalysis()

    return RangeOfMotionAnalysis(
        average_depth=float(np.mean(depths)),
        min_depth=min(depths),
        max_depth=max(depths),
        consistency=consistency_score(depths),
    )


# ============================================================================
# Tempo
# ============================================================================

def analyze_tempo(session: Session, rep_analyses: Sequence[RepetitionAnalysis]) -> TempoAnalysis:
    """
    Average rep duration, average rest between reps, and tempo consistency.

    Rest is the gap between consecutive rep completion times; non-positive
    gaps (duplicate or out-of-order timestamps) are ignored.
    """
    durations = [r.tempo.total_ms for r in rep_analyses if r.tempo is not None]
    avg_duration = int(np.mean(durations)) if durations else 0

    reps = session.repetitions
    rests = []
    for current, following in zip(reps, reps[1:]):
        gap = following.end_timestamp - current.end_timestamp
        if gap > 0:
            rests.append(gap)
    avg_rest = int(np.mean(rests)) if rests else 0

    return TempoAnalysis(
        average_rep_duration_ms=avg_duration,
        average_rest_between_reps_ms=avg_rest,
        tempo_consistency=consistency_score([float(d) for d in durations]),
    )


# ============================================================================
# Symmetry
# ============================================================================

def frame_symmetry(pose: Detected, kind: ExerciseKind) -> Optional[float]:
    """
    Left/right agreement of the primary joint angle for one frame (0-100).

    Returns None unless both sides resolve.
    """
    left, right = side_angles(pose, *PRIMARY_JOINTS[kind])
    if left is None or right is None:
        return None
    diff_pct = abs(left - right) / max(left, right, 1.0) * 100.0
    return 100.0 - float(np.clip(diff_pct, 0.0, 100.0))


def analyze_symmetry(
    session: Session,
    thresholds: AnalysisThresholds = DEFAULT_THRESHOLDS,
) -> SymmetryAnalysis:
    """Mean per-frame symmetry over detected frames where both sides resolve."""
    scores = []
    for pose in session.detected_poses():
        score = frame_symmetry(pose, session.exercise)
        if score is not None:
            scores.append(score)

    # No usable frames means no measured imbalance
    overall = float(np.mean(scores)) if scores else 100.0
    issues = [IMBALANCED_DRIVE] if overall < thresholds.imbalanced_drive else []

    return SymmetryAnalysis(
        overall_symmetry=overall,
        left_right_difference=100.0 - overall,
        issues=issues,
    )


# ============================================================================
# Form Consistency
# ============================================================================

def analyze_form_consistency(
    session: Session,
    thresholds: AnalysisThresholds = DEFAULT_THRESHOLDS,
) -> FormConsistencyAnalysis:
    """
    Consistency of per-rep quality plus a first-half vs second-half trend.

    With an odd rep count the extra rep falls in the second half.
    """
    qualities = [rep.quality for rep in session.repetitions]
    mid = len(qualities) // 2
    first_half, second_half = qualities[:mid], qualities[mid:]

    trend = "Stable"
    if first_half and second_half:
        first_mean = float(np.mean(first_half))
        second_mean = float(np.mean(second_half))
        if second_mean > first_mean + thresholds.form_trend_delta:
            trend = "Improving"
        elif second_mean < first_mean - thresholds.form_trend_delta:
            trend = "Declining"

    return FormConsistencyAnalysis(
        consistency_score=consistency_score(qualities),
        quality_trend=trend,
    )
