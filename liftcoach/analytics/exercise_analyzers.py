"""
Exercise-specific analyzers.

Each supported exercise has its own metric bundle computed from every
detected frame of the session. ``create_exercise_analyzer`` picks the
analyzer once per session from the exercise kind.
"""

from abc import ABC, abstractmethod
from typing import Sequence

import numpy as np

from .config import DEFAULT_THRESHOLDS, AnalysisThresholds
from .geometry import (
    LEFT_ELBOW,
    LEFT_HIP,
    LEFT_KNEE,
    LEFT_ANKLE,
    LEFT_SHOULDER,
    LEFT_WRIST,
    back_alignment_ratio,
    bilateral_angle,
    consistency_score,
    elbow_flare_degrees,
    forward_lean_degrees,
    valgus_ratio,
)
from .rep_analyzer import KNEE_CAVE, ROUNDED_BACK
from .state import (
    BackAnalysis,
    BenchPressMetrics,
    DeadliftMetrics,
    Detected,
    ElbowAngleAnalysis,
    ExerciseKind,
    KneeTrackingAnalysis,
    SquatMetrics,
    TorsoAngleAnalysis,
)


def _resolved(values) -> list[float]:
    return [v for v in values if v is not None]


def _mean(values: Sequence[float], default: float = 0.0) -> float:
    return float(np.mean(values)) if len(values) else default


class ExerciseSpecificAnalyzer(ABC):
    """Computes the metric bundle for one exercise from detected poses."""

    def __init__(self, thresholds: AnalysisThresholds = DEFAULT_THRESHOLDS):
        self.thresholds = thresholds

    @abstractmethod
    def analyze(self, poses: Sequence[Detected]):
        ...


class SquatAnalyzer(ExerciseSpecificAnalyzer):
    """Depth, knee tracking, hip mobility and torso lean."""

    def analyze(self, poses: Sequence[Detected]) -> SquatMetrics:
        t = self.thresholds
        depths = _resolved(bilateral_angle(p, LEFT_HIP, LEFT_KNEE, LEFT_ANKLE) for p in poses)
        leans = _resolved(forward_lean_degrees(p) for p in poses)
        valgus = [valgus_ratio(p) for p in poses]

        caved = sum(1 for v in valgus if v < t.knee_cave_ratio)
        cave_pct = caved / max(len(valgus), 1) * 100.0
        average_lean = _mean(leans)

        return SquatMetrics(
            average_depth=_mean(depths),
            depth_consistency=consistency_score(depths),
            knee_tracking=KneeTrackingAnalysis(
                knee_alignment=_mean(valgus) * 100.0,
                knee_cave_percentage=cave_pct,
                issues=[KNEE_CAVE] if caved else [],
            ),
            hip_mobility=self.hip_mobility_score(min(depths) if depths else t.unresolved_angle_degrees),
            torso_angle=TorsoAngleAnalysis(
                average_forward_lean=average_lean,
                consistency=consistency_score(leans),
                excessive_lean=average_lean > t.torso_lean_degrees,
            ),
        )

    def hip_mobility_score(self, min_angle: float) -> float:
        """Tiered score from the deepest knee angle reached."""
        if min_angle <= self.thresholds.deep_squat_degrees:
            return 100.0
        if min_angle <= self.thresholds.parallel_squat_degrees:
            return 85.0
        return 60.0


class DeadliftAnalyzer(ExerciseSpecificAnalyzer):
    """Back straightness from the worst frame and hip lockout completion."""

    # Fixed penalty reported when the worst frame shows a rounded back
    ROUNDING_PENALTY = 20.0

    def analyze(self, poses: Sequence[Detected]) -> DeadliftMetrics:
        t = self.thresholds
        backs = [back_alignment_ratio(p) for p in poses]
        hip_angles = _resolved(bilateral_angle(p, LEFT_SHOULDER, LEFT_HIP, LEFT_KNEE) for p in poses)

        worst_back = min(backs) if backs else 1.0
        rounded = worst_back < t.rounded_back_ratio
        max_hip = max(hip_angles) if hip_angles else 0.0
        lockout = float(np.clip(max_hip / t.lockout_reference_degrees * 100.0, 0.0, 100.0))

        return DeadliftMetrics(
            back_straightness=BackAnalysis(
                spine_neutral=worst_back * 100.0,
                lower_back_rounding=self.ROUNDING_PENALTY if rounded else 0.0,
                issues=[ROUNDED_BACK] if rounded else [],
            ),
            lockout_completion=lockout,
        )


class BenchPressAnalyzer(ExerciseSpecificAnalyzer):
    """Elbow range and how well the elbows stay tucked."""

    def analyze(self, poses: Sequence[Detected]) -> BenchPressMetrics:
        elbows = _resolved(bilateral_angle(p, LEFT_SHOULDER, LEFT_ELBOW, LEFT_WRIST) for p in poses)
        flares = _resolved(elbow_flare_degrees(p) for p in poses)

        return BenchPressMetrics(
            elbow_angle=ElbowAngleAnalysis(
                bottom_angle=min(elbows) if elbows else 0.0,
                top_angle=max(elbows) if elbows else 180.0,
                consistency=consistency_score(elbows),
                tucking=100.0 - _mean(flares),
            ),
        )


_ANALYZERS: dict[ExerciseKind, type[ExerciseSpecificAnalyzer]] = {
    ExerciseKind.SQUAT: SquatAnalyzer,
    ExerciseKind.DEADLIFT: DeadliftAnalyzer,
    ExerciseKind.BENCH_PRESS: BenchPressAnalyzer,
}


def create_exercise_analyzer(
    kind: ExerciseKind,
    thresholds: AnalysisThresholds = DEFAULT_THRESHOLDS,
) -> ExerciseSpecificAnalyzer:
    """Analyzer instance for the given exercise."""
    return _ANALYZERS[kind](thresholds)
