"""Tests for the squat / deadlift / bench press metric analyzers."""

import pytest

from liftcoach.analytics.config import AnalysisThresholds
from liftcoach.analytics.exercise_analyzers import (
    BenchPressAnalyzer,
    DeadliftAnalyzer,
    SquatAnalyzer,
    create_exercise_analyzer,
)
from liftcoach.analytics.rep_analyzer import KNEE_CAVE, ROUNDED_BACK
from liftcoach.analytics.state import (
    BenchPressMetrics,
    DeadliftMetrics,
    ExerciseKind,
    SquatMetrics,
)

from conftest import bench_pose, deadlift_pose, deadlift_pose_with_back_ratio, squat_pose


# ============================================================================
# Test: factory
# ============================================================================

class TestFactory:

    @pytest.mark.parametrize("kind, cls", [
        (ExerciseKind.SQUAT, SquatAnalyzer),
        (ExerciseKind.DEADLIFT, DeadliftAnalyzer),
        (ExerciseKind.BENCH_PRESS, BenchPressAnalyzer),
    ])
    def test_picks_analyzer_by_kind(self, kind, cls):
        assert isinstance(create_exercise_analyzer(kind), cls)

    def test_passes_thresholds(self):
        custom = AnalysisThresholds(knee_cave_ratio=0.5)
        assert create_exercise_analyzer(ExerciseKind.SQUAT, custom).thresholds is custom

    @pytest.mark.parametrize("kind, metrics_cls", [
        (ExerciseKind.SQUAT, SquatMetrics),
        (ExerciseKind.DEADLIFT, DeadliftMetrics),
        (ExerciseKind.BENCH_PRESS, BenchPressMetrics),
    ])
    def test_metrics_tag_matches_kind(self, kind, metrics_cls):
        metrics = create_exercise_analyzer(kind).analyze([])
        assert isinstance(metrics, metrics_cls)
        assert metrics.exercise == kind.value


# ============================================================================
# Test: squat
# ============================================================================

class TestSquatAnalyzer:

    def test_metrics(self):
        poses = [squat_pose(100), squat_pose(100, knee_cave=True), squat_pose(90), squat_pose(120)]
        metrics = SquatAnalyzer().analyze(poses)

        assert metrics.average_depth == pytest.approx(102.5)
        assert metrics.knee_tracking.knee_cave_percentage == pytest.approx(25.0)
        assert metrics.knee_tracking.knee_alignment == pytest.approx(87.5)
        assert metrics.knee_tracking.issues == [KNEE_CAVE]
        assert metrics.hip_mobility == 100.0
        assert metrics.torso_angle.average_forward_lean == pytest.approx(0.0)
        assert metrics.torso_angle.excessive_lean is False
        assert 0.0 < metrics.depth_consistency < 100.0

    @pytest.mark.parametrize("min_angle, score", [
        (80.0, 100.0),
        (95.0, 100.0),
        (96.0, 85.0),
        (110.0, 85.0),
        (111.0, 60.0),
    ])
    def test_hip_mobility_tiers(self, min_angle, score):
        assert SquatAnalyzer().hip_mobility_score(min_angle) == score

    def test_excessive_lean(self):
        metrics = SquatAnalyzer().analyze([squat_pose(100, lean=60.0), squat_pose(95, lean=60.0)])
        assert metrics.torso_angle.average_forward_lean == pytest.approx(60.0)
        assert metrics.torso_angle.excessive_lean is True

    def test_no_poses(self):
        metrics = SquatAnalyzer().analyze([])
        assert metrics.average_depth == 0.0
        assert metrics.knee_tracking.knee_cave_percentage == 0.0
        assert metrics.knee_tracking.issues == []
        assert metrics.hip_mobility == 60.0

    def test_balance_is_not_computed(self):
        metrics = SquatAnalyzer().analyze([squat_pose(100)])
        assert metrics.balance is None
        assert metrics.knee_tracking.lateral_stability is None


# ============================================================================
# Test: deadlift
# ============================================================================

class TestDeadliftAnalyzer:

    def test_worst_frame_drives_back_score(self):
        poses = [deadlift_pose_with_back_ratio(1.0), deadlift_pose_with_back_ratio(0.70), deadlift_pose(170)]
        metrics = DeadliftAnalyzer().analyze(poses)

        back = metrics.back_straightness
        assert back.spine_neutral == pytest.approx(70.0)
        assert back.lower_back_rounding == DeadliftAnalyzer.ROUNDING_PENALTY
        assert back.issues == [ROUNDED_BACK]
        assert metrics.lockout_completion == pytest.approx(100.0)

    def test_neutral_back(self):
        metrics = DeadliftAnalyzer().analyze([deadlift_pose(175)])
        assert metrics.back_straightness.lower_back_rounding == 0.0
        assert metrics.back_straightness.issues == []

    def test_partial_lockout(self):
        metrics = DeadliftAnalyzer().analyze([deadlift_pose(120), deadlift_pose(153)])
        assert metrics.lockout_completion == pytest.approx(90.0)

    def test_lockout_is_clamped(self):
        analyzer = DeadliftAnalyzer(AnalysisThresholds(lockout_reference_degrees=150.0))
        assert analyzer.analyze([deadlift_pose(175)]).lockout_completion == 100.0

    def test_no_poses(self):
        metrics = DeadliftAnalyzer().analyze([])
        assert metrics.back_straightness.spine_neutral == 100.0
        assert metrics.lockout_completion == 0.0

    def test_placeholders_are_not_computed(self):
        metrics = DeadliftAnalyzer().analyze([deadlift_pose(175)])
        assert metrics.hip_hinge_quality is None
        assert metrics.starting_position is None
        assert metrics.back_straightness.upper_back_rounding is None


# ============================================================================
# Test: bench press
# ============================================================================

class TestBenchPressAnalyzer:

    def test_elbow_range_and_tucking(self):
        poses = [bench_pose(170, flare=40), bench_pose(80, flare=50), bench_pose(165, flare=45)]
        elbow = BenchPressAnalyzer().analyze(poses).elbow_angle

        assert elbow.bottom_angle == pytest.approx(80.0)
        assert elbow.top_angle == pytest.approx(170.0)
        assert elbow.tucking == pytest.approx(55.0)
        assert 0.0 < elbow.consistency < 100.0

    def test_no_poses(self):
        elbow = BenchPressAnalyzer().analyze([]).elbow_angle
        assert elbow.bottom_angle == 0.0
        assert elbow.top_angle == 180.0
        assert elbow.tucking == 100.0

    def test_placeholders_are_not_computed(self):
        metrics = BenchPressAnalyzer().analyze([bench_pose(90)])
        assert metrics.shoulder_position is None
        assert metrics.touch_point_consistency is None
        assert metrics.arch_maintenance is None
