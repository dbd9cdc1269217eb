"""
State definitions for the workout analytics engine.

This module defines the Pydantic models consumed and produced by the analyzers:
the recorded session (frames, poses, repetitions) on the input side and the
per-rep / session-wide analyses plus the final report on the output side.
Every model is frozen; a finished session is never mutated by the engine.
"""

from enum import Enum
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from .config import GRADE_THRESHOLDS


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


# ============================================================================
# Input Models
# ============================================================================

class ExerciseKind(str, Enum):
    """Supported exercises for pose-based form analysis."""
    SQUAT = "squat"
    DEADLIFT = "deadlift"
    BENCH_PRESS = "bench_press"

    @property
    def display_name(self) -> str:
        return {
            ExerciseKind.SQUAT: "Squat",
            ExerciseKind.DEADLIFT: "Deadlift",
            ExerciseKind.BENCH_PRESS: "Bench Press",
        }[self]

    @classmethod
    def from_display_name(cls, name: str) -> Optional["ExerciseKind"]:
        """Case-insensitive lookup by display name; None if unknown."""
        for kind in cls:
            if kind.display_name.lower() == name.strip().lower():
                return kind
        return None


class Landmark(_Frozen):
    """A single normalized 2D landmark from the pose detector."""
    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    x: float
    y: float
    z: Optional[float] = None
    visibility: Optional[float] = Field(default=None, description="Detector confidence (0-1)")


class Detected(_Frozen):
    """Pose found in the frame: 33 MediaPipe landmarks, null where missing."""
    status: Literal["detected"] = "detected"
    landmarks: list[Optional[Landmark]]

    def landmark(self, index: int) -> Optional[Landmark]:
        """Landmark at ``index`` or None if absent / out of range."""
        if 0 <= index < len(self.landmarks):
            return self.landmarks[index]
        return None


class NotDetected(_Frozen):
    status: Literal["not_detected"] = "not_detected"


class DetectionFailed(_Frozen):
    status: Literal["failed"] = "failed"
    reason: str = ""


PoseSnapshot = Annotated[
    Union[Detected, NotDetected, DetectionFailed],
    Field(discriminator="status"),
]


class Frame(_Frozen):
    """One captured frame of pose data."""
    timestamp: int = Field(description="Capture time in milliseconds")
    frame_number: int
    pose: PoseSnapshot
    rep_number: Optional[int] = Field(default=None, description="Rep this frame belongs to, if any")


class Repetition(_Frozen):
    """A completed repetition as emitted by the rep counter."""
    rep_number: int
    is_good_form: bool
    quality: float = Field(ge=0.0, le=1.0, description="Pose quality score (0-1)")
    end_timestamp: int = Field(description="Time the rep was completed (ms)")


class Session(_Frozen):
    """A finished workout session with all collected pose frames and reps."""
    id: str
    exercise: ExerciseKind
    start_time: int
    end_time: Optional[int] = None
    repetitions: list[Repetition] = Field(default_factory=list)
    frames: list[Frame] = Field(default_factory=list)

    @field_validator("exercise", mode="before")
    @classmethod
    def _exercise_from_display_name(cls, value):
        # The app labels exercises by display name ("Bench Press")
        if isinstance(value, str) and not isinstance(value, ExerciseKind):
            kind = ExerciseKind.from_display_name(value)
            if kind is not None:
                return kind
        return value

    @property
    def total_reps(self) -> int:
        return len(self.repetitions)

    @property
    def good_reps(self) -> int:
        return sum(1 for rep in self.repetitions if rep.is_good_form)

    @property
    def bad_reps(self) -> int:
        return self.total_reps - self.good_reps

    @property
    def average_quality(self) -> float:
        """Mean pose quality across reps (0 when no reps were recorded)."""
        if not self.repetitions:
            return 0.0
        return sum(rep.quality for rep in self.repetitions) / len(self.repetitions)

    @property
    def duration_ms(self) -> int:
        """Session length; falls back to the last frame when end_time is unset."""
        end = self.end_time
        if end is None:
            end = self.frames[-1].timestamp if self.frames else self.start_time
        return max(end - self.start_time, 0)

    def frames_for_rep(self, rep_number: int) -> list[Frame]:
        return [frame for frame in self.frames if frame.rep_number == rep_number]

    def detected_poses(self) -> list[Detected]:
        return [frame.pose for frame in self.frames if isinstance(frame.pose, Detected)]


# ============================================================================
# Analysis Models (computed per rep / per session)
# ============================================================================

class RepTempo(_Frozen):
    """Timing breakdown for a single rep; eccentric + concentric == total."""
    total_ms: int
    eccentric_ms: int = Field(description="Lowering phase duration")
    concentric_ms: int = Field(description="Lifting phase duration")


class RepetitionAnalysis(_Frozen):
    rep_number: int
    is_good_form: bool
    quality: float
    depth: Optional[float] = Field(default=None, description="Primary joint angle at the peak (degrees)")
    tempo: Optional[RepTempo] = None
    peak_frame_index: Optional[int] = Field(
        default=None, description="Index of the peak within the rep's detected frames"
    )
    form_issues: frozenset[str] = Field(default_factory=frozenset)

    @field_serializer("form_issues")
    def _sorted_issues(self, issues: frozenset[str]) -> list[str]:
        return sorted(issues)


class RangeOfMotionAnalysis(_Frozen):
    average_depth: float = 0.0
    min_depth: float = 0.0
    max_depth: float = 0.0
    consistency: float = Field(default=0.0, description="0-100, higher = more consistent")


class TempoAnalysis(_Frozen):
    average_rep_duration_ms: int = 0
    average_rest_between_reps_ms: int = 0
    tempo_consistency: float = 100.0


class SymmetryAnalysis(_Frozen):
    overall_symmetry: float = Field(description="0-100, higher = more symmetrical")
    left_right_difference: float
    issues: list[str] = Field(default_factory=list)


class FormConsistencyAnalysis(_Frozen):
    consistency_score: float
    quality_trend: Literal["Improving", "Declining", "Stable"]


# ---------------------------------------------------------------------------
# Exercise-specific metrics. Fields typed Optional and left as None are not
# computed from the pose stream.
# ---------------------------------------------------------------------------

class KneeTrackingAnalysis(_Frozen):
    knee_alignment: float = Field(description="Mean valgus ratio scaled to 0-100")
    knee_cave_percentage: float = Field(description="% of frames with knee cave")
    lateral_stability: Optional[float] = None
    issues: list[str] = Field(default_factory=list)


class TorsoAngleAnalysis(_Frozen):
    average_forward_lean: float = Field(description="Degrees from vertical")
    consistency: float
    excessive_lean: bool


class BalanceAnalysis(_Frozen):
    weight_distribution: Optional[float] = None
    heel_pressure: Optional[float] = None
    stability: Optional[float] = None
    issues: list[str] = Field(default_factory=list)


class BackAnalysis(_Frozen):
    spine_neutral: float = Field(description="Worst back-alignment ratio x 100")
    lower_back_rounding: float
    upper_back_rounding: Optional[float] = None
    issues: list[str] = Field(default_factory=list)


class StartPositionAnalysis(_Frozen):
    hip_height: Optional[float] = None
    shoulder_position: Optional[float] = None
    setup: Optional[float] = None
    issues: list[str] = Field(default_factory=list)


class ElbowAngleAnalysis(_Frozen):
    bottom_angle: float
    top_angle: float
    consistency: float
    tucking: float = Field(description="100 - mean elbow flare")


class ShoulderAnalysis(_Frozen):
    retraction: Optional[float] = None
    depression: Optional[float] = None
    stability: Optional[float] = None
    issues: list[str] = Field(default_factory=list)


class SquatMetrics(_Frozen):
    exercise: Literal["squat"] = "squat"
    average_depth: float
    depth_consistency: float
    knee_tracking: KneeTrackingAnalysis
    hip_mobility: float
    torso_angle: TorsoAngleAnalysis
    balance: Optional[BalanceAnalysis] = None


class DeadliftMetrics(_Frozen):
    exercise: Literal["deadlift"] = "deadlift"
    back_straightness: BackAnalysis
    lockout_completion: float
    hip_hinge_quality: Optional[float] = None
    starting_position: Optional[StartPositionAnalysis] = None


class BenchPressMetrics(_Frozen):
    exercise: Literal["bench_press"] = "bench_press"
    elbow_angle: ElbowAngleAnalysis
    shoulder_position: Optional[ShoulderAnalysis] = None
    touch_point_consistency: Optional[float] = None
    arch_maintenance: Optional[float] = None


ExerciseSpecificMetrics = Annotated[
    Union[SquatMetrics, DeadliftMetrics, BenchPressMetrics],
    Field(discriminator="exercise"),
]


# ============================================================================
# Report
# ============================================================================

class WorkoutReport(_Frozen):
    """
    Complete analysis of one session.

    Generated after a workout completes; holds the session counters, the
    four aggregate analyses, the per-rep breakdown, exercise-specific metrics
    and the ordered coaching recommendations.
    """
    session_id: str
    exercise: ExerciseKind
    total_reps: int
    good_reps: int
    bad_reps: int
    average_quality: float
    duration_ms: int
    range_of_motion: RangeOfMotionAnalysis
    tempo: TempoAnalysis
    symmetry: SymmetryAnalysis
    form_consistency: FormConsistencyAnalysis
    rep_analyses: list[RepetitionAnalysis]
    recommendations: list[str]
    exercise_metrics: Optional[ExerciseSpecificMetrics] = None

    @property
    def overall_score(self) -> float:
        """
        Overall workout score (0-100).

        Unweighted mean of the good-rep percentage, average pose quality,
        range-of-motion consistency, symmetry and form consistency.
        """
        form_score = self.good_reps / max(self.total_reps, 1) * 100.0
        quality_score = self.average_quality * 100.0
        return (
            form_score
            + quality_score
            + self.range_of_motion.consistency
            + self.symmetry.overall_symmetry
            + self.form_consistency.consistency_score
        ) / 5.0

    @property
    def grade(self) -> str:
        """Letter grade (A-F) for the overall score."""
        score = self.overall_score
        for letter, minimum in GRADE_THRESHOLDS.items():
            if score >= minimum:
                return letter
        return "F"

    def to_dict(self) -> dict:
        """JSON-ready dict of the report with ``overall_score`` and ``grade`` added."""
        data = self.model_dump(mode="json")
        data["overall_score"] = round(self.overall_score, 2)
        data["grade"] = self.grade
        return data
