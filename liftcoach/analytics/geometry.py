"""
Joint-angle geometry on MediaPipe pose landmarks.

Angles are computed in the 2D image plane on normalized coordinates. Left
and right body landmarks follow the MediaPipe layout where, for indices 11-32,
the right-side counterpart of left index ``i`` is ``i + 1``.

Helpers that cannot resolve their landmarks return a neutral value so a
single poorly detected frame never raises or leaks NaN into the aggregates.
"""

import math
from typing import Optional, Sequence

import numpy as np

from .state import Detected, ExerciseKind, Landmark

# MediaPipe Pose landmark indices (left side; right side is index + 1)
LEFT_SHOULDER = 11
LEFT_ELBOW = 13
LEFT_WRIST = 15
LEFT_HIP = 23
LEFT_KNEE = 25
LEFT_ANKLE = 27

RIGHT_KNEE = LEFT_KNEE + 1
RIGHT_ANKLE = LEFT_ANKLE + 1

# Primary (a, joint, c) triple per exercise, left-side indices
PRIMARY_JOINTS: dict[ExerciseKind, tuple[int, int, int]] = {
    ExerciseKind.SQUAT: (LEFT_HIP, LEFT_KNEE, LEFT_ANKLE),
    ExerciseKind.DEADLIFT: (LEFT_SHOULDER, LEFT_HIP, LEFT_KNEE),
    ExerciseKind.BENCH_PRESS: (LEFT_SHOULDER, LEFT_ELBOW, LEFT_WRIST),
}

_MIN_SPAN = 0.01
_EPS = 1e-9


def angle(p1: Landmark, p2: Landmark, p3: Landmark) -> Optional[float]:
    """Calculate angle at joint p2 formed by points p1-p2-p3.

    Uses the dot product formula: cos(θ) = (v1·v2) / (|v1||v2|)
    where v1 = vector from p2 to p1, v2 = vector from p2 to p3.

    Args:
        p1, p2, p3: Landmarks with .x and .y attributes

    Returns:
        Angle in degrees (0-180), or None if p2 coincides with p1 or p3.
    """
    v1 = np.array([p1.x - p2.x, p1.y - p2.y], dtype=np.float64)
    v2 = np.array([p3.x - p2.x, p3.y - p2.y], dtype=np.float64)

    magnitude_1 = np.linalg.norm(v1)
    magnitude_2 = np.linalg.norm(v2)
    if magnitude_1 < _EPS or magnitude_2 < _EPS:
        return None

    # Clip to [-1, 1] for numerical stability on near-collinear points
    cos_angle = np.clip(np.dot(v1, v2) / (magnitude_1 * magnitude_2), -1.0, 1.0)
    return float(np.degrees(np.arccos(cos_angle)))


def _side_angle(pose: Detected, a: int, b: int, c: int) -> Optional[float]:
    la, lb, lc = pose.landmark(a), pose.landmark(b), pose.landmark(c)
    if la is None or lb is None or lc is None:
        return None
    return angle(la, lb, lc)


def side_angles(pose: Detected, a: int, b: int, c: int) -> tuple[Optional[float], Optional[float]]:
    """Left angle at (a, b, c) and right angle at (a+1, b+1, c+1), resolved independently."""
    return _side_angle(pose, a, b, c), _side_angle(pose, a + 1, b + 1, c + 1)


def bilateral_angle(pose: Detected, a: int, b: int, c: int) -> Optional[float]:
    """Mean of the left/right angles; whichever side resolves if only one does."""
    left, right = side_angles(pose, a, b, c)
    if left is not None and right is not None:
        return (left + right) / 2.0
    return left if left is not None else right


def primary_angle(pose: Detected, kind: ExerciseKind) -> Optional[float]:
    """Bilateral angle of the exercise's primary joint."""
    return bilateral_angle(pose, *PRIMARY_JOINTS[kind])


def valgus_ratio(pose: Detected) -> float:
    """Knee-to-knee over ankle-to-ankle horizontal distance (1.0 if unknown)."""
    l_knee, r_knee = pose.landmark(LEFT_KNEE), pose.landmark(RIGHT_KNEE)
    l_ankle, r_ankle = pose.landmark(LEFT_ANKLE), pose.landmark(RIGHT_ANKLE)
    if l_knee is None or r_knee is None or l_ankle is None or r_ankle is None:
        return 1.0
    return abs(l_knee.x - r_knee.x) / max(abs(l_ankle.x - r_ankle.x), _MIN_SPAN)


def back_alignment_ratio(pose: Detected) -> float:
    """Shoulder-to-hip over hip-to-knee vertical distance (1.0 if unknown)."""
    shoulder, hip, knee = pose.landmark(LEFT_SHOULDER), pose.landmark(LEFT_HIP), pose.landmark(LEFT_KNEE)
    if shoulder is None or hip is None or knee is None:
        return 1.0
    return abs(shoulder.y - hip.y) / max(abs(hip.y - knee.y), _MIN_SPAN)


def forward_lean_degrees(pose: Detected) -> Optional[float]:
    """Torso lean from vertical, measured shoulder-over-hip."""
    shoulder, hip = pose.landmark(LEFT_SHOULDER), pose.landmark(LEFT_HIP)
    if shoulder is None or hip is None:
        return None
    return math.degrees(math.atan2(abs(shoulder.x - hip.x), abs(shoulder.y - hip.y)))


def elbow_flare_degrees(pose: Detected) -> Optional[float]:
    """Upper-arm abduction: angle at the shoulder between hip and elbow."""
    return bilateral_angle(pose, LEFT_HIP, LEFT_SHOULDER, LEFT_ELBOW)


def consistency_score(values: Sequence[float]) -> float:
    """
    Repeatability score on a 0-100 scale.

    Inverted coefficient of variation: 100 - (std / mean) * 100, with the
    mean floored at 1 and the result clamped to [0, 100]. Fewer than two
    values are perfectly consistent by definition.
    """
    if len(values) < 2:
        return 100.0
    arr = np.asarray(values, dtype=np.float64)
    mean = float(np.mean(arr))
    std = float(np.std(arr))
    return float(np.clip(100.0 - std / max(mean, 1.0) * 100.0, 0.0, 100.0))
