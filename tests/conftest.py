"""Shared fixtures and synthetic pose builders for the analytics tests.

Poses are built in normalized image coordinates (y grows downward) with the
left side around x=0.4 and the right side shifted by +0.2, so left and right
joint angles match unless a test asks otherwise.
"""

import math
import sys
from pathlib import Path
from typing import Optional

import pytest

PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from liftcoach.analytics.state import (
    Detected,
    ExerciseKind,
    Frame,
    Landmark,
    NotDetected,
    Repetition,
    Session,
)

SIDE_OFFSET = 0.2


def make_pose(points: dict[int, tuple[float, float]]) -> Detected:
    """Detected pose with the given landmarks set and every other slot empty."""
    landmarks: list[Optional[Landmark]] = [None] * 33
    for idx, (x, y) in points.items():
        landmarks[idx] = Landmark(x=x, y=y, visibility=0.99)
    return Detected(landmarks=landmarks)


def ray(vertex, theta_deg, length, base=(0.0, 1.0)):
    """Point at ``length`` from ``vertex``, rotated ``theta_deg`` from unit vector ``base``."""
    th = math.radians(theta_deg)
    bx, by = base
    dx = bx * math.cos(th) - by * math.sin(th)
    dy = bx * math.sin(th) + by * math.cos(th)
    return (vertex[0] + length * dx, vertex[1] + length * dy)


def _unit(frm, to):
    dx, dy = to[0] - frm[0], to[1] - frm[1]
    n = math.hypot(dx, dy)
    return (dx / n, dy / n)


def _shift(point, dx):
    return (point[0] + dx, point[1])


# ============================================================================
# Exercise poses
# ============================================================================

def squat_side(knee_angle: float, x: float):
    """(hip, knee, ankle, shoulder) for one leg with the given knee angle."""
    knee = (x, 0.60)
    ankle = (x, 0.85)
    hip = ray(knee, knee_angle, 0.25)
    shoulder = (hip[0], hip[1] - 0.30)
    return hip, knee, ankle, shoulder


def squat_pose(knee_angle: float, right_knee_angle: Optional[float] = None,
               knee_cave: bool = False, lean: float = 0.0) -> Detected:
    """Squat frame; ``lean`` tilts the left shoulder forward by that many degrees."""
    right_knee_angle = knee_angle if right_knee_angle is None else right_knee_angle
    l_hip, l_knee, l_ankle, l_shoulder = squat_side(knee_angle, 0.40)
    r_hip, r_knee, r_ankle, r_shoulder = squat_side(right_knee_angle, 0.60)
    if lean:
        l_shoulder = ray(l_hip, 180.0 - lean, 0.30)
    if knee_cave:
        # knees 0.1 apart over ankles 0.2 apart -> valgus ratio 0.5
        l_knee, r_knee = (0.45, l_knee[1]), (0.55, r_knee[1])
        l_hip = ray(l_knee, knee_angle, 0.25, base=_unit(l_knee, l_ankle))
        r_hip = ray(r_knee, right_knee_angle, 0.25, base=_unit(r_knee, r_ankle))
        l_shoulder = (l_hip[0], l_hip[1] - 0.30)
        r_shoulder = (r_hip[0], r_hip[1] - 0.30)
    return make_pose({
        11: l_shoulder, 12: r_shoulder,
        23: l_hip, 24: r_hip,
        25: l_knee, 26: r_knee,
        27: l_ankle, 28: r_ankle,
    })


def deadlift_pose(hip_angle: float) -> Detected:
    """Deadlift frame with the given shoulder-hip-knee angle on both sides."""
    hip = (0.45, 0.50)
    knee = (0.45, 0.75)
    shoulder = ray(hip, hip_angle, 0.30)
    return make_pose({
        11: shoulder, 12: _shift(shoulder, SIDE_OFFSET),
        23: hip, 24: _shift(hip, SIDE_OFFSET),
        25: knee, 26: _shift(knee, SIDE_OFFSET),
    })


def deadlift_pose_with_back_ratio(ratio: float) -> Detected:
    """Deadlift frame whose back-alignment ratio is exactly ``ratio``."""
    hip = (0.45, 0.50)
    knee = (0.45, 0.75)
    shoulder = (0.30, 0.50 - 0.25 * ratio)
    return make_pose({
        11: shoulder, 12: _shift(shoulder, SIDE_OFFSET),
        23: hip, 24: _shift(hip, SIDE_OFFSET),
        25: knee, 26: _shift(knee, SIDE_OFFSET),
    })


def bench_pose(elbow_angle: float, flare: float = 45.0) -> Detected:
    """Bench frame with the given elbow angle and upper-arm flare."""
    shoulder = (0.40, 0.40)
    hip = (0.40, 0.80)
    elbow = ray(shoulder, flare, 0.20)
    wrist = ray(elbow, elbow_angle, 0.20, base=_unit(elbow, shoulder))
    return make_pose({
        11: shoulder, 12: _shift(shoulder, SIDE_OFFSET),
        13: elbow, 14: _shift(elbow, SIDE_OFFSET),
        15: wrist, 16: _shift(wrist, SIDE_OFFSET),
        23: hip, 24: _shift(hip, SIDE_OFFSET),
    })


# ============================================================================
# Session helpers
# ============================================================================

def rep_frames(poses, rep_number: int, start_ms: int, step_ms: int = 500, first_frame: int = 0):
    """Frames for one rep, evenly spaced in time."""
    return [
        Frame(
            timestamp=start_ms + i * step_ms,
            frame_number=first_frame + i,
            pose=pose,
            rep_number=rep_number,
        )
        for i, pose in enumerate(poses)
    ]


def build_session(exercise: ExerciseKind, rep_poses, qualities=None, good=None,
                  step_ms: int = 500, rest_ms: int = 1000, session_id: str = "test-session") -> Session:
    """Session with one rep per entry of ``rep_poses``."""
    qualities = qualities or [0.9] * len(rep_poses)
    good = good if good is not None else [True] * len(rep_poses)
    frames, reps = [], []
    t = 0
    for i, poses in enumerate(rep_poses, start=1):
        fr = rep_frames(poses, i, t, step_ms, first_frame=len(frames))
        frames.extend(fr)
        reps.append(Repetition(
            rep_number=i,
            is_good_form=good[i - 1],
            quality=qualities[i - 1],
            end_timestamp=fr[-1].timestamp,
        ))
        t = fr[-1].timestamp + rest_ms
    return Session(
        id=session_id,
        exercise=exercise,
        start_time=0,
        end_time=t,
        repetitions=reps,
        frames=frames,
    )


@pytest.fixture
def elite_squat_session() -> Session:
    """3 clean squat reps to 90 degrees, 1s down / 1s up, all good form."""
    angles = [170, 130, 90, 130, 170]
    rep = [squat_pose(a) for a in angles]
    return build_session(ExerciseKind.SQUAT, [rep, rep, rep], qualities=[0.95, 0.97, 0.96])


@pytest.fixture
def not_detected_pose() -> NotDetected:
    return NotDetected()
