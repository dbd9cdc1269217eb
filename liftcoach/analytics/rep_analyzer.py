"""
Per-repetition analysis.

For each rep the analyzer locates the peak frame (bottom of a squat or bench
press, lockout of a deadlift), reads the depth at that point, splits the rep
into eccentric and concentric phases, and collects the form issues seen in
any frame of the rep.
"""

import logging
from typing import Optional, Sequence

from .config import DEFAULT_THRESHOLDS, AnalysisThresholds
from .geometry import (
    back_alignment_ratio,
    elbow_flare_degrees,
    forward_lean_degrees,
    primary_angle,
    valgus_ratio,
)
from .state import (
    Detected,
    ExerciseKind,
    Frame,
    Repetition,
    RepetitionAnalysis,
    RepTempo,
)

logger = logging.getLogger(__name__)

INSUFFICIENT_POSE_DATA = "Insufficient pose data"
KNEE_CAVE = "Knee Cave"
TORSO_COLLAPSE = "Torso Collapse"
ROUNDED_BACK = "Rounded Back"
EXCESSIVE_FLARE = "Excessive Flare"


def _peaks_at_max(kind: ExerciseKind) -> bool:
    # Deadlift peaks at full hip extension; the others at the deepest point
    return kind == ExerciseKind.DEADLIFT


def find_peak_frame(
    poses: Sequence[Detected],
    kind: ExerciseKind,
    thresholds: AnalysisThresholds = DEFAULT_THRESHOLDS,
) -> Optional[int]:
    """
    Index of the peak frame within ``poses``.

    Frames whose primary angle cannot be resolved count as fully extended.
    Ties go to the earliest frame.
    """
    if not poses:
        return None
    angles = []
    for pose in poses:
        value = primary_angle(pose, kind)
        angles.append(thresholds.unresolved_angle_degrees if value is None else value)
    target = max(angles) if _peaks_at_max(kind) else min(angles)
    return angles.index(target)


def rep_depth(poses: Sequence[Detected], kind: ExerciseKind) -> Optional[float]:
    """Primary angle at the extremum, over frames where it resolves."""
    angles = [primary_angle(pose, kind) for pose in poses]
    angles = [a for a in angles if a is not None]
    if not angles:
        return None
    return max(angles) if _peaks_at_max(kind) else min(angles)


def rep_tempo(frames: Sequence[Frame], peak_timestamp: Optional[int]) -> Optional[RepTempo]:
    """Eccentric/concentric split around the peak; needs at least two frames."""
    if len(frames) < 2:
        return None
    start = frames[0].timestamp
    end = frames[-1].timestamp
    peak = start if peak_timestamp is None else peak_timestamp
    return RepTempo(
        total_ms=end - start,
        eccentric_ms=peak - start,
        concentric_ms=end - peak,
    )


def identify_form_issues(
    poses: Sequence[Detected],
    kind: ExerciseKind,
    thresholds: AnalysisThresholds = DEFAULT_THRESHOLDS,
) -> frozenset[str]:
    """Union of the form issues flagged on any frame."""
    issues: set[str] = set()
    for pose in poses:
        if kind == ExerciseKind.SQUAT:
            if valgus_ratio(pose) < thresholds.knee_cave_ratio:
                issues.add(KNEE_CAVE)
            lean = forward_lean_degrees(pose)
            if lean is not None and lean > thresholds.torso_collapse_degrees:
                issues.add(TORSO_COLLAPSE)
        elif kind == ExerciseKind.DEADLIFT:
            if back_alignment_ratio(pose) < thresholds.rounded_back_ratio:
                issues.add(ROUNDED_BACK)
        elif kind == ExerciseKind.BENCH_PRESS:
            flare = elbow_flare_degrees(pose)
            if flare is not None and flare > thresholds.excessive_elbow_flare_degrees:
                issues.add(EXCESSIVE_FLARE)
    return frozenset(issues)


def analyze_repetition(
    rep: Repetition,
    frames: Sequence[Frame],
    kind: ExerciseKind,
    thresholds: AnalysisThresholds = DEFAULT_THRESHOLDS,
) -> RepetitionAnalysis:
    """
    Analyze one repetition from its timestamp-ordered frames.

    Args:
        rep: The repetition as reported by the rep counter.
        frames: All frames tagged with this rep, detected or not.
        kind: Exercise performed.
        thresholds: Form-issue thresholds.

    Returns:
        RepetitionAnalysis; derived fields are None and the issue set holds
        only "Insufficient pose data" when no frame has a detected pose.
    """
    detected = [frame for frame in frames if isinstance(frame.pose, Detected)]

    if not detected:
        logger.debug("Rep %d: no detected poses in %d frames", rep.rep_number, len(frames))
        return RepetitionAnalysis(
            rep_number=rep.rep_number,
            is_good_form=rep.is_good_form,
            quality=rep.quality,
            form_issues=frozenset({INSUFFICIENT_POSE_DATA}),
        )

    poses = [frame.pose for frame in detected]
    peak_idx = find_peak_frame(poses, kind, thresholds)
    peak_timestamp = detected[peak_idx].timestamp if peak_idx is not None else None

    analysis = RepetitionAnalysis(
        rep_number=rep.rep_number,
        is_good_form=rep.is_good_form,
        quality=rep.quality,
        depth=rep_depth(poses, kind),
        tempo=rep_tempo(frames, peak_timestamp),
        peak_frame_index=peak_idx,
        form_issues=identify_form_issues(poses, kind, thresholds),
    )
    logger.debug(
        "Rep %d: depth=%s peak=%s issues=%s",
        rep.rep_number, analysis.depth, peak_idx, sorted(analysis.form_issues),
    )
    return analysis
