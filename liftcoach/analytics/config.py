"""
Configuration for the analytics engine.

All numeric thresholds used by the rep analyzer, the exercise-specific
analyzers and the recommendation rules live in one frozen model so that a
session can be analyzed with a custom profile without touching module state.
Defaults can be overridden from a YAML file (see ``load_thresholds``).
"""

import logging
from pathlib import Path
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from liftcoach.utils.io_utils import load_config

logger = logging.getLogger(__name__)


class AnalysisThresholds(BaseModel):
    """Thresholds for form issues, metrics and recommendation rules."""
    model_config = ConfigDict(frozen=True, extra="forbid")

    # Form issues
    knee_cave_ratio: float = 0.88
    torso_collapse_degrees: float = 45.0
    rounded_back_ratio: float = 0.82
    excessive_elbow_flare_degrees: float = 80.0

    # Symmetry
    imbalanced_drive: float = 85.0

    # Form consistency (quality is on a 0-1 scale)
    form_trend_delta: float = 0.1

    # Recommendations
    critical_spine_rounding: float = 80.0
    lockout_completion: float = 90.0
    knee_cave_percentage: float = 25.0
    torso_lean_degrees: float = 45.0
    shoulder_safety_tucking: float = 60.0
    shallow_squat_degrees: float = 115.0
    rom_consistency: float = 75.0
    slow_eccentric_ms: int = 800
    grinding_rep_ms: int = 2500
    symmetry_imbalance: float = 82.0
    elite_performance_ratio: float = 0.9

    # Squat / deadlift metrics
    deep_squat_degrees: float = 95.0
    parallel_squat_degrees: float = 110.0
    lockout_reference_degrees: float = Field(default=170.0, gt=0.0)

    # Angle assumed for frames where the primary joint cannot be resolved
    unresolved_angle_degrees: float = 180.0


DEFAULT_THRESHOLDS = AnalysisThresholds()

# Minimum overall score (0-100) per letter grade, highest first
GRADE_THRESHOLDS: dict[str, float] = {
    "A": 90.0,
    "B": 80.0,
    "C": 70.0,
    "D": 60.0,
}


def load_thresholds(config_path: Optional[Union[str, Path]] = None) -> AnalysisThresholds:
    """
    Build thresholds from a YAML file, falling back to defaults.

    The file may either hold the threshold keys at the top level or nest
    them under a ``thresholds:`` section.

    Args:
        config_path: Path to the YAML file, or None for the defaults.

    Returns:
        AnalysisThresholds with the overrides applied.

    Raises:
        FileNotFoundError: If ``config_path`` does not exist.
        pydantic.ValidationError: On unknown keys or bad values.
    """
    if config_path is None:
        return DEFAULT_THRESHOLDS

    config = load_config(str(config_path)) or {}
    if not isinstance(config, dict):
        raise ValueError(f"Threshold config must be a mapping, got {type(config).__name__}.")
    overrides = config.get("thresholds", config)
    thresholds = AnalysisThresholds(**overrides)
    logger.info("Loaded %d threshold override(s) from %s", len(overrides), config_path)
    return thresholds
