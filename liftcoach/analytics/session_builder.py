"""
Incremental session builder used while a workout is being recorded.

Capture code appends frames and completed reps as they arrive; ``build``
returns the frozen ``Session`` that the analyzers read.
"""

import random
import time
from typing import Optional

from .state import ExerciseKind, Frame, PoseSnapshot, Repetition, Session


def _now_ms() -> int:
    return int(time.time() * 1000)


class SessionBuilder:
    """Collects frames and reps during a workout."""

    def __init__(
        self,
        exercise: ExerciseKind,
        session_id: Optional[str] = None,
        start_time: Optional[int] = None,
    ):
        self.exercise = exercise
        self.start_time = _now_ms() if start_time is None else start_time
        self.session_id = session_id or f"session_{self.start_time}_{random.randint(0, 9999)}"
        self._reps: list[Repetition] = []
        self._frames: list[Frame] = []
        self._built = False

    def _check_open(self) -> None:
        if self._built:
            raise RuntimeError(f"Session '{self.session_id}' is already closed.")

    def add_rep(self, rep: Repetition) -> None:
        self._check_open()
        self._reps.append(rep)

    def add_frame(
        self,
        pose: PoseSnapshot,
        rep_number: Optional[int] = None,
        timestamp: Optional[int] = None,
    ) -> Frame:
        """Append a frame; frame numbers are assigned sequentially from 0."""
        self._check_open()
        frame = Frame(
            timestamp=_now_ms() if timestamp is None else timestamp,
            frame_number=len(self._frames),
            pose=pose,
            rep_number=rep_number,
        )
        self._frames.append(frame)
        return frame

    def build(self, end_time: Optional[int] = None) -> Session:
        """Freeze the collected data into a Session; the builder is closed afterwards."""
        self._check_open()
        self._built = True
        return Session(
            id=self.session_id,
            exercise=self.exercise,
            start_time=self.start_time,
            end_time=_now_ms() if end_time is None else end_time,
            repetitions=list(self._reps),
            frames=list(self._frames),
        )
