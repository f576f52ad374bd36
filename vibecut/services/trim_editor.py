"""Trim handle dragging for a single cut window.

A drag gesture freezes the window at pointer-down in a ``DragSession``. Every
pointer-move is computed against that frozen snapshot, never against the
previously emitted value, so dropped or repeated move events cannot
accumulate error: only the latest pointer position matters.

Three modes:
- ``start``: left handle, the right edge stays fixed
- ``end``: right handle, the left edge stays fixed
- ``move``: the whole window slides, duration stays fixed
"""

import logging
from dataclasses import dataclass
from enum import Enum

from vibecut.schemas.timeline import MIN_CLIP_DURATION, CutWindow

logger = logging.getLogger(__name__)


class DragMode(str, Enum):
    START = "start"
    END = "end"
    MOVE = "move"


@dataclass(frozen=True)
class TrimUpdate:
    """An atomic (start, duration) pair emitted by a drag step."""

    trim_start: float
    trim_duration: float

    @property
    def trim_end(self) -> float:
        return self.trim_start + self.trim_duration


@dataclass(frozen=True)
class DragSession:
    """Gesture state captured at pointer-down; never mutated mid-gesture."""

    mode: DragMode
    origin_x: float
    track_width_px: float
    snapshot: CutWindow

    def delta_seconds(self, pointer_x: float) -> float:
        """Project the pointer's pixel delta onto the trim track's time scale."""
        if self.track_width_px <= 0:
            return 0.0
        return (pointer_x - self.origin_x) / self.track_width_px * self.snapshot.total_duration


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(value, high))


def compute_trim(
    mode: DragMode,
    snapshot_start: float,
    snapshot_duration: float,
    total_duration: float,
    delta_seconds: float,
    min_duration: float = MIN_CLIP_DURATION,
) -> TrimUpdate:
    """Apply a time delta to a frozen window.

    The result always satisfies ``start >= 0``, ``duration >= min_duration``
    and ``start + duration <= total_duration`` given a valid snapshot.
    """
    if mode is DragMode.START:
        fixed_end = snapshot_start + snapshot_duration
        new_start = _clamp(snapshot_start + delta_seconds, 0.0, fixed_end - min_duration)
        return TrimUpdate(new_start, fixed_end - new_start)

    if mode is DragMode.END:
        new_duration = max(min_duration, snapshot_duration + delta_seconds)
        new_duration = min(new_duration, total_duration - snapshot_start)
        return TrimUpdate(snapshot_start, new_duration)

    new_start = _clamp(snapshot_start + delta_seconds, 0.0, total_duration - snapshot_duration)
    return TrimUpdate(new_start, snapshot_duration)


class TrimEditor:
    """Turns pointer events on a trim track into window updates."""

    def __init__(self, min_duration: float = MIN_CLIP_DURATION) -> None:
        self.min_duration = min_duration
        self._session: DragSession | None = None
        self._last_update: TrimUpdate | None = None

    @property
    def session(self) -> DragSession | None:
        return self._session

    @property
    def is_dragging(self) -> bool:
        return self._session is not None

    def begin(
        self,
        mode: DragMode | str,
        pointer_x: float,
        window: CutWindow,
        track_width_px: float,
    ) -> DragSession:
        """Start a gesture. A gesture already in progress is discarded."""
        if self._session is not None:
            logger.debug("New drag started while another was active; discarding the old one")
        self._session = DragSession(
            mode=DragMode(mode),
            origin_x=pointer_x,
            track_width_px=track_width_px,
            snapshot=window,
        )
        self._last_update = None
        return self._session

    def move(self, pointer_x: float) -> TrimUpdate | None:
        """Compute the window for the current pointer position.

        Returns None when no gesture is active.
        """
        session = self._session
        if session is None:
            return None
        snapshot = session.snapshot
        update = compute_trim(
            session.mode,
            snapshot.trim_start,
            snapshot.trim_duration,
            snapshot.total_duration,
            session.delta_seconds(pointer_x),
            self.min_duration,
        )
        self._last_update = update
        return update

    def end(self) -> TrimUpdate | None:
        """Finish the gesture and return the committed pair.

        Returns None if the pointer never moved (nothing to commit).
        """
        update = self._last_update
        self._session = None
        self._last_update = None
        return update

    def cancel(self) -> CutWindow | None:
        """Abort the gesture and return the window as it was at pointer-down."""
        session = self._session
        self._session = None
        self._last_update = None
        return session.snapshot if session else None
