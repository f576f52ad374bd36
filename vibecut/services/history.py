"""Bounded undo/redo history over an arbitrary state value.

States are stored as given; callers hand in fresh values (the editor builds a
new list of frozen windows on every edit) so stored snapshots never alias
live, mutable state.
"""

from collections import deque
from collections.abc import Callable
from typing import Generic, TypeVar

T = TypeVar("T")

DEFAULT_HISTORY_DEPTH = 20


class HistoryStore(Generic[T]):
    """``past`` / ``present`` / ``future`` with a capped ``past``."""

    def __init__(self, initial: T, max_depth: int = DEFAULT_HISTORY_DEPTH) -> None:
        if max_depth < 1:
            raise ValueError("max_depth must be >= 1")
        self.max_depth = max_depth
        self._present = initial
        # deque(maxlen) drops the oldest entry on overflow
        self._past: deque[T] = deque(maxlen=max_depth)
        self._future: deque[T] = deque()

    @property
    def present(self) -> T:
        return self._present

    @property
    def past(self) -> tuple[T, ...]:
        return tuple(self._past)

    @property
    def future(self) -> tuple[T, ...]:
        return tuple(self._future)

    @property
    def can_undo(self) -> bool:
        return len(self._past) > 0

    @property
    def can_redo(self) -> bool:
        return len(self._future) > 0

    def set(self, new_state: T | Callable[[T], T]) -> T:
        """Record a new present. Accepts a value or an updater ``f(present)``."""
        if callable(new_state):
            new_state = new_state(self._present)
        self._past.append(self._present)
        self._future.clear()
        self._present = new_state
        return self._present

    def undo(self) -> bool:
        """Step back one state. Returns False when there is nothing to undo."""
        if not self._past:
            return False
        self._future.appendleft(self._present)
        self._present = self._past.pop()
        return True

    def redo(self) -> bool:
        """Step forward one state. Returns False when there is nothing to redo."""
        if not self._future:
            return False
        self._past.append(self._present)
        self._present = self._future.popleft()
        return True

    def reset(self, state: T) -> None:
        """Replace the present and drop all history (e.g. after loading a project)."""
        self._present = state
        self._past.clear()
        self._future.clear()
