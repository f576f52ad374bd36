"""Gapless back-to-back playback of trimmed windows over two media buffers.

Two buffer slots take turns: the ``active`` slot is visible and playing the
current window while the ``idle`` slot sits paused, already loaded with the
next window and seeked to its trim start. When the active window reaches its
trim end during play-all, the roles swap and the freshly active slot can
start immediately.

The sequencer never decodes media; it drives anything implementing
``MediaBuffer`` (an HTML video element bridge, a headless player, a test
fake). All calls happen on the caller's single event loop thread.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Protocol

from vibecut.exceptions import PlaybackRejectedError
from vibecut.schemas.timeline import CutWindow

logger = logging.getLogger(__name__)


class MediaBuffer(Protocol):
    """Minimal surface of a playable media element."""

    src: str | None
    current_time: float
    muted: bool

    @property
    def ready(self) -> bool:
        """True once the current source has data at the playhead."""
        ...

    @property
    def paused(self) -> bool: ...

    def load(self, src: str) -> None: ...

    def seek(self, time_s: float) -> None: ...

    def play(self) -> None:
        """Start playback. May raise PlaybackRejectedError."""
        ...

    def pause(self) -> None: ...


class BufferRole(str, Enum):
    ACTIVE = "active"
    IDLE = "idle"


class PlaybackState(str, Enum):
    IDLE = "idle"  # paused, showing the current frame
    PLAYING = "playing"


@dataclass
class PlaybackCursor:
    active_index: int = 0
    is_playing_all: bool = False


class PlaybackSequencer:
    """Schedules windows onto two alternating buffers."""

    def __init__(self, first: MediaBuffer, second: MediaBuffer) -> None:
        self._slots: tuple[MediaBuffer, MediaBuffer] = (first, second)
        self._active_slot = 0
        self._windows: list[CutWindow] = []
        self.cursor = PlaybackCursor()
        self.state = PlaybackState.IDLE
        self.buffering = False
        self._pending_seeks: dict[int, float] = {}
        self._closed = False

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    def buffer(self, role: BufferRole) -> MediaBuffer:
        slot = self._active_slot if role is BufferRole.ACTIVE else 1 - self._active_slot
        return self._slots[slot]

    def role_of(self, buffer: MediaBuffer) -> BufferRole | None:
        for slot, candidate in enumerate(self._slots):
            if candidate is buffer:
                return BufferRole.ACTIVE if slot == self._active_slot else BufferRole.IDLE
        return None

    @property
    def windows(self) -> list[CutWindow]:
        return list(self._windows)

    @property
    def active_window(self) -> CutWindow | None:
        if not self._windows:
            return None
        return self._windows[self.cursor.active_index]

    @property
    def next_index(self) -> int:
        return (self.cursor.active_index + 1) % len(self._windows)

    @property
    def is_playing(self) -> bool:
        return self.state is PlaybackState.PLAYING

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def set_windows(self, windows: list[CutWindow], active_index: int | None = None) -> None:
        """Replace the timeline being played (after any edit) and re-cue buffers."""
        self._windows = list(windows)
        if not self._windows:
            self.stop()
            self.cursor.active_index = 0
            return
        previous = self.cursor.active_index
        index = self.cursor.active_index if active_index is None else active_index
        self.cursor.active_index = max(0, min(index, len(self._windows) - 1))
        self._sync(index_changed=self.cursor.active_index != previous)

    def select(self, index: int) -> None:
        """Show a specific window, paused. Cancels play-all."""
        if not 0 <= index < len(self._windows):
            logger.debug(f"Ignoring select of out-of-range index {index}")
            return
        self.stop()
        self.cursor.active_index = index
        self._sync(index_changed=True)

    def play_all(self) -> None:
        """Play every window in order, looping back to the first."""
        if not self._windows or self._closed:
            return
        self.cursor.is_playing_all = True
        self.state = PlaybackState.PLAYING
        self._sync()

    def play_preview(self) -> None:
        """Loop the active window on its own."""
        if not self._windows or self._closed:
            return
        self.cursor.is_playing_all = False
        self.state = PlaybackState.PLAYING
        self._sync()

    def toggle_play(self) -> bool:
        """Play-all toggle. Returns the new playing state."""
        if self.cursor.is_playing_all:
            self.stop()
            return False
        self.play_all()
        return self.is_playing

    def stop(self) -> None:
        """Pause both buffers and forget any pending resume."""
        self.state = PlaybackState.IDLE
        self.cursor.is_playing_all = False
        self._pending_seeks.clear()
        for buffer in self._slots:
            buffer.pause()

    def close(self) -> None:
        """Tear down: stop, and ignore any late buffer events."""
        self.stop()
        self._closed = True

    def seek_active(self, time_s: float) -> None:
        """Scrub the visible buffer, e.g. while a trim handle is dragged."""
        active = self.buffer(BufferRole.ACTIVE)
        if active.ready:
            active.seek(time_s)
        else:
            self._pending_seeks[self._active_slot] = time_s

    def refresh_audio(self) -> None:
        """Apply each cued window's mute flag to its buffer."""
        if not self._windows:
            return
        self.buffer(BufferRole.ACTIVE).muted = self._windows[self.cursor.active_index].muted
        self.buffer(BufferRole.IDLE).muted = self._windows[self.next_index].muted

    # ------------------------------------------------------------------
    # Media events
    # ------------------------------------------------------------------

    def on_time_update(self, current_time: float, buffer: MediaBuffer | None = None) -> bool:
        """Handle a playhead tick from the active buffer.

        Returns True when the tick advanced to the next window.
        """
        if self._closed or not self._windows:
            return False
        active = self.buffer(BufferRole.ACTIVE)
        if buffer is not None and buffer is not active:
            return False

        if current_time > 0 and not active.paused and active.ready:
            self.buffering = False

        window = self._windows[self.cursor.active_index]
        if current_time < window.trim_end:
            return False

        if self.cursor.is_playing_all:
            self._advance()
            return True

        # Single-window preview loops on itself
        active.seek(window.trim_start)
        if self.is_playing:
            self._try_play(active)
        return False

    def on_buffer_ready(self, buffer: MediaBuffer) -> None:
        """A buffer finished loading: apply its deferred seek and resume if needed."""
        if self._closed:
            return
        for slot, candidate in enumerate(self._slots):
            if candidate is not buffer:
                continue
            pending = self._pending_seeks.pop(slot, None)
            if pending is not None:
                buffer.seek(pending)
            if slot != self._active_slot:
                continue
            if self.is_playing:
                self._try_play(buffer)
            else:
                # Paused on a loaded frame, nothing left to wait for
                self.buffering = False

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _advance(self) -> None:
        self._swap_roles()
        self.cursor.active_index = (self.cursor.active_index + 1) % len(self._windows)
        self._sync(index_changed=True)

    def _swap_roles(self) -> None:
        self._active_slot = 1 - self._active_slot
        # The old active buffer must not keep playing underneath
        self.buffer(BufferRole.IDLE).pause()

    def _sync(self, index_changed: bool = False) -> None:
        """Cue the active buffer on the current window and the idle one on the next.

        A new active index always rewinds the active buffer to the window start;
        otherwise it keeps its playhead while that stays inside the window.
        """
        window = self._windows[self.cursor.active_index]
        active = self.buffer(BufferRole.ACTIVE)
        if self._cue(self._active_slot, window, rewind=index_changed) or not active.ready:
            self.buffering = True
        active.muted = window.muted
        if self.is_playing:
            self._try_play(active)
        else:
            active.pause()

        upcoming = self._windows[self.next_index]
        idle = self.buffer(BufferRole.IDLE)
        idle.pause()
        self._cue(1 - self._active_slot, upcoming, rewind=True)
        idle.muted = upcoming.muted

    def _cue(self, slot: int, window: CutWindow, rewind: bool = False) -> bool:
        """Load (if needed) and seek a slot to a window's start.

        With ``rewind`` the seek happens even if the playhead is already inside
        the window.

        Returns True if a new source had to be fetched.
        """
        buffer = self._slots[slot]
        reloaded = False
        if buffer.src != window.source_url:
            buffer.load(window.source_url)
            reloaded = True

        if reloaded or not buffer.ready:
            self._pending_seeks[slot] = window.trim_start
            if buffer.ready:
                buffer.seek(self._pending_seeks.pop(slot))
            return reloaded

        position = buffer.current_time
        if rewind or position < window.trim_start or position >= window.trim_end:
            buffer.seek(window.trim_start)
        return False

    def _try_play(self, buffer: MediaBuffer) -> None:
        try:
            buffer.play()
        except PlaybackRejectedError as e:
            # Retried implicitly on the next state-driven attempt
            logger.debug(f"Playback rejected: {e}")
