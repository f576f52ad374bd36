"""Editing session: the state behind the editor screen.

Each user control maps to one method here:
- trim track handles -> ``begin_trim`` / ``drag_trim`` / ``end_trim``
- undo / redo buttons -> ``undo`` / ``redo`` (``can_undo`` / ``can_redo``)
- per-clip controls -> ``select_clip``, ``toggle_mute``, ``delete_clip``, ``move_clip``
- play/pause -> ``toggle_play``
- export button -> ``export``

Every committed edit produces a new list of (frozen) windows and goes through
the history store, so undo always restores an exact prior timeline. Live drag
updates are kept in a draft and reach history once, when the gesture ends.
"""

import asyncio
import logging
from collections.abc import Callable

from vibecut.config import Settings, get_settings
from vibecut.exceptions import (
    InvalidSourceClipError,
    PersistenceError,
    RenderCancelledError,
    RenderError,
    RenderFailedError,
)
from vibecut.schemas.envelope import ErrorInfo
from vibecut.schemas.project import ProjectRecord, ProjectStatus
from vibecut.schemas.timeline import CutWindow, SourceClip
from vibecut.services.history import HistoryStore
from vibecut.services.playback_sequencer import PlaybackSequencer
from vibecut.services.project_store import InMemoryProjectStore, ProjectStore
from vibecut.services.render_export import RenderExporter
from vibecut.services.timeline_generator import TimelineGenerator, UniformSource
from vibecut.services.trim_editor import DragMode, TrimEditor

logger = logging.getLogger(__name__)

Notifier = Callable[[ErrorInfo], None]


def _log_notifier(info: ErrorInfo) -> None:
    logger.warning(f"[{info.code}] {info.message}")


class EditorSession:
    """Single-owner editing state for one project."""

    def __init__(
        self,
        windows: list[CutWindow],
        sequencer: PlaybackSequencer,
        *,
        project: ProjectRecord | None = None,
        store: ProjectStore | None = None,
        exporter: RenderExporter | None = None,
        notify: Notifier | None = None,
        settings: Settings | None = None,
    ) -> None:
        if not windows:
            raise ValueError("A timeline needs at least one window")
        self.settings = settings or get_settings()
        self.history: HistoryStore[list[CutWindow]] = HistoryStore(
            list(windows), max_depth=self.settings.history_depth
        )
        self.sequencer = sequencer
        self.trim = TrimEditor()
        self.project = project
        self.store = store
        self.exporter = exporter
        self.status: ProjectStatus = project.status if project else "draft"
        self._notify = notify or _log_notifier
        self._draft: list[CutWindow] | None = None
        self._closed = False
        self.sequencer.set_windows(self.history.present, active_index=0)

    # ------------------------------------------------------------------
    # Construction through the persistence boundary
    # ------------------------------------------------------------------

    @classmethod
    async def create(
        cls,
        clips: list[SourceClip],
        style_id: str,
        sequencer: PlaybackSequencer,
        *,
        store: ProjectStore,
        user_id: str | None = None,
        rng: UniformSource | None = None,
        **kwargs,
    ) -> "EditorSession":
        """Cut the uploaded clips with a style and save the new project."""
        settings = kwargs.get("settings") or get_settings()
        windows = TimelineGenerator(rng=rng, settings=settings).generate(
            clips, style_id
        )
        if not windows:
            raise InvalidSourceClipError("None of the uploaded clips is long enough to edit")

        project = ProjectRecord(
            id=InMemoryProjectStore.new_id(),
            user_id=user_id,
            style_id=style_id,
            status="draft",
            clips=windows,
        )
        await store.put(project)
        logger.info(f"Created project {project.id} with {len(windows)} windows")
        return cls(windows, sequencer, project=project, store=store, **kwargs)

    @classmethod
    async def load(
        cls,
        project_id: str,
        sequencer: PlaybackSequencer,
        *,
        store: ProjectStore,
        **kwargs,
    ) -> "EditorSession":
        """Open a saved project. History starts empty."""
        project = await store.get(project_id)
        if not project.clips:
            raise PersistenceError(f"Project {project_id} has no clips")
        return cls(project.clips, sequencer, project=project, store=store, **kwargs)

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def timeline(self) -> list[CutWindow]:
        """What the user currently sees (includes an in-progress drag)."""
        return list(self._draft if self._draft is not None else self.history.present)

    @property
    def active_index(self) -> int:
        return self.sequencer.cursor.active_index

    @property
    def active_window(self) -> CutWindow:
        return self.timeline[self.active_index]

    @property
    def can_undo(self) -> bool:
        return self.history.can_undo

    @property
    def can_redo(self) -> bool:
        return self.history.can_redo

    @property
    def is_playing(self) -> bool:
        return self.sequencer.cursor.is_playing_all

    @property
    def is_rendering(self) -> bool:
        return self.status == "rendering"

    # ------------------------------------------------------------------
    # Selection and playback
    # ------------------------------------------------------------------

    def select_clip(self, index: int) -> bool:
        if not 0 <= index < len(self.timeline):
            logger.debug(f"Ignoring selection of missing clip {index}")
            return False
        self.cancel_trim()
        self.sequencer.select(index)
        return True

    def toggle_play(self) -> bool:
        """Play/pause the whole timeline. Returns the new playing state."""
        if self._closed:
            return False
        return self.sequencer.toggle_play()

    def on_time_update(self, current_time: float, buffer=None) -> bool:
        return self.sequencer.on_time_update(current_time, buffer)

    # ------------------------------------------------------------------
    # Trimming
    # ------------------------------------------------------------------

    def begin_trim(self, mode: DragMode | str, pointer_x: float, track_width_px: float) -> None:
        """Pointer-down on a trim handle (or the window body for ``move``)."""
        self.sequencer.stop()
        self._draft = list(self.history.present)
        self.trim.begin(mode, pointer_x, self._draft[self.active_index], track_width_px)

    def drag_trim(self, pointer_x: float) -> CutWindow | None:
        """Pointer-move: apply the gesture's (start, duration) pair to the draft."""
        update = self.trim.move(pointer_x)
        if update is None or self._draft is None:
            return None
        index = self.active_index
        window = self._draft[index].with_trim(update.trim_start, update.trim_duration)
        self._draft[index] = window
        self.sequencer.set_windows(self._draft)
        self.sequencer.seek_active(window.trim_start)
        return window

    def end_trim(self) -> bool:
        """Pointer-up: commit the last emitted pair as one history entry."""
        update = self.trim.end()
        draft, self._draft = self._draft, None
        if update is None or draft is None or draft == self.history.present:
            self.sequencer.set_windows(self.history.present)
            return False
        self._commit(draft)
        return True

    def cancel_trim(self) -> None:
        """Abort an in-progress gesture without touching history."""
        if not self.trim.is_dragging and self._draft is None:
            return
        self.trim.cancel()
        self._draft = None
        self.sequencer.set_windows(self.history.present)

    def set_trim(self, trim_start: float, trim_duration: float) -> bool:
        """Set the active window's trim directly (numeric entry).

        Pairs that break a window invariant are rejected.
        """
        self.cancel_trim()
        current = self.history.present
        index = self.active_index
        try:
            window = current[index].with_trim(trim_start, trim_duration)
        except ValueError as e:
            logger.debug(f"Rejected trim ({trim_start}, {trim_duration}) on clip {index}: {e}")
            return False
        windows = list(current)
        windows[index] = window
        self._commit(windows)
        return True

    # ------------------------------------------------------------------
    # Per-clip edits
    # ------------------------------------------------------------------

    def toggle_mute(self, index: int) -> bool:
        self.cancel_trim()
        windows = list(self.history.present)
        if not 0 <= index < len(windows):
            logger.debug(f"Ignoring mute of missing clip {index}")
            return False
        windows[index] = windows[index].with_muted(not windows[index].muted)
        self._commit(windows)
        return True

    def delete_clip(self, index: int) -> bool:
        """Remove a window. The last remaining window can't be deleted."""
        self.cancel_trim()
        windows = list(self.history.present)
        if not 0 <= index < len(windows):
            logger.debug(f"Ignoring delete of missing clip {index}")
            return False
        if len(windows) == 1:
            logger.debug("Rejected delete of the only remaining clip")
            return False

        del windows[index]
        active = self.active_index
        if index <= active:
            active = max(0, active - 1)
        self._commit(windows, active_index=active)
        return True

    def move_clip(self, from_index: int, to_index: int) -> bool:
        """Reorder: take the window at ``from_index`` and insert it at ``to_index``."""
        self.cancel_trim()
        windows = list(self.history.present)
        count = len(windows)
        if not (0 <= from_index < count and 0 <= to_index < count) or from_index == to_index:
            logger.debug(f"Ignoring move {from_index} -> {to_index} of {count} clips")
            return False

        window = windows.pop(from_index)
        windows.insert(to_index, window)

        active = self.active_index
        if active == from_index:
            active = to_index
        elif from_index < active <= to_index:
            active -= 1
        elif to_index <= active < from_index:
            active += 1
        self._commit(windows, active_index=active)
        return True

    # ------------------------------------------------------------------
    # History
    # ------------------------------------------------------------------

    def undo(self) -> bool:
        self.cancel_trim()
        if not self.history.undo():
            return False
        self.sequencer.stop()
        self.sequencer.set_windows(self.history.present)
        return True

    def redo(self) -> bool:
        self.cancel_trim()
        if not self.history.redo():
            return False
        self.sequencer.stop()
        self.sequencer.set_windows(self.history.present)
        return True

    def _commit(self, windows: list[CutWindow], active_index: int | None = None) -> None:
        self.history.set(windows)
        self.sequencer.stop()
        self.sequencer.set_windows(self.history.present, active_index=active_index)

    # ------------------------------------------------------------------
    # Export
    # ------------------------------------------------------------------

    async def export(self) -> str | None:
        """Render the current timeline.

        Returns the output URL, or None when the export failed or was
        abandoned. Failures reach the user through one notification; the
        timeline and its history are left as they were so export can be retried.
        """
        if self.exporter is None:
            raise RuntimeError("No render exporter configured for this session")
        if self.is_rendering:
            logger.debug("Export already in progress")
            return None

        self.end_trim()
        windows = self.timeline
        self.status = "rendering"
        try:
            task = self.exporter.start(windows)
            result = await task
        except RenderError as e:
            self.status = "failed"
            logger.warning(f"Export failed: {e.message}")
            self._notify(e.to_error_info())
            return None
        except asyncio.CancelledError:
            self.status = "draft"
            if not task.cancelled():
                # The caller awaiting export() was cancelled, not the job
                self.exporter.cancel()
                raise
            if self._closed:
                logger.info("Export abandoned on close")
            else:
                self._notify(RenderCancelledError().to_error_info())
            return None
        except Exception:
            self.status = "failed"
            logger.exception("Export failed unexpectedly")
            self._notify(RenderFailedError("Export failed, try again").to_error_info())
            return None

        self.status = "done"
        await self._save_result(windows, result.url)
        return result.url

    def cancel_export(self) -> bool:
        """Stop waiting for a running render. The user is told once."""
        if self.exporter is None:
            return False
        return self.exporter.cancel()

    async def _save_result(self, windows: list[CutWindow], url: str) -> None:
        if self.project is None or self.store is None:
            return
        self.project = self.project.model_copy(
            update={"clips": windows, "status": "done", "final_video_url": url}
        )
        try:
            await self.store.put(self.project)
        except PersistenceError as e:
            logger.warning(f"Could not save export result for {self.project.id}: {e.message}")
            self._notify(e.to_error_info())

    # ------------------------------------------------------------------
    # Teardown
    # ------------------------------------------------------------------

    def close(self) -> None:
        """Stop playback and abandon any running export."""
        self._closed = True
        self.trim.cancel()
        self._draft = None
        self.sequencer.close()
        if self.exporter is not None:
            self.exporter.cancel()

    async def aclose(self) -> None:
        self.close()
        if self.exporter is not None:
            await self.exporter.close()
