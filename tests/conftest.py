"""
Pytest fixtures for vibecut tests.

Everything runs in memory:
- FakeMediaBuffer stands in for a browser video element
- ScriptedRng replaces random draws with fixed fractions of each range
- The render service is faked with httpx.MockTransport in the render tests
"""

import pytest

from vibecut.config import Settings
from vibecut.exceptions import PlaybackRejectedError
from vibecut.schemas.style import StyleProfile
from vibecut.schemas.timeline import CutWindow
from vibecut.services.editor_session import EditorSession
from vibecut.services.playback_sequencer import PlaybackSequencer


class FakeMediaBuffer:
    """Records what the sequencer asks a video element to do."""

    def __init__(self, name: str, reject_play: bool = False):
        self.name = name
        self.src: str | None = None
        self.current_time = 0.0
        self.muted = False
        self.reject_play = reject_play
        self.loads: list[str] = []
        self.seeks: list[float] = []
        self.play_calls = 0
        self._ready = False
        self._paused = True

    @property
    def ready(self) -> bool:
        return self._ready

    @property
    def paused(self) -> bool:
        return self._paused

    def load(self, src: str) -> None:
        self.src = src
        self.current_time = 0.0
        self._ready = False
        self.loads.append(src)

    def finish_loading(self) -> None:
        self._ready = True

    def seek(self, time_s: float) -> None:
        self.current_time = time_s
        self.seeks.append(time_s)

    def play(self) -> None:
        self.play_calls += 1
        if self.reject_play or not self._ready:
            raise PlaybackRejectedError(f"{self.name} cannot play yet")
        self._paused = False

    def pause(self) -> None:
        self._paused = True

    def __repr__(self) -> str:
        return f"FakeMediaBuffer({self.name!r}, src={self.src!r})"


class ScriptedRng:
    """``uniform(a, b)`` returning ``a + (b - a) * f`` for scripted fractions ``f``."""

    def __init__(self, fractions: list[float]):
        self._fractions = list(fractions)
        self.calls: list[tuple[float, float]] = []

    def uniform(self, a: float, b: float) -> float:
        self.calls.append((a, b))
        if not self._fractions:
            raise AssertionError(f"Unexpected draw uniform({a}, {b})")
        return a + (b - a) * self._fractions.pop(0)


def make_window(
    url: str = "https://cdn.test/a.mp4",
    total: float = 10.0,
    start: float = 0.0,
    duration: float = 2.0,
    **extra,
) -> CutWindow:
    return CutWindow(
        source_url=url,
        total_duration=total,
        trim_start=start,
        trim_duration=duration,
        **extra,
    )


def finish_loads(sequencer: PlaybackSequencer, *buffers: FakeMediaBuffer) -> None:
    """Complete pending loads and notify the sequencer, like a loadeddata event."""
    for buffer in buffers:
        if not buffer.ready:
            buffer.finish_loading()
            sequencer.on_buffer_ready(buffer)


@pytest.fixture
def settings() -> Settings:
    """Settings isolated from the environment, with instant polling."""
    return Settings(
        _env_file=None,
        render_api_url="https://render.test/stage",
        render_api_key="test-key",
        render_poll_interval_s=0.0,
        render_max_polls=5,
        render_max_poll_errors=2,
    )


@pytest.fixture
def business_profile() -> StyleProfile:
    return StyleProfile(
        id="test-business",
        label="Test Business",
        category="business",
        min_cut_duration=1.0,
        max_cut_duration=2.0,
        transition="fade",
    )


@pytest.fixture
def personal_profile() -> StyleProfile:
    return StyleProfile(
        id="test-personal",
        label="Test Personal",
        category="personal",
        min_cut_duration=1.0,
        max_cut_duration=2.0,
        transition="cut",
    )


@pytest.fixture
def buffers() -> tuple[FakeMediaBuffer, FakeMediaBuffer]:
    return FakeMediaBuffer("player1"), FakeMediaBuffer("player2")


@pytest.fixture
def sequencer(buffers) -> PlaybackSequencer:
    return PlaybackSequencer(*buffers)


@pytest.fixture
def three_windows() -> list[CutWindow]:
    return [
        make_window("https://cdn.test/a.mp4", total=10.0, start=2.0, duration=3.0),
        make_window("https://cdn.test/b.mp4", total=8.0, start=0.0, duration=2.0),
        make_window("https://cdn.test/c.mp4", total=6.0, start=1.0, duration=2.0),
    ]


@pytest.fixture
def session(three_windows, sequencer, buffers, settings) -> EditorSession:
    editor = EditorSession(three_windows, sequencer, settings=settings)
    finish_loads(sequencer, *buffers)
    return editor
