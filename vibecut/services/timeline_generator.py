"""Timeline generation from raw clips and a style profile.

Each source clip yields one cut window whose length is drawn uniformly from
the profile's cut-duration range. Personal styles pick a random start when
the clip has headroom; business styles keep the opening framing. Long clips
("double-dip") yield a second window anchored at their midpoint.

The random source is injected so tests can script every draw. Draw order per
clip is: cut length, start offset (personal with headroom only), second
window length (long clips only).
"""

import logging
import random
from typing import Protocol

from vibecut.config import Settings, get_settings
from vibecut.constants.style_profiles import get_style_profile
from vibecut.schemas.style import StyleProfile
from vibecut.schemas.timeline import MIN_CLIP_DURATION, CutWindow, SourceClip

logger = logging.getLogger(__name__)


class UniformSource(Protocol):
    """Anything with ``uniform(a, b)``, e.g. ``random.Random``."""

    def uniform(self, a: float, b: float) -> float: ...


class TimelineGenerator:
    """Derives cut windows from source clips."""

    def __init__(self, rng: UniformSource | None = None, settings: Settings | None = None):
        self.rng = rng if rng is not None else random.Random()
        self.settings = settings or get_settings()

    def generate(self, clips: list[SourceClip], style: str | StyleProfile) -> list[CutWindow]:
        """Build the initial timeline.

        Args:
            clips: Source clips in upload order
            style: Style id (unknown ids fall back to the default profile) or a profile

        Returns:
            Cut windows in clip order, double-dip windows right after their parent
        """
        profile = style if isinstance(style, StyleProfile) else get_style_profile(style)
        windows: list[CutWindow] = []

        for clip in clips:
            if clip.total_duration < MIN_CLIP_DURATION:
                logger.warning(
                    f"Skipping {clip.url}: {clip.total_duration:.2f}s is shorter than "
                    f"the {MIN_CLIP_DURATION}s minimum window"
                )
                continue
            windows.extend(self._cut_clip(clip, profile))

        logger.info(
            f"Generated {len(windows)} windows from {len(clips)} clips with style {profile.id!r}"
        )
        return windows

    def _cut_clip(self, clip: SourceClip, profile: StyleProfile) -> list[CutWindow]:
        total = clip.total_duration
        target_length = self.rng.uniform(profile.min_cut_duration, profile.max_cut_duration)
        safe_length = min(target_length, total)

        start_time = 0.0
        if (
            profile.category == "personal"
            and total > safe_length + self.settings.personal_start_headroom_s
        ):
            # Uniform over the whole valid range, near-zero starts included
            start_time = self.rng.uniform(0, total - safe_length)

        primary = CutWindow.from_source(
            clip,
            start_time,
            safe_length,
            transition=profile.transition,
            effect=profile.effect,
        )
        windows = [primary]

        if total > self.settings.double_dip_threshold_s:
            second = self._double_dip(clip, profile, start_time)
            if second is not None:
                windows.append(second)
        return windows

    def _double_dip(
        self, clip: SourceClip, profile: StyleProfile, start_time: float
    ) -> CutWindow | None:
        """Second window from the back half of a long clip."""
        total = clip.total_duration
        middle_point = total / 2
        drawn_length = self.rng.uniform(profile.min_cut_duration, profile.max_cut_duration)

        start_from = min(middle_point + start_time, total)
        length = min(drawn_length, total - start_from)
        if length <= self.settings.double_dip_min_length_s:
            logger.debug(f"No room for a second window in {clip.url} (length {length:.2f}s)")
            return None

        return CutWindow.from_source(
            clip,
            start_from,
            length,
            transition=profile.transition,
            effect=profile.effect,
        )


def generate_timeline(
    clips: list[SourceClip],
    style: str | StyleProfile,
    rng: UniformSource | None = None,
    settings: Settings | None = None,
) -> list[CutWindow]:
    """Convenience wrapper around ``TimelineGenerator.generate``."""
    return TimelineGenerator(rng=rng, settings=settings).generate(clips, style)
