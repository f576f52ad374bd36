"""Render request assembly for the cloud rendering service.

Output frame is vertical (9:16). Track structure (top to bottom):
T1: Foreground - every window; vertical sources cover the frame, others are
    contained at full clarity
T2: Background - non-vertical sources only; same media scaled up, blurred and
    dimmed so the frame has no empty bars

Windows are laid back-to-back on one output axis: window i starts at the sum
of the lengths of windows 0..i-1.
"""

import logging
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any

from vibecut.config import Settings, get_settings
from vibecut.schemas.timeline import CutWindow

logger = logging.getLogger(__name__)

# Style transitions mapped to the render service's transition names
TRANSITIONS: dict[str, str | None] = {
    "fade": "fade",
    "wipe": "wipeLeft",
    "zoom": "zoom",
    "cut": None,
}


class TrackLayer(IntEnum):
    """Output tracks ordered from top to bottom."""

    FOREGROUND = 1
    BACKGROUND = 2


@dataclass
class TrackClip:
    """One clip placed on an output track."""

    layer: TrackLayer
    src: str
    trim: float
    start: float
    length: float
    fit: str = "cover"
    volume: float = 1.0
    scale: float | None = None
    opacity: float | None = None
    filter: str | None = None
    transition: str | None = None
    effect: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the render service clip shape."""
        data: dict[str, Any] = {
            "asset": {
                "type": "video",
                "src": self.src,
                "trim": self.trim,
                "volume": self.volume,
            },
            "start": self.start,
            "length": self.length,
            "fit": self.fit,
        }
        if self.scale is not None:
            data["scale"] = self.scale
        if self.opacity is not None:
            data["opacity"] = self.opacity
        if self.filter:
            data["filter"] = self.filter
        if self.transition:
            data["transition"] = {"in": self.transition, "out": self.transition}
        if self.effect:
            data["effect"] = self.effect
        return data


@dataclass
class RenderRequest:
    """Complete render job payload."""

    tracks: dict[TrackLayer, list[TrackClip]] = field(default_factory=dict)
    background: str = "#000000"
    output_format: str = "mp4"
    resolution: str = "sd"
    aspect_ratio: str = "9:16"

    @property
    def duration(self) -> float:
        return sum(c.length for c in self.tracks.get(TrackLayer.FOREGROUND, []))

    def to_dict(self) -> dict[str, Any]:
        ordered = sorted(self.tracks.items(), key=lambda item: item[0].value)
        return {
            "timeline": {
                "background": self.background,
                "tracks": [{"clips": [c.to_dict() for c in clips]} for _, clips in ordered if clips],
            },
            "output": {
                "format": self.output_format,
                "resolution": self.resolution,
                "aspectRatio": self.aspect_ratio,
            },
        }


def timeline_offsets(windows: list[CutWindow]) -> list[float]:
    """Output start time of each window: running sum of previous lengths."""
    offsets: list[float] = []
    cursor = 0.0
    for window in windows:
        offsets.append(cursor)
        cursor += window.trim_duration
    return offsets


class RenderRequestAssembler:
    """Builds render payloads from edited windows."""

    def __init__(self, settings: Settings | None = None):
        self.settings = settings or get_settings()

    def compose_window(self, window: CutWindow, start: float) -> list[TrackClip]:
        """Clips for one window: one for vertical sources, two otherwise."""
        volume = 0.0 if window.muted else 1.0
        transition = TRANSITIONS.get(window.transition) if window.transition else None
        effect = window.effect.kind if window.effect else None

        if window.is_vertical:
            return [
                TrackClip(
                    layer=TrackLayer.FOREGROUND,
                    src=window.source_url,
                    trim=window.trim_start,
                    start=start,
                    length=window.trim_duration,
                    fit="cover",
                    volume=volume,
                    transition=transition,
                    effect=effect,
                )
            ]

        foreground = TrackClip(
            layer=TrackLayer.FOREGROUND,
            src=window.source_url,
            trim=window.trim_start,
            start=start,
            length=window.trim_duration,
            fit="contain",
            volume=volume,
            transition=transition,
            effect=effect,
        )
        # Audio comes from the foreground only
        background = TrackClip(
            layer=TrackLayer.BACKGROUND,
            src=window.source_url,
            trim=window.trim_start,
            start=start,
            length=window.trim_duration,
            fit="cover",
            volume=0.0,
            scale=self.settings.background_scale,
            opacity=self.settings.background_opacity,
            filter="blur",
            transition=transition,
        )
        return [foreground, background]

    def assemble(self, windows: list[CutWindow]) -> RenderRequest:
        """Lay windows back-to-back and group their clips by track."""
        if not windows:
            raise ValueError("Cannot render an empty timeline")

        request = RenderRequest(
            background=self.settings.render_background,
            output_format=self.settings.render_output_format,
            resolution=self.settings.render_output_resolution,
            aspect_ratio=self.settings.render_aspect_ratio,
        )
        for window, start in zip(windows, timeline_offsets(windows)):
            for clip in self.compose_window(window, start):
                request.tracks.setdefault(clip.layer, []).append(clip)

        logger.debug(
            f"Assembled render request: {len(windows)} windows, "
            f"{len(request.tracks)} tracks, {request.duration:.2f}s"
        )
        return request
