from vibecut.schemas.envelope import ErrorInfo, ErrorLocation
from vibecut.schemas.project import ProjectRecord
from vibecut.schemas.render import RenderResult, RenderStatus
from vibecut.schemas.style import StyleEffect, StyleProfile
from vibecut.schemas.timeline import MIN_CLIP_DURATION, CutWindow, SourceClip, Timeline

__all__ = [
    "ErrorInfo",
    "ErrorLocation",
    "ProjectRecord",
    "RenderResult",
    "RenderStatus",
    "StyleEffect",
    "StyleProfile",
    "MIN_CLIP_DURATION",
    "CutWindow",
    "SourceClip",
    "Timeline",
]
