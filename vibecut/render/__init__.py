from vibecut.render.request_assembler import (
    RenderRequest,
    RenderRequestAssembler,
    TrackClip,
    TrackLayer,
    timeline_offsets,
)

__all__ = [
    "RenderRequest",
    "RenderRequestAssembler",
    "TrackClip",
    "TrackLayer",
    "timeline_offsets",
]
