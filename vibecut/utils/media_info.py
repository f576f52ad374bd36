"""Source clip metadata from probe output.

The upload boundary runs the probe (ffprobe JSON shape); this module only
interprets what it reports. A clip whose duration cannot be established is
rejected before any cut window is derived from it.
"""

import math
from typing import Any

from pydantic import ValidationError

from vibecut.exceptions import InvalidSourceClipError, MediaProbeError
from vibecut.schemas.timeline import SourceClip


def _first_video_stream(probe: dict[str, Any]) -> dict[str, Any]:
    for stream in probe.get("streams") or []:
        if stream.get("codec_type", "video") == "video":
            return stream
    return {}


def _parse_duration(value: Any) -> float | None:
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def source_clip_from_probe(url: str, probe: dict[str, Any]) -> SourceClip:
    """
    Build a SourceClip from probe output.

    Args:
        url: Content reference of the uploaded file
        probe: Parsed probe JSON with ``format`` and ``streams``

    Returns:
        SourceClip with duration and, when known, dimensions

    Raises:
        MediaProbeError: If no usable finite, positive duration is present
    """
    stream = _first_video_stream(probe)

    duration = _parse_duration((probe.get("format") or {}).get("duration"))
    if duration is None:
        duration = _parse_duration(stream.get("duration"))
    if duration is None:
        raise MediaProbeError(url, "duration not found")
    if not math.isfinite(duration):
        raise MediaProbeError(url, f"duration must be finite, got {duration}")
    if duration <= 0:
        raise MediaProbeError(url, f"duration must be positive, got {duration}")

    width = stream.get("width") or None
    height = stream.get("height") or None
    return SourceClip(url=url, total_duration=duration, width=width, height=height)


def source_clip_from_upload(
    url: str,
    duration: Any,
    width: int | None = None,
    height: int | None = None,
) -> SourceClip:
    """
    Validate metadata already extracted by the browser upload flow.

    Raises:
        InvalidSourceClipError: If a reported value is missing or out of range;
            the error names the offending field
    """
    try:
        return SourceClip(url=url, total_duration=duration, width=width, height=height)
    except ValidationError as e:
        error = e.errors()[0]
        loc = error.get("loc") or ()
        field = str(loc[0]) if loc else "duration"
        if field == "total_duration":
            field = "duration"
        raise InvalidSourceClipError(
            f"Invalid metadata for {url}: {error['msg']}", field=field
        ) from e
