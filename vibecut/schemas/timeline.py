from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from vibecut.schemas.style import StyleEffect, TransitionKind

# Shortest window the editor will ever produce (seconds)
MIN_CLIP_DURATION = 0.5

# Float slack for boundary checks after drag arithmetic
TIME_EPSILON = 1e-6

# Legacy records without trim fields get a centred window of this length
LEGACY_WINDOW_S = 3.0
LEGACY_WINDOW_MIN_SOURCE_S = 5.0


class SourceClip(BaseModel):
    """An uploaded clip as reported by the upload boundary."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    url: str
    total_duration: float = Field(alias="duration", gt=0, allow_inf_nan=False)
    width: int | None = None
    height: int | None = None

    @property
    def is_vertical(self) -> bool:
        if not self.width or not self.height:
            return False
        return self.height > self.width


class CutWindow(BaseModel):
    """A selected sub-interval of a source clip.

    Field aliases match the stored project document
    (``url``, ``duration``, ``trimStart``, ``trimDuration``).
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    source_url: str = Field(alias="url")
    total_duration: float = Field(alias="duration", gt=0, allow_inf_nan=False)
    width: int | None = None
    height: int | None = None
    trim_start: float = Field(alias="trimStart", allow_inf_nan=False)
    trim_duration: float = Field(alias="trimDuration", allow_inf_nan=False)
    muted: bool = False
    transition: TransitionKind | None = None
    effect: StyleEffect | None = None

    @model_validator(mode="before")
    @classmethod
    def fill_legacy_trim(cls, data: Any) -> Any:
        """Older project documents only stored url + duration."""
        if not isinstance(data, dict):
            return data
        has_start = "trimStart" in data or "trim_start" in data
        has_duration = "trimDuration" in data or "trim_duration" in data
        if has_start and has_duration:
            return data
        total = data.get("duration", data.get("total_duration"))
        if not isinstance(total, (int, float)):
            return data

        data = dict(data)
        if total > LEGACY_WINDOW_MIN_SOURCE_S:
            legacy_start = total / 2 - LEGACY_WINDOW_S / 2
            legacy_duration = LEGACY_WINDOW_S
        else:
            legacy_start = 0.0
            legacy_duration = float(total)
        if not has_start:
            data["trimStart"] = legacy_start
        if not has_duration:
            data["trimDuration"] = legacy_duration
        return data

    @model_validator(mode="after")
    def validate_window(self):
        if self.trim_start < -TIME_EPSILON:
            raise ValueError(f"trim_start must be >= 0, got {self.trim_start}")
        if self.trim_duration < MIN_CLIP_DURATION - TIME_EPSILON:
            raise ValueError(
                f"trim_duration must be >= {MIN_CLIP_DURATION}, got {self.trim_duration}"
            )
        if self.trim_start + self.trim_duration > self.total_duration + TIME_EPSILON:
            raise ValueError(
                f"window {self.trim_start}+{self.trim_duration} exceeds source "
                f"duration {self.total_duration}"
            )
        return self

    @property
    def trim_end(self) -> float:
        return self.trim_start + self.trim_duration

    @property
    def is_vertical(self) -> bool:
        if not self.width or not self.height:
            return False
        return self.height > self.width

    @classmethod
    def from_source(
        cls,
        clip: SourceClip,
        trim_start: float,
        trim_duration: float,
        *,
        transition: TransitionKind | None = None,
        effect: StyleEffect | None = None,
    ) -> "CutWindow":
        return cls(
            source_url=clip.url,
            total_duration=clip.total_duration,
            width=clip.width,
            height=clip.height,
            trim_start=trim_start,
            trim_duration=trim_duration,
            transition=transition,
            effect=effect,
        )

    def with_trim(self, trim_start: float, trim_duration: float) -> "CutWindow":
        """Return a copy with a new (start, duration) pair, validated together."""
        data = self.model_dump()
        data.update(trim_start=trim_start, trim_duration=trim_duration)
        return CutWindow.model_validate(data)

    def with_muted(self, muted: bool) -> "CutWindow":
        return self.model_copy(update={"muted": muted})

    def to_record(self) -> dict[str, Any]:
        """Serialize with the document-store key names."""
        return self.model_dump(by_alias=True, exclude_none=True)


Timeline = list[CutWindow]


def timeline_duration(windows: list[CutWindow]) -> float:
    """Total playback length of a timeline in seconds."""
    return sum(w.trim_duration for w in windows)
