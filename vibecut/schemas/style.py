from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

StyleCategory = Literal["personal", "business"]
TransitionKind = Literal["fade", "cut", "zoom", "wipe"]
EffectKind = Literal["zoomIn", "zoomOut", "slideLeft", "slideRight"]


class StyleEffect(BaseModel):
    """Motion effect applied to every cut of a style."""

    model_config = ConfigDict(frozen=True)

    kind: EffectKind
    scale_in: float = 1.0
    scale_out: float = 1.0
    pan_x: float = 0.0


class StyleProfile(BaseModel):
    """A named "vibe" preset controlling cut pacing and transitions."""

    model_config = ConfigDict(frozen=True)

    id: str
    label: str
    emoji: str = ""
    description: str = ""
    category: StyleCategory
    min_cut_duration: float = Field(gt=0)
    max_cut_duration: float = Field(gt=0)
    transition: TransitionKind = "cut"
    effect: StyleEffect | None = None

    @model_validator(mode="after")
    def validate_range(self):
        if self.max_cut_duration < self.min_cut_duration:
            raise ValueError("max_cut_duration must be >= min_cut_duration")
        return self
