from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from vibecut.schemas.timeline import CutWindow

ProjectStatus = Literal["draft", "rendering", "done", "failed"]


class ProjectRecord(BaseModel):
    """A project document as held by the persistence boundary."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    user_id: str | None = Field(default=None, alias="userId")
    style_id: str = Field(default="", alias="styleId")
    status: ProjectStatus = "draft"
    clips: list[CutWindow] = Field(default_factory=list)
    final_video_url: str | None = Field(default=None, alias="finalVideoUrl")

    def to_record(self) -> dict:
        data = self.model_dump(by_alias=True, exclude_none=True, exclude={"clips"})
        data["clips"] = [clip.to_record() for clip in self.clips]
        return data
