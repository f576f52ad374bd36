from typing import Literal

from pydantic import BaseModel

# Statuses reported by the render service while a job is in flight
RenderJobState = Literal["queued", "fetching", "rendering", "saving", "done", "failed"]

TERMINAL_STATES: frozenset[str] = frozenset({"done", "failed"})


class RenderStatus(BaseModel):
    job_id: str
    status: RenderJobState
    url: str | None = None
    error: str | None = None

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATES


class RenderResult(BaseModel):
    job_id: str
    url: str
    polls: int = 0
