"""Persistence boundary for projects.

The editing core only needs get/put by opaque project id. Production wires a
document-store adapter; ``InMemoryProjectStore`` serves tests and local runs.
Records cross the boundary in their stored (camelCase) shape.
"""

import logging
import uuid
from typing import Protocol

from pydantic import ValidationError

from vibecut.exceptions import PersistenceError, ProjectNotFoundError
from vibecut.schemas.project import ProjectRecord

logger = logging.getLogger(__name__)


class ProjectStore(Protocol):
    async def get(self, project_id: str) -> ProjectRecord: ...

    async def put(self, project: ProjectRecord) -> None: ...


class InMemoryProjectStore:
    """Dict-backed store keeping serialized documents, like a real backend would."""

    def __init__(self) -> None:
        self._documents: dict[str, dict] = {}

    @staticmethod
    def new_id() -> str:
        return uuid.uuid4().hex

    async def get(self, project_id: str) -> ProjectRecord:
        document = self._documents.get(project_id)
        if document is None:
            raise ProjectNotFoundError(project_id)
        try:
            return ProjectRecord.model_validate(document)
        except ValidationError as e:
            logger.error(f"Stored project {project_id} is invalid: {e}")
            raise PersistenceError(f"Project {project_id} could not be read")

    async def put(self, project: ProjectRecord) -> None:
        self._documents[project.id] = project.to_record()
        logger.debug(f"Saved project {project.id} ({len(project.clips)} clips, {project.status})")

    def raw(self, project_id: str) -> dict | None:
        """Stored document as-is (for inspection)."""
        return self._documents.get(project_id)
