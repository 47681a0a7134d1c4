"""Pydantic request/response schemas used by the API.

Schemas keep API input/output shapes stable and provide validation for
controller handlers and tests. Response models are built from the ORM
entities through their `from_entity` constructors.
"""

from datetime import datetime
from pydantic import BaseModel
from typing import Optional
from . import models


def _curriculum_id_of(project: models.Project) -> Optional[int]:
    if project.curriculum is not None:
        return project.curriculum.id
    return project.curriculum_id


class ProjectCreateRequest(BaseModel):
    """Payload for creating a project against a curriculum."""
    curriculum_id: int


class ProjectSaveRequest(BaseModel):
    """Payload for saving a project; `structure` is stored verbatim."""
    structure: str


class ProjectResponse(BaseModel):
    """Result of project creation."""
    id: int
    curriculum_id: Optional[int] = None

    @classmethod
    def from_entity(cls, project: models.Project) -> "ProjectResponse":
        return cls(id=project.id, curriculum_id=_curriculum_id_of(project))


class ProjectSummaryResponse(BaseModel):
    """Single entry of a member's project listing."""
    id: int
    curriculum_id: Optional[int] = None
    created_at: Optional[datetime] = None

    @classmethod
    def from_entity(cls, project: models.Project) -> "ProjectSummaryResponse":
        return cls(id=project.id, curriculum_id=_curriculum_id_of(project), created_at=project.created_at)


class ProjectHistoryResponse(BaseModel):
    """Result of saving a project snapshot."""
    id: int
    structure: str

    @classmethod
    def from_entity(cls, history: models.ProjectHistory) -> "ProjectHistoryResponse":
        return cls(id=history.id, structure=history.structure)


class ProjectHistorySummaryResponse(BaseModel):
    """Snapshot entry in a project's history listing (no payload)."""
    id: int
    created_at: Optional[datetime] = None

    @classmethod
    def from_entity(cls, history: models.ProjectHistory) -> "ProjectHistorySummaryResponse":
        return cls(id=history.id, created_at=history.created_at)


class ProjectHistoryDetailResponse(BaseModel):
    """Full snapshot including its structure payload."""
    id: int
    project_id: Optional[int] = None
    structure: str
    created_at: Optional[datetime] = None

    @classmethod
    def from_entity(cls, history: models.ProjectHistory) -> "ProjectHistoryDetailResponse":
        project_id = history.project.id if history.project is not None else history.project_id
        return cls(id=history.id, project_id=project_id, structure=history.structure, created_at=history.created_at)


class ErrorResponse(BaseModel):
    """Body returned for business errors."""
    status: int
    code: str
    message: str
