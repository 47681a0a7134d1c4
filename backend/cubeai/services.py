"""Business logic services used by HTTP controllers.

This module holds the project service, which coordinates the member,
curriculum, project and project-history repositories. The service is
intentionally thin: it resolves referenced entities (failing fast when
one is missing), builds the new aggregate and persists it through the
repositories, then maps the stored entity to a response schema.
"""

import logging
from typing import List
from sqlmodel import Session
from . import models, repositories
from .errors import EntityNotFoundError, ErrorCode
from .schemas import (
    ProjectCreateRequest,
    ProjectHistoryDetailResponse,
    ProjectHistoryResponse,
    ProjectHistorySummaryResponse,
    ProjectResponse,
    ProjectSaveRequest,
    ProjectSummaryResponse,
)

logger = logging.getLogger("cubeai.services")


class ProjectService:
    """Create projects, record structure snapshots and list them."""
    def __init__(
        self,
        project_repo: repositories.ProjectStore,
        history_repo: repositories.ProjectHistoryStore,
        member_repo: repositories.MemberStore,
        curriculum_repo: repositories.CurriculumStore,
    ):
        self.project_repo = project_repo
        self.history_repo = history_repo
        self.member_repo = member_repo
        self.curriculum_repo = curriculum_repo

    @classmethod
    def for_session(cls, session: Session) -> "ProjectService":
        """Build a service backed by the SQLModel repositories on `session`."""
        return cls(
            project_repo=repositories.ProjectRepository(session),
            history_repo=repositories.ProjectHistoryRepository(session),
            member_repo=repositories.MemberRepository(session),
            curriculum_repo=repositories.CurriculumRepository(session),
        )

    def create_project(self, member_id: int, request: ProjectCreateRequest) -> ProjectResponse:
        """Create a project owned by `member_id` for the requested curriculum.

        The returned id is the one assigned by the repository on save.
        """
        member = self._get_member(member_id)
        curriculum = self.curriculum_repo.find_by_id(request.curriculum_id)
        if curriculum is None:
            raise EntityNotFoundError(ErrorCode.CURRICULUM_NOT_FOUND)
        project = models.Project(
            member_id=member.id,
            curriculum_id=curriculum.id,
            member=member,
            curriculum=curriculum,
        )
        saved = self.project_repo.save(project)
        logger.info("project_created project_id=%s member_id=%s curriculum_id=%s", saved.id, member_id, curriculum.id)
        return ProjectResponse.from_entity(saved)

    def save_project(self, project_id: int, request: ProjectSaveRequest) -> ProjectHistoryResponse:
        """Append a new history snapshot carrying `request.structure` as-is."""
        project = self._get_project(project_id)
        history = models.ProjectHistory(project_id=project.id, project=project, structure=request.structure)
        saved = self.history_repo.save(history)
        logger.info("project_saved project_id=%s history_id=%s", project_id, saved.id)
        return ProjectHistoryResponse.from_entity(saved)

    def get_project_history(self, project_id: int) -> List[ProjectHistorySummaryResponse]:
        """Return every snapshot of the project, newest first.

        A project that was never saved yields an empty list.
        """
        project = self._get_project(project_id)
        return [ProjectHistorySummaryResponse.from_entity(h) for h in self.history_repo.find_all_by_project(project)]

    def get_project_history_detail(self, project_history_id: int) -> ProjectHistoryDetailResponse:
        """Return a single snapshot including its structure payload."""
        history = self.history_repo.find_by_id(project_history_id)
        if history is None:
            raise EntityNotFoundError(ErrorCode.PROJECT_HISTORY_NOT_FOUND)
        return ProjectHistoryDetailResponse.from_entity(history)

    def get_projects(self, member_id: int) -> List[ProjectSummaryResponse]:
        """List the member's projects in repository order."""
        member = self._get_member(member_id)
        return [ProjectSummaryResponse.from_entity(p) for p in self.project_repo.find_all_by_member(member)]

    def _get_member(self, member_id: int) -> models.Member:
        member = self.member_repo.find_by_id(member_id)
        if member is None:
            raise EntityNotFoundError(ErrorCode.MEMBER_NOT_FOUND)
        return member

    def _get_project(self, project_id: int) -> models.Project:
        project = self.project_repo.find_by_id(project_id)
        if project is None:
            raise EntityNotFoundError(ErrorCode.PROJECT_NOT_FOUND)
        return project
