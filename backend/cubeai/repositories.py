"""Repository classes encapsulating database operations.

Each repository is small and focused on a single aggregate (members,
curricula, projects, project histories). Repositories return SQLModel
objects and perform commits/refreshes where appropriate.

The `*Store` protocols describe what the service layer needs from a
repository, so services can be wired with any object that satisfies
them (tests pass mocks).
"""

from typing import List, Optional, Protocol
from sqlmodel import Session, select
from . import models


class MemberStore(Protocol):
    def find_by_id(self, member_id: int) -> Optional[models.Member]: ...


class CurriculumStore(Protocol):
    def find_by_id(self, curriculum_id: int) -> Optional[models.Curriculum]: ...


class ProjectStore(Protocol):
    def find_by_id(self, project_id: int) -> Optional[models.Project]: ...

    def save(self, project: models.Project) -> models.Project: ...

    def find_all_by_member(self, member: models.Member) -> List[models.Project]: ...


class ProjectHistoryStore(Protocol):
    def find_by_id(self, project_history_id: int) -> Optional[models.ProjectHistory]: ...

    def save(self, history: models.ProjectHistory) -> models.ProjectHistory: ...

    def find_all_by_project(self, project: models.Project) -> List[models.ProjectHistory]: ...


class MemberRepository:
    """CRUD operations for `Member` objects."""
    def __init__(self, session: Session):
        self.session = session

    def create(self, member: models.Member) -> models.Member:
        """Persist a new member and return the managed instance."""
        self.session.add(member)
        self.session.commit()
        self.session.refresh(member)
        return member

    def find_by_id(self, member_id: int) -> Optional[models.Member]:
        """Get a `Member` by primary key or `None` if not found."""
        return self.session.get(models.Member, member_id)


class CurriculumRepository:
    """CRUD operations for `Curriculum` objects."""
    def __init__(self, session: Session):
        self.session = session

    def create(self, curriculum: models.Curriculum) -> models.Curriculum:
        self.session.add(curriculum)
        self.session.commit()
        self.session.refresh(curriculum)
        return curriculum

    def find_by_id(self, curriculum_id: int) -> Optional[models.Curriculum]:
        return self.session.get(models.Curriculum, curriculum_id)


class ProjectRepository:
    """Persist projects and query them by owner."""
    def __init__(self, session: Session):
        self.session = session

    def save(self, project: models.Project) -> models.Project:
        """Insert or update `project`; the returned instance carries its id."""
        self.session.add(project)
        self.session.commit()
        self.session.refresh(project)
        return project

    def find_by_id(self, project_id: int) -> Optional[models.Project]:
        """Fetch a project by id."""
        return self.session.get(models.Project, project_id)

    def find_all_by_member(self, member: models.Member) -> List[models.Project]:
        """Return every project owned by `member` in creation order."""
        stmt = select(models.Project).where(models.Project.member_id == member.id).order_by(models.Project.id)
        return self.session.exec(stmt).all()


class ProjectHistoryRepository:
    """Append-only storage for `ProjectHistory` snapshots."""
    def __init__(self, session: Session):
        self.session = session

    def save(self, history: models.ProjectHistory) -> models.ProjectHistory:
        """Store a new snapshot row and return it with its assigned id."""
        self.session.add(history)
        self.session.commit()
        self.session.refresh(history)
        return history

    def find_by_id(self, project_history_id: int) -> Optional[models.ProjectHistory]:
        return self.session.get(models.ProjectHistory, project_history_id)

    def find_all_by_project(self, project: models.Project) -> List[models.ProjectHistory]:
        """List snapshots for `project`, newest first.

        Rows written within the same clock tick are ordered by id so the
        latest insert still comes first.
        """
        stmt = (
            select(models.ProjectHistory)
            .where(models.ProjectHistory.project_id == project.id)
            .order_by(models.ProjectHistory.created_at.desc(), models.ProjectHistory.id.desc())
        )
        return self.session.exec(stmt).all()
