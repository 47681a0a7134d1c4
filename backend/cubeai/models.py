"""SQLModel data models.

This module defines the application's database tables using SQLModel.
Each class maps to a table and uses relationships where appropriate.
Primary keys are assigned by the database on insert; an explicit `id`
may still be passed when building detached instances.
"""

from typing import Optional
from sqlalchemy import Column, DateTime, Text
from sqlalchemy.types import TypeDecorator
from sqlmodel import SQLModel, Field, Relationship
from datetime import datetime, timezone
from typing import List


class UTCDateTime(TypeDecorator):
    """Timezone-aware datetime stored as UTC.

    Backends without timezone support (SQLite) hand back naive values;
    those are read as UTC so the offset survives a round trip.
    """
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is not None and value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value

    def process_result_value(self, value, dialect):
        if value is not None and value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _created_at_field():
    return Field(default_factory=_utcnow, sa_column=Column(UTCDateTime(), nullable=False))


class Member(SQLModel, table=True):
    """A member signed in through an external OAuth provider.

    Fields:
    - `oauth_id`: identifier issued by the OAuth provider
    - `nickname`: display name
    - `profile_url`: avatar/profile image URL
    """
    id: Optional[int] = Field(default=None, primary_key=True)
    oauth_id: str = Field(index=True, nullable=False, unique=True)
    nickname: str
    profile_url: Optional[str] = None
    created_at: datetime = _created_at_field()
    projects: List['Project'] = Relationship(back_populates='member')


class Curriculum(SQLModel, table=True):
    """A learning curriculum a project can be built against."""
    id: Optional[int] = Field(default=None, primary_key=True)
    title: Optional[str] = None
    description: Optional[str] = None
    created_at: datetime = _created_at_field()


class Project(SQLModel, table=True):
    """A member's project, optionally tied to a `Curriculum`."""
    id: Optional[int] = Field(default=None, primary_key=True)
    member_id: int = Field(foreign_key='member.id', index=True)
    curriculum_id: Optional[int] = Field(default=None, foreign_key='curriculum.id')
    created_at: datetime = _created_at_field()
    member: Optional[Member] = Relationship(back_populates='projects')
    curriculum: Optional[Curriculum] = Relationship()
    histories: List['ProjectHistory'] = Relationship(back_populates='project')


class ProjectHistory(SQLModel, table=True):
    """An append-only snapshot of a project's structure.

    `structure` is stored verbatim (usually a serialized JSON graph) and
    is never parsed by the backend.
    """
    id: Optional[int] = Field(default=None, primary_key=True)
    project_id: int = Field(foreign_key='project.id', index=True)
    structure: str = Field(sa_column=Column(Text, nullable=False))
    created_at: datetime = _created_at_field()
    project: Optional[Project] = Relationship(back_populates='histories')
