from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

import sqlalchemy as sa
from pydantic import BaseModel

from services.portfolio.app import tables
from services.portfolio.app.db import Database
from services.portfolio.app.errors import translate_store_errors
from services.portfolio.app.schemas import (
    Achievement,
    AchievementCreate,
    Education,
    EducationCreate,
    Inquiry,
    InquiryCreate,
    Project,
    ProjectCreate,
    Skill,
    SkillCreate,
)


CreateT = TypeVar("CreateT", bound=BaseModel)
RecordT = TypeVar("RecordT", bound=BaseModel)


@dataclass(frozen=True)
class EntityKind(Generic[CreateT, RecordT]):
    """Describes how one entity kind maps onto its table and schemas."""

    name: str
    table: sa.Table
    create_model: type[CreateT]
    record_model: type[RecordT]


PROJECT = EntityKind("project", tables.projects, ProjectCreate, Project)
SKILL = EntityKind("skill", tables.skills, SkillCreate, Skill)
EDUCATION = EntityKind("education", tables.education, EducationCreate, Education)
ACHIEVEMENT = EntityKind("achievement", tables.achievements, AchievementCreate, Achievement)
INQUIRY = EntityKind("inquiry", tables.inquiries, InquiryCreate, Inquiry)

ENTITY_KINDS: tuple[EntityKind[Any, Any], ...] = (PROJECT, SKILL, EDUCATION, ACHIEVEMENT, INQUIRY)


class Repository(Generic[CreateT, RecordT]):
    """Create/list access to one entity kind.

    Every call is a single round trip in its own session; nothing is cached.
    Store failures surface as ``StoreError`` subclasses.
    """

    def __init__(self, database: Database, kind: EntityKind[CreateT, RecordT]) -> None:
        self.database = database
        self.kind = kind

    def _to_record(self, row: Mapping[str, Any]) -> RecordT:
        return self.kind.record_model.model_validate(dict(row))

    async def list(self) -> list[RecordT]:
        table = self.kind.table
        with translate_store_errors(self.kind.name, "list"):
            async with self.database.session() as session:
                rows = (await session.execute(sa.select(table))).mappings().all()
        return [self._to_record(r) for r in rows]

    async def get(self, record_id: int) -> RecordT | None:
        table = self.kind.table
        with translate_store_errors(self.kind.name, "get"):
            async with self.database.session() as session:
                row = (await session.execute(sa.select(table).where(table.c.id == record_id))).mappings().first()
        return self._to_record(row) if row else None

    async def create(self, data: CreateT | Mapping[str, Any]) -> RecordT:
        if not isinstance(data, self.kind.create_model):
            data = self.kind.create_model.model_validate(data)
        table = self.kind.table
        q = sa.insert(table).values(**data.model_dump()).returning(*table.c)
        with translate_store_errors(self.kind.name, "create"):
            async with self.database.session() as session:
                row = (await session.execute(q)).mappings().one()
                await session.commit()
        return self._to_record(row)


class Storage:
    """One repository per entity kind over a shared database handle."""

    def __init__(self, database: Database) -> None:
        self.database = database
        self.projects: Repository[ProjectCreate, Project] = Repository(database, PROJECT)
        self.skills: Repository[SkillCreate, Skill] = Repository(database, SKILL)
        self.education: Repository[EducationCreate, Education] = Repository(database, EDUCATION)
        self.achievements: Repository[AchievementCreate, Achievement] = Repository(database, ACHIEVEMENT)
        self.inquiries: Repository[InquiryCreate, Inquiry] = Repository(database, INQUIRY)
        self._by_name: dict[str, Repository[Any, Any]] = {
            r.kind.name: r for r in (self.projects, self.skills, self.education, self.achievements, self.inquiries)
        }

    def repository(self, kind: EntityKind[CreateT, RecordT]) -> Repository[CreateT, RecordT]:
        return self._by_name[kind.name]
