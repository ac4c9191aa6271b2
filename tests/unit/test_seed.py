from __future__ import annotations

import pytest
import sqlalchemy as sa

from db.seed import ACHIEVEMENTS, PROJECTS, SEED_PLAN, SKILLS, seed
from services.portfolio.app import tables
from services.portfolio.app.db import Database
from services.portfolio.app.errors import ConstraintViolation
from services.portfolio.app.repository import ACHIEVEMENT, EDUCATION, PROJECT, SKILL, Storage


async def _counts(storage: Storage) -> dict[str, int]:
    return {kind.name: len(await storage.repository(kind).list()) for kind, _ in SEED_PLAN}


def test_seed_plan_order_and_sizes() -> None:
    assert [kind.name for kind, _ in SEED_PLAN] == ["project", "skill", "education", "achievement"]
    assert [len(records) for _, records in SEED_PLAN] == [2, 16, 1, 3]


@pytest.mark.asyncio
async def test_seed_empty_store_inserts_literal_dataset(storage: Storage) -> None:
    inserted = await seed(storage)

    assert inserted == {"project": 2, "skill": 16, "education": 1, "achievement": 3}
    assert await _counts(storage) == inserted

    projects = await storage.projects.list()
    assert [p.title for p in projects] == ["TraceLens", "Vision-Based Drone Feed Analysis System"]
    assert all(p.featured for p in projects)
    assert projects[0].tech_stack == ["Python", "JavaScript", "HTML", "CSS", "Docker"]

    (edu,) = await storage.education.list()
    assert edu.degree == "B.Tech in Computer Science"
    assert edu.year == "2024–2028"

    skills = await storage.skills.list()
    assert [s.name for s in skills] == [s["name"] for s in SKILLS]
    assert all(0 <= s.proficiency <= 100 for s in skills)

    achievements = await storage.achievements.list()
    assert [a.title for a in achievements] == [a["title"] for a in ACHIEVEMENTS]


@pytest.mark.asyncio
async def test_seed_twice_is_idempotent(storage: Storage) -> None:
    await seed(storage)
    first = await _counts(storage)

    second_run = await seed(storage)

    assert second_run == {"project": 0, "skill": 0, "education": 0, "achievement": 0}
    assert await _counts(storage) == first


@pytest.mark.asyncio
async def test_existing_row_blocks_seeding_for_that_kind_only(storage: Storage) -> None:
    await storage.skills.create({"name": "Cobol", "category": "Languages", "proficiency": 5})

    inserted = await seed(storage)

    assert inserted["skill"] == 0
    skills = await storage.skills.list()
    assert [s.name for s in skills] == ["Cobol"]
    assert await _counts(storage) == {"project": 2, "skill": 1, "education": 1, "achievement": 3}


@pytest.mark.asyncio
async def test_prepopulated_projects_do_not_prevent_skill_seeding(storage: Storage) -> None:
    await storage.projects.create({"title": "Own project", "description": "d", "category": "misc"})

    inserted = await seed(storage)

    assert inserted == {"project": 0, "skill": 16, "education": 1, "achievement": 3}
    assert [p.title for p in await storage.projects.list()] == ["Own project"]


@pytest.mark.asyncio
async def test_seed_only_touches_seeded_kinds(storage: Storage) -> None:
    await seed(storage)

    assert await storage.inquiries.list() == []


@pytest.mark.asyncio
async def test_store_error_aborts_run_and_keeps_earlier_rows(storage: Storage, monkeypatch) -> None:
    calls = 0
    create_skill = storage.skills.create

    async def failing_create(data):
        nonlocal calls
        calls += 1
        if calls == 3:
            raise ConstraintViolation("create skill rejected by store", kind="skill", operation="create")
        return await create_skill(data)

    monkeypatch.setattr(storage.skills, "create", failing_create)

    with pytest.raises(ConstraintViolation):
        await seed(storage)

    # Projects finished, two skills landed before the failure, later kinds never ran.
    assert len(await storage.projects.list()) == len(PROJECTS)
    assert len(await storage.skills.list()) == 2
    assert await storage.education.list() == []
    assert await storage.achievements.list() == []


@pytest.mark.asyncio
async def test_custom_plan_is_seeded_in_given_order(storage: Storage) -> None:
    plan = (
        (ACHIEVEMENT, [{"title": "First", "description": "1"}, {"title": "Second", "description": "2"}]),
        (EDUCATION, []),
    )

    inserted = await seed(storage, plan)

    assert inserted == {"achievement": 2, "education": 0}
    assert [a.title for a in await storage.achievements.list()] == ["First", "Second"]
    assert await storage.projects.list() == []
    assert PROJECT.name not in inserted and SKILL.name not in inserted


@pytest.mark.asyncio
async def test_rows_written_outside_the_api_are_listed_and_block_seeding(
    database: Database, storage: Storage
) -> None:
    # Out-of-range proficiency and an empty title are valid rows, just not valid input.
    async with database.session() as session:
        await session.execute(sa.insert(tables.skills).values(name="Legacy", category="Other", proficiency=150))
        await session.execute(
            sa.insert(tables.projects).values(title="", description="d", tech_stack=[], category="misc")
        )
        await session.commit()

    inserted = await seed(storage)

    assert inserted["skill"] == 0
    assert inserted["project"] == 0
    (skill,) = await storage.skills.list()
    assert skill.proficiency == 150
    (project,) = await storage.projects.list()
    assert project.title == ""
    assert await storage.projects.get(project.id) == project
