from __future__ import annotations

import argparse
import asyncio
import json
import os
from collections.abc import Mapping
from typing import Any

from db.settings import SETTINGS
from services.portfolio.app.db import Database
from services.portfolio.app.logging import configure_logging, logger
from services.portfolio.app.observability import SEED_ROWS_INSERTED_TOTAL
from services.portfolio.app.repository import ACHIEVEMENT, EDUCATION, PROJECT, SKILL, EntityKind, Storage


GITHUB_URL = "https://github.com/srishtiprajapati22"

PROJECTS: list[dict[str, Any]] = [
    dict(
        title="TraceLens",
        description=(
            "Open-source OSINT image intelligence platform with metadata extraction, OCR, "
            "AI-generated image detection, perceptual hashing, and reverse image search."
        ),
        tech_stack=["Python", "JavaScript", "HTML", "CSS", "Docker"],
        category="AI/ML",
        link=GITHUB_URL,
        featured=True,
    ),
    dict(
        title="Vision-Based Drone Feed Analysis System",
        description=(
            "AI-powered drone surveillance system for intrusion detection and abnormal activity "
            "prediction using deep learning models."
        ),
        tech_stack=["Python", "OpenCV", "TensorFlow (Keras)", "Flask"],
        category="Computer Vision",
        link=GITHUB_URL,
        featured=True,
    ),
]

SKILLS: list[dict[str, Any]] = [
    {"name": "C", "category": "Languages", "proficiency": 90},
    {"name": "C++", "category": "Languages", "proficiency": 90},
    {"name": "Python", "category": "Languages", "proficiency": 95},
    {"name": "SQL", "category": "Languages", "proficiency": 85},
    {"name": "JavaScript", "category": "Languages", "proficiency": 80},
    {"name": "Flask", "category": "Frameworks", "proficiency": 85},
    {"name": "FastAPI", "category": "Frameworks", "proficiency": 80},
    {"name": "React (Basic)", "category": "Frameworks", "proficiency": 60},
    {"name": "OpenCV", "category": "Libraries", "proficiency": 90},
    {"name": "TensorFlow", "category": "Libraries", "proficiency": 85},
    {"name": "Pandas", "category": "Libraries", "proficiency": 90},
    {"name": "NumPy", "category": "Libraries", "proficiency": 90},
    {"name": "Git/GitHub", "category": "Tools", "proficiency": 90},
    {"name": "Docker", "category": "Tools", "proficiency": 80},
    {"name": "Google Cloud", "category": "Tools", "proficiency": 75},
    {"name": "VS Code", "category": "Tools", "proficiency": 95},
]

EDUCATION_RECORDS: list[dict[str, Any]] = [
    dict(
        degree="B.Tech in Computer Science",
        institution="Banasthali Vidyapith",
        year="2024–2028",
        grade="CGPA: 9.20/10",
    ),
]

ACHIEVEMENTS: list[dict[str, Any]] = [
    dict(title="Hack with Rajasthan", description="Ranked among Top 53 teams out of 250+ teams."),
    dict(title="Smart India Hackathon", description="Selected for internal rounds."),
    dict(title="Active Hackathon Participant", description="Continuously building solutions for real-world problems."),
]

# Seeding order is fixed: projects, skills, education, achievements.
SEED_PLAN: tuple[tuple[EntityKind[Any, Any], list[dict[str, Any]]], ...] = (
    (PROJECT, PROJECTS),
    (SKILL, SKILLS),
    (EDUCATION, EDUCATION_RECORDS),
    (ACHIEVEMENT, ACHIEVEMENTS),
)


async def seed_kind(storage: Storage, kind: EntityKind[Any, Any], records: list[Mapping[str, Any]]) -> int:
    """
    Insert `records` for `kind` only if the kind has no rows at all.

    The presence check is "any row exists", not a per-record upsert: a table holding
    even one unrelated row is left alone. Check-then-insert is not atomic, so two
    processes starting against an empty store at once can both insert.
    """
    repo = storage.repository(kind)
    existing = await repo.list()
    if existing:
        logger.info("seed_kind_skipped", kind=kind.name, existing=len(existing))
        return 0

    for record in records:
        await repo.create(record)
    SEED_ROWS_INSERTED_TOTAL.labels(kind.name).inc(len(records))
    logger.info("seed_kind_populated", kind=kind.name, inserted=len(records))
    return len(records)


async def seed(
    storage: Storage,
    plan: tuple[tuple[EntityKind[Any, Any], list[dict[str, Any]]], ...] = SEED_PLAN,
) -> dict[str, int]:
    # A StoreError stops the run where it happens; rows already written stay.
    inserted: dict[str, int] = {}
    for kind, records in plan:
        inserted[kind.name] = await seed_kind(storage, kind, records)
    logger.info("seed_finished", inserted=inserted)
    return inserted


async def _run(database_url: str) -> dict[str, int]:
    database = Database(database_url)
    await database.open()
    try:
        return await seed(Storage(database))
    finally:
        await database.close()


def main() -> None:
    parser = argparse.ArgumentParser(description="Load the baseline portfolio content into empty tables.")
    parser.add_argument("--database-url", default=os.getenv("DATABASE_URL") or SETTINGS.database_url)
    parser.add_argument("--log-level", default=os.getenv("LOG_LEVEL") or "info")
    args = parser.parse_args()
    configure_logging(args.log_level)
    inserted = asyncio.run(_run(args.database_url))
    print(json.dumps({"inserted": inserted}, indent=2))


if __name__ == "__main__":
    main()
