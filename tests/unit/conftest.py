from __future__ import annotations

import pytest_asyncio

from services.portfolio.app.db import Database
from services.portfolio.app.repository import Storage


@pytest_asyncio.fixture()
async def database():
    db = Database("sqlite+aiosqlite://")
    await db.open()
    yield db
    await db.close()


@pytest_asyncio.fixture()
async def storage(database: Database) -> Storage:
    return Storage(database)
