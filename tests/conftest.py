from __future__ import annotations

import os
import sys
from pathlib import Path

import pytest


REPO_ROOT = Path(__file__).resolve().parents[1]

# Ensure the monorepo root is importable (so `import services.*` and `import db.*` work in tests).
sys.path.insert(0, str(REPO_ROOT))

# Settings are instantiated at import time; keep tests off any developer database.
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("SEED_ON_STARTUP", "false")


@pytest.fixture(scope="session")
def postgres_url() -> str:
    from tests.pg_support import asyncpg_url, start_postgres

    pg = start_postgres()
    try:
        yield asyncpg_url(pg.get_connection_url())
    finally:
        pg.stop()
