from __future__ import annotations

from collections.abc import AsyncGenerator
from pathlib import Path

import pytest

from sqlite3_vec import BackendKind, Database, DatabaseConfig


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture(params=[BackendKind.SQLITE, BackendKind.AIOSQLITE], ids=["sqlite", "aiosqlite"])
def backend_kind(request: pytest.FixtureRequest) -> BackendKind:
    return request.param  # type: ignore[no-any-return]


@pytest.fixture
def memory_config(backend_kind: BackendKind, tmp_path: Path) -> DatabaseConfig:
    """In-memory configuration that never tries to load the vector extension."""
    return DatabaseConfig(backend=backend_kind, load_extension=False, extension_dir=tmp_path / "native")


@pytest.fixture
async def database(memory_config: DatabaseConfig) -> AsyncGenerator[Database, None]:
    db = Database(memory_config)
    await db.open()
    try:
        yield db
    finally:
        await db.close()
