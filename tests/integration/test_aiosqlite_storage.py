"""Directory-backed storage for the step-based backend."""

import logging
from pathlib import Path

import pytest

from sqlite3_vec import BackendKind, Database, DatabaseConfig

pytestmark = [pytest.mark.anyio, pytest.mark.integration]


def _config(directory: Path) -> DatabaseConfig:
    return DatabaseConfig(backend=BackendKind.AIOSQLITE, directory=directory, load_extension=False)


async def test_data_survives_reopen(tmp_path: Path) -> None:
    directory = tmp_path / "store"
    async with Database(_config(directory)) as db:
        assert db.storage_path == str(directory / "db.sqlite")
        await db.exec("CREATE TABLE notes(body TEXT)")
        await (await db.prepare("INSERT INTO notes VALUES (?)")).run(["kept"])

    assert (directory / "db.sqlite").exists()
    async with Database(_config(directory)) as db:
        assert await (await db.prepare("SELECT body FROM notes")).all() == [{"body": "kept"}]


async def test_journal_mode_is_wal(tmp_path: Path) -> None:
    async with Database(_config(tmp_path / "wal")) as db:
        row = await (await db.prepare("PRAGMA journal_mode")).get()
    assert row == {"journal_mode": "wal"}


async def test_drop_deletes_database_file(tmp_path: Path) -> None:
    directory = tmp_path / "dropped"
    db = await Database(_config(directory)).open()
    await db.exec("CREATE TABLE t(a)")
    await db.drop()
    assert db.status() == "closed"
    assert not (directory / "db.sqlite").exists()
    assert not (directory / "db.sqlite-wal").exists()
    assert db.storage_path is None


async def test_unusable_directory_falls_back_to_memory(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    blocker = tmp_path / "not-a-directory"
    blocker.write_text("occupied")
    with caplog.at_level(logging.WARNING):
        db = await Database(_config(blocker)).open()
    try:
        assert db.status() == "open"
        assert db.storage_path is None
        await db.exec("CREATE TABLE t(a); INSERT INTO t VALUES (1)")
        assert await (await db.prepare("SELECT a FROM t")).get() == {"a": 1}
    finally:
        await db.close()
    assert "falling back to in-memory" in caplog.text
    assert blocker.read_text() == "occupied"
