"""Step-based backend: ``aiosqlite`` with optional directory-backed storage."""

import sqlite3
from typing import TYPE_CHECKING, Any, ClassVar, Optional

import aiosqlite

from sqlite3_vec.adapters.aiosqlite.driver import AiosqliteDriver
from sqlite3_vec.adapters.aiosqlite.pool import AiosqliteStoragePool, StoragePoolUnavailableError
from sqlite3_vec.config import MEMORY_DATABASE, BackendKind
from sqlite3_vec.core.parameters import classify_sql
from sqlite3_vec.driver import StepBasedStatement
from sqlite3_vec.utils.logging import get_logger

if TYPE_CHECKING:
    from sqlite3_vec.config import DatabaseConfig
    from sqlite3_vec.utils.logging import Diagnostics

__all__ = ("AiosqliteBackend",)

logger = get_logger("adapters.aiosqlite")


class AiosqliteBackend:
    """Backend B: explicit step-driven statements over ``aiosqlite``.

    With ``config.directory`` set, the database lives at
    ``<directory>/db.sqlite``. If that directory cannot be installed the
    backend logs a warning and opens an in-memory database instead.
    """

    __slots__ = ("_driver", "_storage_path", "config", "pool")
    kind: "ClassVar[BackendKind]" = BackendKind.AIOSQLITE

    def __init__(self, config: "DatabaseConfig") -> None:
        self.config = config
        self.pool = AiosqliteStoragePool(config.directory) if config.directory is not None else None
        self._driver: Optional[AiosqliteDriver] = None
        self._storage_path: Optional[str] = None

    def __repr__(self) -> str:
        return f"{type(self).__name__}(storage={self._storage_path!r}, open={self.is_open!r})"

    @property
    def is_open(self) -> bool:
        return self._driver is not None

    @property
    def storage_path(self) -> Optional[str]:
        return self._storage_path

    @property
    def driver(self) -> AiosqliteDriver:
        if self._driver is None:
            msg = "Database connection is not open"
            raise sqlite3.ProgrammingError(msg)
        return self._driver

    @property
    def extension_target(self) -> AiosqliteDriver:
        return self.driver

    def _install_storage(self) -> Optional[str]:
        if self.pool is None:
            return None
        try:
            self.pool.install()
        except StoragePoolUnavailableError as e:
            logger.warning("Persistent storage unavailable, falling back to in-memory database: %s", e)
            return None
        return self.pool.path_for()

    async def open(self) -> None:
        if self._driver is not None:
            return
        self._storage_path = self._install_storage()
        params: dict[str, Any] = {**self.config.connection_config, "isolation_level": None}
        connection = await aiosqlite.connect(self._storage_path or MEMORY_DATABASE, **params)
        self._driver = AiosqliteDriver(connection)
        logger.debug("Opened aiosqlite connection to %s", self._storage_path or MEMORY_DATABASE)

    async def exec(self, sql: str) -> None:
        await self.driver.exec(sql)

    async def pragma(self, text: str) -> "list[tuple[Any, ...]]":
        return await self.driver.query(f"PRAGMA {text}")

    async def query_value(self, sql: str) -> Any:
        rows = await self.driver.query(sql)
        return rows[0][0] if rows else None

    async def prepare(self, sql: str, diagnostics: "Diagnostics") -> StepBasedStatement:
        handle = await self.driver.prepare(sql)
        return StepBasedStatement(handle, sql, classify_sql(sql), diagnostics)

    async def close(self) -> None:
        driver, self._driver = self._driver, None
        if driver is not None:
            await driver.close()

    async def delete_storage(self) -> None:
        if self.pool is None or self._storage_path is None:
            return
        self.pool.unlink()
        self._storage_path = None
