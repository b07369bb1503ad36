"""Call-based backend: the standard library ``sqlite3`` module."""

import sqlite3
from pathlib import Path
from typing import TYPE_CHECKING, Any, ClassVar, Optional

from sqlite3_vec.adapters.sqlite.driver import SqliteConnection, SqliteDriver
from sqlite3_vec.config import MEMORY_DATABASE, BackendKind
from sqlite3_vec.core.parameters import classify_sql
from sqlite3_vec.driver import CallBasedStatement
from sqlite3_vec.utils.logging import get_logger

if TYPE_CHECKING:
    from sqlite3_vec.config import DatabaseConfig
    from sqlite3_vec.utils.logging import Diagnostics

__all__ = ("SqliteBackend",)

logger = get_logger("adapters.sqlite")

_SIDECAR_SUFFIXES = ("", "-wal", "-shm", "-journal")


class SqliteBackend:
    """Backend A: execute-and-fetch statements over ``sqlite3``.

    The connection runs in autocommit mode (``isolation_level=None``) so a
    ``run`` is durable as soon as it returns, matching the step-based backend.
    """

    __slots__ = ("_driver", "_storage_path", "config")
    kind: "ClassVar[BackendKind]" = BackendKind.SQLITE

    def __init__(self, config: "DatabaseConfig") -> None:
        self.config = config
        self._driver: Optional[SqliteDriver] = None
        self._storage_path: Optional[str] = None

    def __repr__(self) -> str:
        return f"{type(self).__name__}(database={self.config.database!r}, open={self.is_open!r})"

    @property
    def is_open(self) -> bool:
        return self._driver is not None

    @property
    def storage_path(self) -> Optional[str]:
        """File opened by this backend. None for in-memory databases and before ``open``."""
        return self._storage_path

    @property
    def driver(self) -> SqliteDriver:
        if self._driver is None:
            msg = "Database connection is not open"
            raise sqlite3.ProgrammingError(msg)
        return self._driver

    @property
    def extension_target(self) -> SqliteDriver:
        return self.driver

    @property
    def connection(self) -> SqliteConnection:
        return self.driver.connection

    async def open(self) -> None:
        if self._driver is not None:
            return
        params: dict[str, Any] = {"check_same_thread": False, **self.config.connection_config}
        params["isolation_level"] = None
        connection = sqlite3.connect(self.config.database or MEMORY_DATABASE, **params)
        self._driver = SqliteDriver(connection)
        if not self.config.is_memory and not self.config.database.startswith("file:"):
            self._storage_path = self.config.database
        logger.debug("Opened sqlite3 connection to %s", self.config.database)

    async def exec(self, sql: str) -> None:
        self.driver.exec(sql)

    async def pragma(self, text: str) -> "list[tuple[Any, ...]]":
        return self.driver.query(f"PRAGMA {text}")

    async def query_value(self, sql: str) -> Any:
        rows = self.driver.query(sql)
        return rows[0][0] if rows else None

    async def prepare(self, sql: str, diagnostics: "Diagnostics") -> CallBasedStatement:
        handle = self.driver.prepare(sql)
        return CallBasedStatement(handle, sql, classify_sql(sql), diagnostics)

    async def close(self) -> None:
        driver, self._driver = self._driver, None
        if driver is not None:
            driver.close()

    async def delete_storage(self) -> None:
        path = self.storage_path
        if path is None:
            return
        for suffix in _SIDECAR_SUFFIXES:
            Path(f"{path}{suffix}").unlink(missing_ok=True)
        self._storage_path = None
        logger.debug("Deleted database file %s", path)
