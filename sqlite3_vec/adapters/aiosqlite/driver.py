"""Step-based shim over ``aiosqlite``.

``aiosqlite`` runs each ``sqlite3`` call on a worker thread. The statement
handle below drives a cursor through an explicit bind/step/reset/finalize
lifecycle so the unified statement can treat it like a native prepared
statement.
"""

import contextlib
import sqlite3
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Final, Optional, Union

import aiosqlite

from sqlite3_vec.core.parameters import bare_parameter_name, null_parameters
from sqlite3_vec.exceptions import UnsupportedCapabilityError

if TYPE_CHECKING:
    from sqlite3_vec.typing import RowData

__all__ = ("AiosqliteConnection", "AiosqliteDriver", "AiosqliteStepStatement")

AiosqliteConnection = aiosqlite.Connection

SQLITE_OK: Final[int] = 0
SQLITE_ERROR: Final[int] = 1
SQLITE_MISUSE: Final[int] = 21


def _to_step_parameters(parameters: "Mapping[Any, Any]") -> "Union[dict[Any, Any], tuple[Any, ...]]":
    """Convert a bind mapping into what ``sqlite3`` accepts.

    Integer keys are 1-based positions; gaps bind NULL.
    """
    if parameters and all(isinstance(key, int) for key in parameters):
        return tuple(parameters.get(index) for index in range(1, max(parameters) + 1))
    return {bare_parameter_name(key): value for key, value in parameters.items()}


class AiosqliteStepStatement:
    """Prepared statement with an explicit cursor lifecycle.

    The SQL runs on the first ``step`` after a ``reset``; ``changes`` and
    ``last_insert_rowid`` describe that execution.
    """

    __slots__ = (
        "_bound",
        "_cursor",
        "_done",
        "_finalized",
        "_row",
        "changes",
        "connection",
        "last_insert_rowid",
        "sql",
    )

    def __init__(self, connection: "AiosqliteConnection", sql: str) -> None:
        self.connection = connection
        self.sql = sql
        self.changes = 0
        self.last_insert_rowid: Optional[int] = None
        self._bound: Union[dict[Any, Any], tuple[Any, ...]] = ()
        self._cursor: Optional[aiosqlite.Cursor] = None
        self._row: Optional[RowData] = None
        self._done = False
        self._finalized = False

    def __repr__(self) -> str:
        return f"{type(self).__name__}(sql={self.sql!r}, finalized={self._finalized!r})"

    def _check_open(self) -> None:
        if self._finalized:
            msg = "Cannot operate on a finalized statement."
            raise sqlite3.ProgrammingError(msg)

    async def _close_cursor(self) -> None:
        cursor, self._cursor = self._cursor, None
        if cursor is not None:
            await cursor.close()

    async def bind(self, parameters: "Mapping[Any, Any]") -> None:
        self._check_open()
        await self._close_cursor()
        self._row = None
        self._done = False
        self._bound = _to_step_parameters(parameters)

    def clear_bindings(self) -> None:
        self._bound = ()

    async def step(self) -> bool:
        self._check_open()
        if self._done:
            return False
        if self._cursor is None:
            self._cursor = await self.connection.execute(self.sql, self._bound)
            self.changes = max(self._cursor.rowcount, 0)
            self.last_insert_rowid = self._cursor.lastrowid
        raw = await self._cursor.fetchone()
        if raw is None:
            self._row = None
            self._done = True
            return False
        columns = [column[0] for column in self._cursor.description or ()]
        self._row = dict(zip(columns, raw))
        return True

    def get(self) -> "Optional[RowData]":
        return self._row

    async def step_reset(self) -> bool:
        """Step once, then reset. Used to run statements for their side effects."""
        try:
            return await self.step()
        finally:
            await self.reset()

    async def reset(self) -> None:
        self._row = None
        self._done = False
        await self._close_cursor()

    async def finalize(self) -> int:
        if self._finalized:
            return SQLITE_MISUSE
        self._finalized = True
        self._bound = ()
        self._row = None
        try:
            await self._close_cursor()
        except sqlite3.Error:
            return SQLITE_ERROR
        return SQLITE_OK


class AiosqliteDriver:
    """Thin async connection shim exposing what the unified database needs."""

    __slots__ = ("connection",)

    def __init__(self, connection: "AiosqliteConnection") -> None:
        self.connection = connection

    async def exec(self, sql: str, bind: "Optional[Mapping[Any, Any]]" = None) -> None:
        """Execute ``sql``. With ``bind`` the text must be a single statement."""
        if bind is None:
            await self.connection.executescript(sql)
            return
        async with self.connection.execute(sql, _to_step_parameters(bind)):
            pass

    async def query(self, sql: str) -> "list[tuple[Any, ...]]":
        async with self.connection.execute(sql) as cursor:
            return list(await cursor.fetchall())

    async def compile_check(self, sql: str) -> None:
        """Compile ``sql`` through ``EXPLAIN`` without running it."""
        values = null_parameters(sql)
        stripped = sql.lstrip()
        if values is None or not stripped or stripped[:7].upper() == "EXPLAIN":
            return
        async with self.connection.execute(f"EXPLAIN {sql}", values):
            pass

    async def prepare(self, sql: str) -> AiosqliteStepStatement:
        await self.compile_check(sql)
        return AiosqliteStepStatement(self.connection, sql)

    async def load_extension_async(self, path: str, entrypoint: Optional[str] = None) -> None:
        """Load a loadable extension, optionally naming its entry point."""
        if not hasattr(sqlite3.Connection, "enable_load_extension"):
            msg = "This Python build's sqlite3 module was compiled without extension loading."
            raise UnsupportedCapabilityError(msg)
        await self.connection.enable_load_extension(True)
        try:
            if entrypoint is None:
                await self.connection.load_extension(path)
            else:
                async with self.connection.execute("SELECT load_extension(?, ?)", (path, entrypoint)):
                    pass
        finally:
            with contextlib.suppress(sqlite3.Error):
                await self.connection.enable_load_extension(False)

    async def close(self) -> None:
        await self.connection.close()
