"""Call-based shim over the standard library ``sqlite3`` binding."""

import contextlib
import sqlite3
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Final, Optional, Union

from sqlite3_vec.core.parameters import bare_parameter_name, null_parameters
from sqlite3_vec.core.result import RunResult
from sqlite3_vec.exceptions import UnsupportedCapabilityError

if TYPE_CHECKING:
    from collections.abc import Sequence

    from sqlite3_vec.typing import RowData

__all__ = ("SQLITE_MISUSE", "SQLITE_OK", "SqliteConnection", "SqliteCursor", "SqliteDriver", "SqliteStatementHandle")

SqliteConnection = sqlite3.Connection

SQLITE_OK: Final[int] = 0
SQLITE_MISUSE: Final[int] = 21


class SqliteCursor:
    """Context manager for SQLite cursor management."""

    __slots__ = ("connection", "cursor")

    def __init__(self, connection: "SqliteConnection") -> None:
        self.connection = connection
        self.cursor: Optional[sqlite3.Cursor] = None

    def __enter__(self) -> "sqlite3.Cursor":
        self.cursor = self.connection.cursor()
        return self.cursor

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        if self.cursor is not None:
            with contextlib.suppress(Exception):
                self.cursor.close()


def _row_to_dict(cursor: "sqlite3.Cursor", row: "Optional[tuple[Any, ...]]") -> "Optional[RowData]":
    if row is None:
        return None
    columns = [column[0] for column in cursor.description or ()]
    return dict(zip(columns, row))


def _to_driver_parameters(parameters: Any) -> "Union[dict[Any, Any], tuple[Any, ...]]":
    if isinstance(parameters, Mapping):
        return {bare_parameter_name(key): value for key, value in parameters.items()}
    return tuple(parameters or ())


class SqliteStatementHandle:
    """Prepared statement that executes and fetches in a single call.

    The ``sqlite3`` module caches compiled statements per connection, so a
    handle only has to remember its SQL text and the values last bound.
    """

    __slots__ = ("_bound", "_finalized", "connection", "sql")

    def __init__(self, connection: "SqliteConnection", sql: str) -> None:
        self.connection = connection
        self.sql = sql
        self._bound: Union[dict[Any, Any], tuple[Any, ...]] = ()
        self._finalized = False

    def __repr__(self) -> str:
        return f"{type(self).__name__}(sql={self.sql!r})"

    def _parameters(self, args: "tuple[Any, ...]") -> "Union[dict[Any, Any], tuple[Any, ...]]":
        if not args:
            return self._bound
        if len(args) == 1 and isinstance(args[0], Mapping):
            return _to_driver_parameters(args[0])
        return tuple(args)

    def bind(self, parameters: "Union[Mapping[Any, Any], Sequence[Any]]") -> "SqliteStatementHandle":
        self._bound = _to_driver_parameters(parameters)
        return self

    def run(self, *args: Any) -> RunResult:
        with SqliteCursor(self.connection) as cursor:
            cursor.execute(self.sql, self._parameters(args))
            return RunResult(max(cursor.rowcount, 0), cursor.lastrowid)

    def get(self, *args: Any) -> "Optional[RowData]":
        with SqliteCursor(self.connection) as cursor:
            cursor.execute(self.sql, self._parameters(args))
            return _row_to_dict(cursor, cursor.fetchone())

    def all(self, *args: Any) -> "list[RowData]":
        with SqliteCursor(self.connection) as cursor:
            cursor.execute(self.sql, self._parameters(args))
            columns = [column[0] for column in cursor.description or ()]
            return [dict(zip(columns, row)) for row in cursor.fetchall()]

    def finalize(self) -> int:
        if self._finalized:
            return SQLITE_MISUSE
        self._finalized = True
        self._bound = ()
        return SQLITE_OK


class SqliteDriver:
    """Thin connection shim exposing what the unified database needs."""

    __slots__ = ("connection",)

    def __init__(self, connection: "SqliteConnection") -> None:
        self.connection = connection

    def exec(self, sql: str) -> None:
        """Execute one or more statements with no parameters."""
        self.connection.executescript(sql)

    def query(self, sql: str) -> "list[tuple[Any, ...]]":
        with SqliteCursor(self.connection) as cursor:
            cursor.execute(sql)
            return cursor.fetchall()

    def compile_check(self, sql: str) -> None:
        """Compile ``sql`` without running it.

        ``EXPLAIN`` forces SQLite to prepare the statement, which surfaces
        syntax errors and missing tables the way a native prepare would.
        """
        values = null_parameters(sql)
        stripped = sql.lstrip()
        if values is None or not stripped or stripped[:7].upper() == "EXPLAIN":
            return
        with SqliteCursor(self.connection) as cursor:
            cursor.execute(f"EXPLAIN {sql}", values)

    def prepare(self, sql: str) -> SqliteStatementHandle:
        self.compile_check(sql)
        return SqliteStatementHandle(self.connection, sql)

    def load_extension(self, path: str, entrypoint: Optional[str] = None) -> None:
        """Load a loadable extension, optionally naming its entry point."""
        if not hasattr(self.connection, "enable_load_extension"):
            msg = "This Python build's sqlite3 module was compiled without extension loading."
            raise UnsupportedCapabilityError(msg)
        self.connection.enable_load_extension(True)
        try:
            if entrypoint is None:
                self.connection.load_extension(path)
            else:
                with SqliteCursor(self.connection) as cursor:
                    cursor.execute("SELECT load_extension(?, ?)", (path, entrypoint))
        finally:
            self.connection.enable_load_extension(False)

    def close(self) -> None:
        self.connection.close()
