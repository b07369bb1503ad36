"""Call-based backend over the standard library ``sqlite3`` module."""

from sqlite3_vec.adapters.sqlite.backend import SqliteBackend
from sqlite3_vec.adapters.sqlite.driver import SqliteConnection, SqliteCursor, SqliteDriver, SqliteStatementHandle

__all__ = ("SqliteBackend", "SqliteConnection", "SqliteCursor", "SqliteDriver", "SqliteStatementHandle")
