"""Step-based backend over ``aiosqlite``."""

from sqlite3_vec.adapters.aiosqlite.backend import AiosqliteBackend
from sqlite3_vec.adapters.aiosqlite.driver import AiosqliteConnection, AiosqliteDriver, AiosqliteStepStatement
from sqlite3_vec.adapters.aiosqlite.pool import AiosqliteStoragePool, StoragePoolUnavailableError

__all__ = (
    "AiosqliteBackend",
    "AiosqliteConnection",
    "AiosqliteDriver",
    "AiosqliteStepStatement",
    "AiosqliteStoragePool",
    "StoragePoolUnavailableError",
)
