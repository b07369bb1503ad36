"""Directory-backed persistent storage for the step-based backend."""

import logging
import os
from pathlib import Path
from typing import Final, Optional, Union

from sqlite3_vec.exceptions import Sqlite3VecError
from sqlite3_vec.utils.logging import get_logger, log_with_context

__all__ = ("DEFAULT_DATABASE_NAME", "AiosqliteStoragePool", "StoragePoolUnavailableError")

logger = get_logger("adapters.aiosqlite.pool")

_ADAPTER_NAME = "aiosqlite"
DEFAULT_DATABASE_NAME: Final[str] = "db.sqlite"
_SIDECAR_SUFFIXES: Final = ("", "-wal", "-shm", "-journal")


class StoragePoolUnavailableError(Sqlite3VecError):
    """The storage directory could not be created or is not writable."""


class AiosqliteStoragePool:
    """Owns the directory holding the step-based backend's database files.

    ``install`` must succeed before ``path_for`` returns anything; a backend
    that cannot install its pool runs in memory instead.
    """

    __slots__ = ("_installed", "directory")

    def __init__(self, directory: "Union[str, os.PathLike[str]]") -> None:
        self.directory = Path(directory)
        self._installed = False

    def __repr__(self) -> str:
        return f"{type(self).__name__}(directory={str(self.directory)!r}, installed={self._installed!r})"

    @property
    def is_installed(self) -> bool:
        return self._installed

    def install(self) -> Path:
        """Create the storage directory and check that it is writable.

        Raises:
            StoragePoolUnavailableError: The directory cannot be used.
        """
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            msg = f"Cannot create storage directory {self.directory}: {e}"
            raise StoragePoolUnavailableError(msg) from e
        if not os.access(self.directory, os.W_OK):
            msg = f"Storage directory {self.directory} is not writable"
            raise StoragePoolUnavailableError(msg)
        self._installed = True
        log_with_context(
            logger, logging.DEBUG, "pool.install", adapter=_ADAPTER_NAME, directory=str(self.directory)
        )
        return self.directory

    def path_for(self, name: str = DEFAULT_DATABASE_NAME) -> Optional[str]:
        """Return the file path for ``name`` inside the pool, or None before ``install``."""
        if not self._installed:
            return None
        return str(self.directory / name)

    def unlink(self, name: str = DEFAULT_DATABASE_NAME) -> None:
        """Delete ``name`` and its journal sidecar files."""
        for suffix in _SIDECAR_SUFFIXES:
            (self.directory / f"{name}{suffix}").unlink(missing_ok=True)
        log_with_context(logger, logging.DEBUG, "pool.unlink", adapter=_ADAPTER_NAME, name=name)
