import sqlite3
from collections.abc import Generator
from contextlib import contextmanager
from typing import Any, Optional

__all__ = (
    "DatabaseError",
    "ExtensionLoadError",
    "FinalizeError",
    "ImproperConfigurationError",
    "ParameterError",
    "ParameterStyleMismatchError",
    "Sqlite3VecError",
    "StatementFinalizedError",
    "UnsupportedCapabilityError",
    "wrap_database_errors",
)


class Sqlite3VecError(Exception):
    """Base exception class from which all sqlite3-vec exceptions inherit."""

    detail: str

    def __init__(self, *args: Any, detail: str = "") -> None:
        """Initialize ``Sqlite3VecError``.

        Args:
            *args: args are converted to :class:`str` before passing to :class:`Exception`
            detail: detail of the exception.
        """
        str_args = [str(arg) for arg in args if arg]
        if not detail:
            if str_args:
                detail, *str_args = str_args
            elif hasattr(self, "detail"):
                detail = self.detail
        self.detail = detail
        super().__init__(*str_args)

    def __repr__(self) -> str:
        if self.detail:
            return f"{self.__class__.__name__} - {self.detail}"
        return self.__class__.__name__

    def __str__(self) -> str:
        return " ".join((*self.args, self.detail)).strip()


class ImproperConfigurationError(Sqlite3VecError):
    """Improper Configuration error.

    Raised when a configuration value cannot be interpreted.
    """


class UnsupportedCapabilityError(Sqlite3VecError):
    """The connection exposes no extension-loading primitive."""

    def __init__(self, message: Optional[str] = None) -> None:
        if message is None:
            message = "Extension loading is not supported by this connection."
        super().__init__(message)


class ExtensionLoadError(Sqlite3VecError):
    """Every entry point attempted while loading an extension failed."""

    path: str

    def __init__(self, path: str, message: Optional[str] = None) -> None:
        self.path = path
        if message is None:
            message = "Failed to load sqlite-vec extension"
        super().__init__(detail=f"{message} from: {path}")


class FinalizeError(Sqlite3VecError):
    """The backend reported a failure releasing a prepared statement."""

    status: int

    def __init__(self, status: int, sql: Optional[str] = None) -> None:
        self.status = status
        detail_message = f"Error finalizing statement (status {status})"
        if sql:
            detail_message = f"{detail_message}\nSQL: {sql}"
        super().__init__(detail=detail_message)


class StatementFinalizedError(Sqlite3VecError):
    """A statement was used after it had been finalized."""

    def __init__(self, sql: Optional[str] = None) -> None:
        detail_message = "Statement has already been finalized"
        if sql:
            detail_message = f"{detail_message}\nSQL: {sql}"
        super().__init__(detail=detail_message)


class DatabaseError(Sqlite3VecError):
    """A backend database error, with the original error attached as ``__cause__``."""


class ParameterError(Sqlite3VecError):
    """Base class for parameter-related errors."""

    sql: Optional[str]

    def __init__(self, message: str, sql: Optional[str] = None) -> None:
        """Initialize with optional SQL context."""
        detail_message = message
        if sql:
            detail_message = f"{message}\nSQL: {sql}"
        super().__init__(detail=detail_message)
        self.sql = sql


class ParameterStyleMismatchError(ParameterError):
    """Error when the parameter container or placeholder styles are inconsistent.

    Raised for SQL text that mixes placeholder conventions when strict style
    checking is enabled, and for a mapping supplied to positional-only SQL
    (or a sequence supplied to named SQL).
    """

    def __init__(self, message: Optional[str] = None, sql: Optional[str] = None) -> None:
        if message is None:
            message = "Parameter style mismatch: SQL mixes named and positional placeholders."
        super().__init__(message, sql)


@contextmanager
def wrap_database_errors(operation: str, target: Optional[str] = None) -> Generator[None, None, None]:
    """Re-raise ``sqlite3.Error`` as ``DatabaseError`` naming ``operation`` and ``target``.

    ``aiosqlite`` re-exports the ``sqlite3`` hierarchy, so this covers both backends.
    """
    try:
        yield
    except sqlite3.Error as exc:
        location = f" ({target})" if target else ""
        msg = f"Failed to {operation}{location}: {exc}"
        raise DatabaseError(detail=msg) from exc
