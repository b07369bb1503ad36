"""Database configuration."""

import logging
import os
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Any, Final, Literal, Optional, TypedDict, Union

from typing_extensions import NotRequired

from sqlite3_vec.exceptions import ImproperConfigurationError
from sqlite3_vec.extension.locator import DEFAULT_EXTENSION_DIR
from sqlite3_vec.utils.logging import get_logger, log_with_context

if TYPE_CHECKING:
    from collections.abc import Mapping

__all__ = (
    "ENV_BACKEND",
    "ENV_DATABASE",
    "ENV_DEBUG",
    "ENV_DIRECTORY",
    "ENV_EXTENSION",
    "MEMORY_DATABASE",
    "BackendKind",
    "DatabaseConfig",
    "SqliteConnectionParams",
)

logger = get_logger("config")

MEMORY_DATABASE: Final[str] = ":memory:"
ENV_DEBUG: Final[str] = "SQLITE3_VEC_DEBUG"
ENV_EXTENSION: Final[str] = "SQLITE3_VEC_EXTENSION"
ENV_BACKEND: Final[str] = "SQLITE3_VEC_BACKEND"
ENV_DATABASE: Final[str] = "SQLITE3_VEC_DATABASE"
ENV_DIRECTORY: Final[str] = "SQLITE3_VEC_DIRECTORY"
_TRUTHY: Final = frozenset({"1", "true", "yes", "on"})


class BackendKind(str, Enum):
    """The closed set of backends a database can run on."""

    SQLITE = "sqlite"
    """Call-based: the standard library ``sqlite3`` binding."""
    AIOSQLITE = "aiosqlite"
    """Step-based: ``aiosqlite`` driven through an explicit cursor lifecycle."""

    def __str__(self) -> str:
        return self.value


class SqliteConnectionParams(TypedDict, total=False):
    """Extra parameters forwarded to ``sqlite3.connect`` / ``aiosqlite.connect``."""

    timeout: NotRequired[float]
    detect_types: NotRequired[int]
    cached_statements: NotRequired[int]
    uri: NotRequired[bool]


class DatabaseConfig:
    """Configuration for one unified database.

    ``load_extension`` takes an explicit path (failures to load it are fatal),
    ``False`` to disable loading, or ``None`` to auto-discover a binary
    (failures to load a discovered binary are logged and ignored).
    """

    __slots__ = (
        "backend",
        "connection_config",
        "database",
        "debug",
        "directory",
        "extension_dir",
        "load_extension",
        "strict_parameter_styles",
    )

    def __init__(
        self,
        *,
        backend: "Union[BackendKind, str]" = BackendKind.SQLITE,
        database: "Union[str, os.PathLike[str]]" = MEMORY_DATABASE,
        directory: "Union[str, os.PathLike[str], None]" = None,
        load_extension: "Union[str, os.PathLike[str], Literal[False], None]" = None,
        extension_dir: "Union[str, os.PathLike[str], None]" = None,
        debug: bool = False,
        strict_parameter_styles: bool = True,
        connection_config: "Optional[Union[SqliteConnectionParams, dict[str, Any]]]" = None,
    ) -> None:
        """Initialize the configuration.

        Args:
            backend: ``sqlite`` (call-based) or ``aiosqlite`` (step-based).
            database: Database file for the call-based backend, ``:memory:`` by default.
            directory: Persistent storage directory for the step-based backend; in-memory when omitted.
            load_extension: Explicit extension path, ``False`` to skip loading, ``None`` to auto-discover.
            extension_dir: Directory searched for prebuilt binaries (default ``<cwd>/dist/native``).
            debug: Emit diagnostic events for prepare/bind/exec.
            strict_parameter_styles: Reject SQL mixing placeholder styles at prepare time. When False,
                mixed SQL is prepared with the precedence winner and a warning is logged.
            connection_config: Extra connection parameters.

        Raises:
            ImproperConfigurationError: ``backend`` is not a known backend.
        """
        try:
            self.backend = BackendKind(backend)
        except ValueError as e:
            valid = ", ".join(kind.value for kind in BackendKind)
            msg = f"Unknown backend {backend!r}; expected one of: {valid}"
            raise ImproperConfigurationError(msg) from e
        self.database = os.fspath(database)
        self.directory = Path(directory) if directory is not None else None
        self.load_extension: Union[str, Literal[False], None] = (
            load_extension if load_extension is None or load_extension is False else os.fspath(load_extension)
        )
        self.extension_dir = Path(extension_dir) if extension_dir is not None else Path.cwd() / DEFAULT_EXTENSION_DIR
        self.debug = debug
        self.strict_parameter_styles = strict_parameter_styles
        self.connection_config: dict[str, Any] = dict(connection_config or {})

    def __repr__(self) -> str:
        parts = ", ".join(f"{name}={getattr(self, name)!r}" for name in self.__slots__)
        return f"{type(self).__name__}({parts})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, type(self)):
            return NotImplemented
        return all(getattr(self, name) == getattr(other, name) for name in self.__slots__)

    __hash__ = None  # type: ignore[assignment]

    @property
    def is_memory(self) -> bool:
        """True when the configured storage is in-memory."""
        if self.backend is BackendKind.AIOSQLITE:
            return self.directory is None
        return self.database == MEMORY_DATABASE or "mode=memory" in self.database

    @classmethod
    def from_env(cls, environ: "Optional[Mapping[str, str]]" = None, **overrides: Any) -> "DatabaseConfig":
        """Create a configuration from ``SQLITE3_VEC_*`` environment variables.

        Invalid values are logged and replaced by defaults. Keyword
        ``overrides`` win over the environment.
        """
        env = os.environ if environ is None else environ
        values: dict[str, Any] = {}

        raw_backend = env.get(ENV_BACKEND)
        if raw_backend:
            if raw_backend.lower() in {kind.value for kind in BackendKind}:
                values["backend"] = raw_backend.lower()
            else:
                log_with_context(
                    logger,
                    logging.WARNING,
                    "Ignoring invalid backend from environment",
                    key=ENV_BACKEND,
                    value=raw_backend,
                )
        if database := env.get(ENV_DATABASE):
            values["database"] = database
        if directory := env.get(ENV_DIRECTORY):
            values["directory"] = directory
        if extension := env.get(ENV_EXTENSION):
            values["load_extension"] = extension
        values["debug"] = env.get(ENV_DEBUG, "0").strip().lower() in _TRUTHY

        values.update(overrides)
        return cls(**values)
