"""Unified database façade.

One ``Database`` owns one backend connection and a cache of prepared
statements keyed by caller-chosen identifiers. Backends are selected once,
from ``DatabaseConfig.backend``, when the façade is created.
"""

from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Optional

from sqlite3_vec.adapters.aiosqlite import AiosqliteBackend
from sqlite3_vec.adapters.sqlite import SqliteBackend
from sqlite3_vec.config import BackendKind, DatabaseConfig
from sqlite3_vec.core.parameters import classify_sql
from sqlite3_vec.core.result import VersionInfo
from sqlite3_vec.exceptions import ParameterStyleMismatchError, wrap_database_errors
from sqlite3_vec.extension.loader import load_extension
from sqlite3_vec.extension.locator import resolve_native_extension_path
from sqlite3_vec.utils.attempt import FallbackPolicy, attempt_async
from sqlite3_vec.utils.logging import Diagnostics, get_logger

if TYPE_CHECKING:
    from types import TracebackType

    from sqlite3_vec.driver import Statement
    from sqlite3_vec.protocols import BackendProtocol
    from sqlite3_vec.typing import Status

__all__ = ("Database", "create_database", "open_database")

logger = get_logger("database")

_BACKENDS: "dict[BackendKind, type[Any]]" = {
    BackendKind.SQLITE: SqliteBackend,
    BackendKind.AIOSQLITE: AiosqliteBackend,
}

_OPEN_PRAGMAS = ("journal_mode = WAL", "foreign_keys = ON")


class Database:
    """Connection lifecycle plus a statement cache over one backend.

    Lifecycle is ``unopened -> open -> closed``. ``open`` is idempotent;
    ``prepare`` and ``exec`` open the connection on first use. Closing
    finalizes every cached statement, and a later ``prepare`` with a
    previously used identifier creates a fresh statement.

    Callers must serialize access to a shared statement identifier. There
    is no internal locking.
    """

    __slots__ = ("_backend", "_statements", "config", "diagnostics")

    def __init__(
        self,
        config: "Optional[DatabaseConfig]" = None,
        *,
        diagnostics: "Optional[Diagnostics]" = None,
        backend: "Optional[BackendProtocol]" = None,
    ) -> None:
        self.config = config if config is not None else DatabaseConfig()
        self.diagnostics = diagnostics if diagnostics is not None else Diagnostics(enabled=self.config.debug)
        if backend is None:
            backend = _BACKENDS[self.config.backend](self.config)
        self._backend: BackendProtocol = backend
        self._statements: dict[str, Statement[Any]] = {}

    def __repr__(self) -> str:
        cached = len(self._statements)
        return f"{type(self).__name__}(backend={self.backend!s}, status={self.status()!r}, cached={cached})"

    async def __aenter__(self) -> "Database":
        await self.open()
        return self

    async def __aexit__(
        self,
        exc_type: "Optional[type[BaseException]]",
        exc_val: "Optional[BaseException]",
        exc_tb: "Optional[TracebackType]",
    ) -> None:
        await self.close()

    @property
    def backend(self) -> BackendKind:
        return self._backend.kind

    @property
    def storage_path(self) -> Optional[str]:
        """Backing file of the open database, or None when in memory."""
        return self._backend.storage_path

    @property
    def statements(self) -> "MappingProxyType[str, Statement[Any]]":
        """Read-only view of the statement cache."""
        return MappingProxyType(self._statements)

    @property
    def _target(self) -> str:
        return self._backend.storage_path or ":memory:"

    def status(self) -> "Status":
        return "open" if self._backend.is_open else "closed"

    async def open(self) -> "Database":
        """Open the connection if it is not open yet.

        Applies the WAL and foreign-key pragmas best-effort, then loads the
        sqlite-vec extension unless ``config.load_extension`` is False.

        Raises:
            DatabaseError: The connection could not be opened.
            ExtensionLoadError: An explicitly configured extension failed to load.
            UnsupportedCapabilityError: An explicit extension was configured but the
                connection cannot load extensions.
        """
        if self._backend.is_open:
            return self
        with wrap_database_errors("open database", str(self.config.directory or self.config.database)):
            await self._backend.open()
        self.diagnostics.emit("open", backend=str(self.backend), path=self._target)
        for pragma in _OPEN_PRAGMAS:
            await attempt_async("open.pragma", self._backend.pragma, pragma, context={"pragma": pragma})
        try:
            await self._load_vector_extension()
        except Exception:
            await self._backend.close()
            raise
        return self

    async def _load_vector_extension(self) -> None:
        setting = self.config.load_extension
        if setting is False:
            return
        resolved = resolve_native_extension_path(
            setting or None, self.config.extension_dir, diagnostics=self.diagnostics
        )
        if resolved is None:
            return
        target = self._backend.extension_target
        if resolved.explicit:
            await load_extension(target, resolved.path, diagnostics=self.diagnostics)
            return
        outcome = await attempt_async(
            "extension.load",
            load_extension,
            target,
            resolved.path,
            diagnostics=self.diagnostics,
            policy=FallbackPolicy.WARN,
            context={"path": resolved.path, "source": resolved.source},
        )
        if not outcome:
            logger.warning("Continuing without sqlite-vec: could not load %s", resolved.path)

    async def close(self) -> None:
        """Finalize cached statements, clear the cache and release the connection.

        Safe to call when already closed. Finalize failures are logged and
        never keep the connection open.
        """
        statements = list(self._statements.items())
        self._statements.clear()
        try:
            for identifier, statement in statements:
                await attempt_async(
                    "close.finalize", statement.finalize, policy=FallbackPolicy.WARN, context={"id": identifier}
                )
        finally:
            if self._backend.is_open:
                await self._backend.close()
                self.diagnostics.emit("close", path=self._target)

    async def drop(self) -> None:
        """Close, then delete file-backed storage best-effort."""
        try:
            await self.close()
        finally:
            await attempt_async("drop.delete_storage", self._backend.delete_storage, policy=FallbackPolicy.WARN)

    async def exec(self, sql: str) -> None:
        """Run one or more statements once, bypassing the statement cache."""
        await self.open()
        self.diagnostics.emit("exec", sql=sql)
        with wrap_database_errors("execute SQL", self._target):
            await self._backend.exec(sql)

    async def prepare(self, sql: str, id: "Optional[str]" = None) -> "Statement[Any]":  # noqa: A002
        """Prepare ``sql`` and wrap it in a unified statement.

        With ``id``, a cached statement is reset and returned as is; the
        same identifier always yields the same instance until ``close``.
        Statements prepared without an ``id`` are owned by the caller, who
        must finalize them.

        Raises:
            ParameterStyleMismatchError: ``sql`` mixes placeholder styles and
                ``config.strict_parameter_styles`` is set.
            DatabaseError: The backend rejected the SQL. Nothing is cached.
        """
        await self.open()
        if id is not None:
            cached = self._statements.get(id)
            if cached is not None:
                if cached.sql != sql:
                    self.diagnostics.warn("prepare.id_reused", id=id, cached_sql=cached.sql, sql=sql)
                await attempt_async("prepare.reset", cached.reset, context={"id": id})
                self.diagnostics.emit("prepare", id=id, cached=True)
                return cached

        meta = classify_sql(sql)
        if meta.mixed:
            if self.config.strict_parameter_styles:
                raise ParameterStyleMismatchError(sql=sql)
            self.diagnostics.warn("prepare.mixed_styles", sql=sql, styles=sorted(str(style) for style in meta.styles))
        with wrap_database_errors("prepare statement", self._target):
            statement = await self._backend.prepare(sql, self.diagnostics)
        self.diagnostics.emit("prepare", id=id, cached=False, sql=sql, style=str(statement.meta.style))
        if id is not None:
            self._statements[id] = statement
        return statement

    async def versions(self) -> VersionInfo:
        """Return the SQLite library version and, when loaded, ``vec_version()``."""
        await self.open()
        with wrap_database_errors("query version", self._target):
            lib_version = await self._backend.query_value("SELECT sqlite_version()")
        vec = await attempt_async("versions.vec_version", self._backend.query_value, "SELECT vec_version()")
        return VersionInfo(str(lib_version), str(vec.value) if vec and vec.value is not None else None)


def create_database(
    config: "Optional[DatabaseConfig]" = None, *, diagnostics: "Optional[Diagnostics]" = None
) -> Database:
    """Create an unopened database. With no ``config`` the environment is read."""
    return Database(config if config is not None else DatabaseConfig.from_env(), diagnostics=diagnostics)


async def open_database(
    config: "Optional[DatabaseConfig]" = None, *, diagnostics: "Optional[Diagnostics]" = None
) -> Database:
    """Create and open a database."""
    return await create_database(config, diagnostics=diagnostics).open()
