"""sqlite3-vec: one statement API for sqlite-vec over ``sqlite3`` and ``aiosqlite``."""

from sqlite3_vec import adapters, core, driver, exceptions, extension, typing, utils
from sqlite3_vec.__metadata__ import __version__
from sqlite3_vec.config import BackendKind, DatabaseConfig, SqliteConnectionParams
from sqlite3_vec.core import (
    ParameterStyle,
    RunResult,
    SqlMeta,
    VersionInfo,
    classify_sql,
    deserialize_float32,
    is_binary_payload,
    normalize_parameter_set,
    normalize_value,
    serialize_float32,
    to_positional_param_object,
)
from sqlite3_vec.database import Database, create_database, open_database
from sqlite3_vec.driver import CallBasedStatement, Statement, StatementPhase, StepBasedStatement
from sqlite3_vec.exceptions import (
    DatabaseError,
    ExtensionLoadError,
    FinalizeError,
    ImproperConfigurationError,
    ParameterError,
    ParameterStyleMismatchError,
    Sqlite3VecError,
    StatementFinalizedError,
    UnsupportedCapabilityError,
)
from sqlite3_vec.extension import (
    ENTRY_POINTS,
    detect_libc,
    find_local_prebuilt,
    lib_extension,
    load_extension,
    platform_triple,
    resolve_native_extension_path,
)
from sqlite3_vec.utils.logging import Diagnostics

__all__ = (
    "ENTRY_POINTS",
    "BackendKind",
    "CallBasedStatement",
    "Database",
    "DatabaseConfig",
    "DatabaseError",
    "Diagnostics",
    "ExtensionLoadError",
    "FinalizeError",
    "ImproperConfigurationError",
    "ParameterError",
    "ParameterStyle",
    "ParameterStyleMismatchError",
    "RunResult",
    "SqlMeta",
    "Sqlite3VecError",
    "SqliteConnectionParams",
    "Statement",
    "StatementFinalizedError",
    "StatementPhase",
    "StepBasedStatement",
    "UnsupportedCapabilityError",
    "VersionInfo",
    "__version__",
    "adapters",
    "classify_sql",
    "core",
    "create_database",
    "deserialize_float32",
    "detect_libc",
    "driver",
    "exceptions",
    "extension",
    "find_local_prebuilt",
    "is_binary_payload",
    "lib_extension",
    "load_extension",
    "normalize_parameter_set",
    "normalize_value",
    "open_database",
    "platform_triple",
    "resolve_native_extension_path",
    "serialize_float32",
    "to_positional_param_object",
    "typing",
    "utils",
)
