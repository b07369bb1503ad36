import sqlite3

import pytest

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
    wrap_database_errors,
)


def test_exception_hierarchy() -> None:
    for exc_type in (
        DatabaseError,
        ExtensionLoadError,
        FinalizeError,
        ImproperConfigurationError,
        ParameterError,
        StatementFinalizedError,
        UnsupportedCapabilityError,
    ):
        assert issubclass(exc_type, Sqlite3VecError)
    assert issubclass(ParameterStyleMismatchError, ParameterError)


def test_extension_load_error_names_path() -> None:
    exc = ExtensionLoadError("/ext/vec0.so", "Failed to load sqlite-vec extension (bad ELF)")
    assert exc.path == "/ext/vec0.so"
    assert str(exc) == "Failed to load sqlite-vec extension (bad ELF) from: /ext/vec0.so"


def test_finalize_error_carries_status_and_sql() -> None:
    exc = FinalizeError(21, "SELECT 1")
    assert exc.status == 21
    assert "status 21" in str(exc)
    assert "SQL: SELECT 1" in str(exc)


def test_default_messages() -> None:
    assert "not supported" in str(UnsupportedCapabilityError())
    assert "mixes named and positional" in str(ParameterStyleMismatchError())
    assert ParameterStyleMismatchError(sql="SELECT :a, ?").sql == "SELECT :a, ?"


def test_wrap_database_errors_chains_cause() -> None:
    with pytest.raises(DatabaseError) as exc_info, wrap_database_errors("prepare statement", "/data/db.sqlite"):
        raise sqlite3.OperationalError("no such table: t")
    assert str(exc_info.value) == "Failed to prepare statement (/data/db.sqlite): no such table: t"
    assert isinstance(exc_info.value.__cause__, sqlite3.OperationalError)


def test_wrap_database_errors_leaves_other_errors_alone() -> None:
    with pytest.raises(ValueError, match="unrelated"), wrap_database_errors("exec"):
        raise ValueError("unrelated")
