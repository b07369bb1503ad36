"""Result containers shared by both backends."""

from typing import NamedTuple, Optional

__all__ = ("RunResult", "VersionInfo")


class RunResult(NamedTuple):
    """Outcome of executing a statement for its side effects."""

    changes: int = 0
    """Rows changed by the statement (0 for DDL and queries)."""
    last_insert_rowid: Optional[int] = None


class VersionInfo(NamedTuple):
    """Versions reported by an open connection."""

    lib_version: str
    vec_version: Optional[str] = None
