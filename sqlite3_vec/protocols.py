"""Structural types for the two backend shims.

The unified ``Statement`` talks to exactly one of two statement shapes: a
call-based handle (execute and fetch in one call) and a step-based handle
(explicit bind/step/reset/finalize). Each database backend implements
``BackendProtocol`` fully; the façade never inspects which one it holds.
"""

from typing import TYPE_CHECKING, Any, Optional, Protocol, Union, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from sqlite3_vec.config import BackendKind
    from sqlite3_vec.core.result import RunResult
    from sqlite3_vec.driver import Statement
    from sqlite3_vec.typing import RowData
    from sqlite3_vec.utils.logging import Diagnostics

__all__ = ("BackendProtocol", "CallBasedStatementHandle", "StepBasedStatementHandle")


@runtime_checkable
class CallBasedStatementHandle(Protocol):
    """A prepared statement that executes and fetches in a single call.

    ``run``/``get``/``all`` accept variadic positional values or a single
    mapping of named values. With no arguments they use the values last
    given to ``bind``.
    """

    sql: str

    def bind(self, parameters: "Union[Mapping[Any, Any], Sequence[Any]]") -> Any: ...

    def run(self, *args: Any) -> "RunResult": ...

    def get(self, *args: Any) -> "Optional[RowData]": ...

    def all(self, *args: Any) -> "list[RowData]": ...

    def finalize(self) -> int: ...


@runtime_checkable
class StepBasedStatementHandle(Protocol):
    """A prepared statement driven by an explicit cursor lifecycle."""

    sql: str
    changes: int
    last_insert_rowid: Optional[int]

    async def bind(self, parameters: "Mapping[Any, Any]") -> None: ...

    def clear_bindings(self) -> None: ...

    async def step(self) -> bool: ...

    def get(self) -> "Optional[RowData]": ...

    async def step_reset(self) -> bool: ...

    async def reset(self) -> None: ...

    async def finalize(self) -> int: ...


class BackendProtocol(Protocol):
    """What the database façade needs from an open backend connection."""

    kind: "BackendKind"

    @property
    def is_open(self) -> bool: ...

    @property
    def storage_path(self) -> Optional[str]:
        """Backing file, or None for in-memory databases."""
        ...

    @property
    def extension_target(self) -> Any:
        """Object exposing ``load_extension`` or ``load_extension_async``."""
        ...

    async def open(self) -> None: ...

    async def exec(self, sql: str) -> None: ...

    async def pragma(self, text: str) -> Any: ...

    async def query_value(self, sql: str) -> Any: ...

    async def prepare(self, sql: str, diagnostics: "Diagnostics") -> "Statement": ...

    async def close(self) -> None: ...

    async def delete_storage(self) -> None: ...
