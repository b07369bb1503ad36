"""Shared state and parameter resolution for unified statements."""

from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from enum import Enum
from typing import TYPE_CHECKING, Any, ClassVar, Generic, Optional, TypeVar

from sqlite3_vec.core.parameters import ParameterStyle, SqlMeta
from sqlite3_vec.core.payload import normalize_parameter_set
from sqlite3_vec.exceptions import ParameterStyleMismatchError, StatementFinalizedError
from sqlite3_vec.utils.logging import Diagnostics

if TYPE_CHECKING:
    from sqlite3_vec.config import BackendKind
    from sqlite3_vec.core.result import RunResult
    from sqlite3_vec.typing import ParameterSet, RowData

__all__ = ("Statement", "StatementPhase", "StatementState", "has_values")

HandleT = TypeVar("HandleT")


def has_values(values: "ParameterSet") -> bool:
    """True for a non-empty parameter set. Empty sets never replace bound values."""
    return values is not None and len(values) > 0


class StatementPhase(str, Enum):
    """Lifecycle phase of a unified statement."""

    PREPARED = "prepared"
    BOUND = "bound"
    EXECUTED = "executed"
    RESET = "reset"
    FINALIZED = "finalized"


class StatementState(Generic[HandleT]):
    """Everything a unified statement knows about itself.

    ``pending`` holds the caller's parameter set between ``bind`` and the
    next execution; it is never mutated.
    """

    __slots__ = ("handle", "meta", "pending", "phase")

    def __init__(self, handle: HandleT, meta: SqlMeta) -> None:
        self.handle = handle
        self.meta = meta
        self.pending: ParameterSet = None
        self.phase = StatementPhase.PREPARED

    def __repr__(self) -> str:
        return f"{type(self).__name__}(meta={self.meta!r}, phase={self.phase!r}, pending={self.pending!r})"


class Statement(ABC, Generic[HandleT]):
    """One parameter-binding contract over either backend's prepared statement.

    Execution methods resolve the effective parameter set (an argument
    overrides any previously bound set), normalize binary payloads and then
    dispatch on the classified placeholder style. Positional values beyond
    the placeholder count are dropped.
    """

    __slots__ = ("_state", "diagnostics", "sql")
    backend: "ClassVar[BackendKind]"

    def __init__(self, handle: HandleT, sql: str, meta: SqlMeta, diagnostics: Optional[Diagnostics] = None) -> None:
        self.sql = sql
        self.diagnostics = diagnostics or Diagnostics()
        self._state: StatementState[HandleT] = StatementState(handle, meta)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(sql={self.sql!r}, style={self.meta.style!s}, phase={self.phase!s})"

    @property
    def meta(self) -> SqlMeta:
        return self._state.meta

    @property
    def phase(self) -> StatementPhase:
        return self._state.phase

    @property
    def pending(self) -> "ParameterSet":
        return self._state.pending

    @property
    def handle(self) -> HandleT:
        return self._state.handle

    @property
    def finalized(self) -> bool:
        return self._state.phase is StatementPhase.FINALIZED

    def _ensure_usable(self) -> None:
        if self.finalized:
            raise StatementFinalizedError(self.sql)

    def _effective(self, values: "ParameterSet") -> "ParameterSet":
        return values if has_values(values) else self._state.pending

    def _positional_values(self, values: "ParameterSet") -> "list[Any]":
        """Normalize ``values`` for positional SQL, clamped to the placeholder count."""
        if values is None:
            return []
        if isinstance(values, Mapping):
            if not all(isinstance(key, int) for key in values):
                msg = f"SQL uses {self.meta.style} placeholders but a mapping with named keys was provided"
                raise ParameterStyleMismatchError(msg, self.sql)
            ordered = [values.get(index) for index in range(1, max(values, default=0) + 1)]
            normalized = normalize_parameter_set(ordered) or []
        else:
            normalized = normalize_parameter_set(values) or []
        limit = self.meta.param_count
        if len(normalized) > limit:
            self.diagnostics.emit(
                "clamp", sql=self.sql, supplied=len(normalized), placeholders=limit, dropped=len(normalized) - limit
            )
            normalized = list(normalized[:limit])
        return list(normalized)

    def _named_values(self, values: "ParameterSet") -> "dict[Any, Any]":
        """Normalize ``values`` for named (or parameterless) SQL."""
        if values is None:
            return {}
        if not isinstance(values, Mapping):
            positional = normalize_parameter_set(values) or []
            if not positional:
                return {}
            if self.meta.style is ParameterStyle.NONE:
                self.diagnostics.emit("clamp", sql=self.sql, supplied=len(positional), placeholders=0)
                return {}
            msg = f"SQL uses named placeholders but {type(values).__name__} was provided"
            raise ParameterStyleMismatchError(msg, self.sql)
        return dict(normalize_parameter_set(values) or {})

    @abstractmethod
    async def bind(self, values: "ParameterSet") -> "Statement[HandleT]":
        """Store ``values`` for the next execution and return ``self``."""

    @abstractmethod
    async def run(self, values: "ParameterSet" = None) -> "RunResult":
        """Execute for side effects. The bound set is consumed."""

    @abstractmethod
    async def get(self, values: "ParameterSet" = None) -> "Optional[RowData]":
        """Execute and return the first row, or None when there is none."""

    @abstractmethod
    async def all(self, values: "ParameterSet" = None) -> "list[RowData]":
        """Execute and return every row."""

    @abstractmethod
    async def reset(self) -> "Statement[HandleT]":
        """Make the statement re-executable and drop bound values. Never raises."""

    @abstractmethod
    async def finalize(self) -> None:
        """Release backend resources."""

    @abstractmethod
    async def step(self) -> bool:
        """Advance the cursor one row."""

    @abstractmethod
    def row(self) -> "Optional[RowData]":
        """Row produced by the last successful ``step``."""
