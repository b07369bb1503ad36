"""Unified statement over a call-based backend handle."""

from typing import TYPE_CHECKING, Any, ClassVar, Optional

from sqlite3_vec.config import BackendKind
from sqlite3_vec.driver._common import Statement, StatementPhase, has_values
from sqlite3_vec.exceptions import FinalizeError

if TYPE_CHECKING:
    from collections.abc import Callable

    from sqlite3_vec.core.result import RunResult
    from sqlite3_vec.protocols import CallBasedStatementHandle
    from sqlite3_vec.typing import ParameterSet, RowData

__all__ = ("CallBasedStatement",)


class CallBasedStatement(Statement["CallBasedStatementHandle"]):
    """Statement whose handle executes and fetches in one call.

    ``bind`` only records values; binding happens at execution time. Values
    passed to an execution method replace the bound set, as a step-based
    statement rebinds eagerly.
    ``step`` is not available on this backend and always returns False,
    use ``get`` or ``all`` instead.
    """

    __slots__ = ()
    backend: "ClassVar[BackendKind]" = BackendKind.SQLITE

    def _invoke(self, method: "Callable[..., Any]", values: "ParameterSet", operation: str) -> Any:
        self._ensure_usable()
        if has_values(values):
            self._state.pending = values
        effective = self._effective(values)
        handle = self._state.handle
        if self.meta.style.is_positional and effective is not None:
            args = self._positional_values(effective)
            self.diagnostics.emit(operation, sql=self.sql, style=str(self.meta.style), parameters=len(args))
            result = method(*args)
        else:
            named = self._named_values(effective) if effective is not None else ()
            self.diagnostics.emit(operation, sql=self.sql, style=str(self.meta.style), parameters=len(named))
            handle.bind(named)
            result = method()
        self._state.phase = StatementPhase.EXECUTED
        return result

    async def bind(self, values: "ParameterSet") -> "CallBasedStatement":
        self._ensure_usable()
        self._state.pending = values
        self._state.phase = StatementPhase.BOUND
        self.diagnostics.emit("bind", sql=self.sql, deferred=True)
        return self

    async def run(self, values: "ParameterSet" = None) -> "RunResult":
        try:
            return self._invoke(self._state.handle.run, values, "run")
        finally:
            self._state.pending = None

    async def get(self, values: "ParameterSet" = None) -> "Optional[RowData]":
        return self._invoke(self._state.handle.get, values, "get")

    async def all(self, values: "ParameterSet" = None) -> "list[RowData]":
        return self._invoke(self._state.handle.all, values, "all")

    async def reset(self) -> "CallBasedStatement":
        if not self.finalized:
            self._state.pending = None
            self._state.phase = StatementPhase.RESET
        return self

    async def finalize(self) -> None:
        if self.finalized:
            return
        status = self._state.handle.finalize()
        self._state.phase = StatementPhase.FINALIZED
        self._state.pending = None
        if status:
            raise FinalizeError(status, self.sql)

    async def step(self) -> bool:
        return False

    def row(self) -> "Optional[RowData]":
        return None
