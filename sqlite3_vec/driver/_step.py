"""Unified statement over a step-based backend handle."""

from typing import TYPE_CHECKING, Any, ClassVar, Optional

from sqlite3_vec.config import BackendKind
from sqlite3_vec.core.payload import to_positional_param_object
from sqlite3_vec.core.result import RunResult
from sqlite3_vec.driver._common import Statement, StatementPhase, has_values
from sqlite3_vec.exceptions import FinalizeError
from sqlite3_vec.utils.attempt import attempt_async

if TYPE_CHECKING:
    from collections.abc import Mapping

    from sqlite3_vec.protocols import StepBasedStatementHandle
    from sqlite3_vec.typing import ParameterSet, RowData

__all__ = ("StepBasedStatement",)


class StepBasedStatement(Statement["StepBasedStatementHandle"]):
    """Statement driven through bind/step/reset/finalize.

    ``bind`` binds eagerly. ``get`` and ``all`` always reset the cursor
    before returning so the next caller starts from a clean statement.
    """

    __slots__ = ()
    backend: "ClassVar[BackendKind]" = BackendKind.AIOSQLITE

    def _binding_for(self, values: "ParameterSet") -> "Mapping[Any, Any]":
        if self.meta.style.is_positional:
            return to_positional_param_object(self._positional_values(values))
        return self._named_values(values)

    async def _bind_if_given(self, values: "ParameterSet", operation: str) -> None:
        self._ensure_usable()
        if has_values(values):
            await self.bind(values)
        self.diagnostics.emit(operation, sql=self.sql, style=str(self.meta.style), rebound=has_values(values))

    async def bind(self, values: "ParameterSet") -> "StepBasedStatement":
        self._ensure_usable()
        binding = self._binding_for(values)
        await self._state.handle.bind(binding)
        self._state.pending = values
        self._state.phase = StatementPhase.BOUND
        self.diagnostics.emit("bind", sql=self.sql, parameters=len(binding))
        return self

    async def run(self, values: "ParameterSet" = None) -> RunResult:
        handle = self._state.handle
        try:
            await self._bind_if_given(values, "run")
            await handle.step_reset()
            self._state.phase = StatementPhase.EXECUTED
            return RunResult(handle.changes, handle.last_insert_rowid)
        finally:
            if not self.finalized:
                self._state.pending = None
                handle.clear_bindings()

    async def get(self, values: "ParameterSet" = None) -> "Optional[RowData]":
        await self._bind_if_given(values, "get")
        handle = self._state.handle
        try:
            row = handle.get() if await handle.step() else None
        finally:
            await handle.reset()
        self._state.phase = StatementPhase.EXECUTED
        return row

    async def all(self, values: "ParameterSet" = None) -> "list[RowData]":
        await self._bind_if_given(values, "all")
        handle = self._state.handle
        rows: list[RowData] = []
        try:
            while await handle.step():
                row = handle.get()
                if row is not None:
                    rows.append(row)
        finally:
            await handle.reset()
        self._state.phase = StatementPhase.EXECUTED
        return rows

    async def reset(self) -> "StepBasedStatement":
        if self.finalized:
            return self
        handle = self._state.handle
        await attempt_async("statement.reset", handle.reset, context={"sql": self.sql})
        handle.clear_bindings()
        self._state.pending = None
        self._state.phase = StatementPhase.RESET
        return self

    async def finalize(self) -> None:
        if self.finalized:
            return
        status = await self._state.handle.finalize()
        self._state.phase = StatementPhase.FINALIZED
        self._state.pending = None
        if status:
            raise FinalizeError(status, self.sql)

    async def step(self) -> bool:
        self._ensure_usable()
        return await self._state.handle.step()

    def row(self) -> "Optional[RowData]":
        if self.finalized:
            return None
        return self._state.handle.get()
