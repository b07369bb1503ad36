"""Unified statement over a step-based handle, exercised with a recording fake."""

from typing import Any, Optional

import pytest

from sqlite3_vec.config import BackendKind
from sqlite3_vec.core.parameters import classify_sql
from sqlite3_vec.core.result import RunResult
from sqlite3_vec.driver import StatementPhase, StepBasedStatement
from sqlite3_vec.exceptions import FinalizeError, ParameterStyleMismatchError, StatementFinalizedError

pytestmark = pytest.mark.anyio


class FakeStepHandle:
    def __init__(self, sql: str, rows: "Optional[list[dict[str, Any]]]" = None, status: int = 0) -> None:
        self.sql = sql
        self.rows = rows or []
        self.status = status
        self.changes = 0
        self.last_insert_rowid: Optional[int] = None
        self.position = 0
        self.bound: Any = None
        self.calls: list[str] = []
        self.fail_reset = False

    async def bind(self, parameters: Any) -> None:
        self.calls.append("bind")
        self.bound = dict(parameters)

    def clear_bindings(self) -> None:
        self.calls.append("clear_bindings")
        self.bound = None

    async def step(self) -> bool:
        self.calls.append("step")
        if self.position < len(self.rows):
            self.position += 1
            return True
        return False

    def get(self) -> "Optional[dict[str, Any]]":
        return self.rows[self.position - 1] if self.position else None

    async def step_reset(self) -> bool:
        self.calls.append("step_reset")
        self.changes = 1
        self.last_insert_rowid = 9
        return False

    async def reset(self) -> None:
        self.calls.append("reset")
        self.position = 0
        if self.fail_reset:
            msg = "statement is busy"
            raise RuntimeError(msg)

    async def finalize(self) -> int:
        self.calls.append("finalize")
        return self.status


def make_statement(
    sql: str, rows: "Optional[list[dict[str, Any]]]" = None, status: int = 0
) -> "tuple[StepBasedStatement, FakeStepHandle]":
    handle = FakeStepHandle(sql, rows, status)
    return StepBasedStatement(handle, sql, classify_sql(sql)), handle


async def test_bind_is_eager_and_positional_values_become_indexed_mapping() -> None:
    statement, handle = make_statement("INSERT INTO t VALUES (?1, ?2)")
    assert await statement.bind([1, bytearray(b"\x01")]) is statement
    assert handle.bound == {1: 1, 2: b"\x01"}
    assert statement.phase is StatementPhase.BOUND
    assert statement.backend is BackendKind.AIOSQLITE


async def test_positional_values_are_clamped() -> None:
    statement, handle = make_statement("SELECT ?")
    await statement.bind([1, 2, 3])
    assert handle.bound == {1: 1}


async def test_named_values_are_bound_as_mapping() -> None:
    statement, handle = make_statement("SELECT :a, :b")
    await statement.bind({":a": 1, "b": 2})
    assert handle.bound == {":a": 1, "b": 2}


async def test_run_steps_once_and_clears_bindings() -> None:
    statement, handle = make_statement("INSERT INTO t VALUES (?)")
    result = await statement.run([5])
    assert result == RunResult(1, 9)
    assert handle.calls == ["bind", "step_reset", "clear_bindings"]
    assert statement.pending is None
    assert handle.bound is None


async def test_run_without_values_does_not_rebind() -> None:
    statement, handle = make_statement("INSERT INTO t VALUES (?)")
    await statement.bind([5])
    await statement.run()
    await statement.run([])
    assert handle.calls == ["bind", "step_reset", "clear_bindings", "step_reset", "clear_bindings"]


async def test_execution_values_stay_bound_for_the_next_call() -> None:
    statement, handle = make_statement("SELECT ?", rows=[{"v": 1}])
    await statement.bind([1])
    await statement.get([2])
    assert statement.pending == [2]
    await statement.get()
    await statement.all([])
    assert handle.bound == {1: 2}
    assert handle.calls.count("bind") == 2


async def test_get_advances_once_then_resets() -> None:
    statement, handle = make_statement("SELECT a FROM t", rows=[{"a": 1}, {"a": 2}])
    assert await statement.get() == {"a": 1}
    assert handle.calls == ["step", "reset"]
    assert await statement.get() == {"a": 1}


async def test_get_on_empty_result_returns_none() -> None:
    statement, handle = make_statement("SELECT a FROM t")
    assert await statement.get() is None
    assert handle.calls == ["step", "reset"]


async def test_all_collects_every_row_then_resets() -> None:
    rows = [{"a": 1}, {"a": 2}, {"a": 3}]
    statement, handle = make_statement("SELECT a FROM t WHERE a > ?", rows=rows)
    assert await statement.all([0]) == rows
    assert handle.calls == ["bind", "step", "step", "step", "step", "reset"]


async def test_step_and_row_delegate_to_handle() -> None:
    statement, _ = make_statement("SELECT a FROM t", rows=[{"a": 1}])
    assert await statement.step() is True
    assert statement.row() == {"a": 1}
    assert await statement.step() is False


async def test_reset_swallows_backend_errors() -> None:
    statement, handle = make_statement("SELECT ?")
    handle.fail_reset = True
    await statement.bind([1])
    assert await statement.reset() is statement
    assert statement.phase is StatementPhase.RESET
    assert statement.pending is None
    assert handle.bound is None


async def test_wrong_container_is_rejected() -> None:
    statement, _ = make_statement("SELECT :a")
    with pytest.raises(ParameterStyleMismatchError):
        await statement.bind([1])


async def test_finalize_nonzero_status_raises() -> None:
    statement, _ = make_statement("SELECT 1", status=21)
    with pytest.raises(FinalizeError) as exc_info:
        await statement.finalize()
    assert exc_info.value.status == 21
    with pytest.raises(StatementFinalizedError):
        await statement.step()
    assert statement.row() is None


async def test_finalize_is_idempotent() -> None:
    statement, handle = make_statement("SELECT 1")
    await statement.finalize()
    await statement.finalize()
    assert handle.calls == ["finalize"]
