"""Unified statement adapters for the call-based and step-based backends."""

from sqlite3_vec.driver._call import CallBasedStatement
from sqlite3_vec.driver._common import Statement, StatementPhase, StatementState
from sqlite3_vec.driver._step import StepBasedStatement

__all__ = ("CallBasedStatement", "Statement", "StatementPhase", "StatementState", "StepBasedStatement")
