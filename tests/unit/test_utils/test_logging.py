import json
import logging
from collections.abc import Generator

import pytest

from sqlite3_vec.utils.logging import (
    ROOT_LOGGER_NAME,
    Diagnostics,
    StructuredFormatter,
    configure_logging,
    get_logger,
    log_with_context,
    set_correlation_id,
)


@pytest.fixture
def restore_package_logger() -> Generator[None, None, None]:
    root = logging.getLogger(ROOT_LOGGER_NAME)
    handlers, level, propagate = list(root.handlers), root.level, root.propagate
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    root.propagate = propagate


class ListHandler(logging.Handler):
    def __init__(self) -> None:
        super().__init__(logging.DEBUG)
        self.records: list[logging.LogRecord] = []

    def emit(self, record: logging.LogRecord) -> None:
        self.records.append(record)


def test_get_logger_namespaces_names() -> None:
    assert get_logger("database").name == "sqlite3_vec.database"
    assert get_logger("sqlite3_vec.cli").name == "sqlite3_vec.cli"
    assert get_logger().name == ROOT_LOGGER_NAME


def test_structured_formatter_emits_json_with_fields() -> None:
    logger = get_logger("tests.formatter")
    record = logger.makeRecord(logger.name, logging.INFO, __file__, 1, "hello", (), None)
    record.extra_fields = {"sql": "SELECT ?", "blob": b"\x00"}  # type: ignore[attr-defined]
    set_correlation_id("abc123")
    try:
        payload = json.loads(StructuredFormatter().format(record))
    finally:
        set_correlation_id(None)
    assert payload["message"] == "hello"
    assert payload["sql"] == "SELECT ?"
    assert payload["correlation_id"] == "abc123"


def test_log_with_context_respects_level() -> None:
    logger = get_logger("tests.context")
    handler = ListHandler()
    logger.addHandler(handler)
    logger.setLevel(logging.INFO)
    try:
        log_with_context(logger, logging.DEBUG, "hidden")
        log_with_context(logger, logging.INFO, "shown", key="value")
    finally:
        logger.removeHandler(handler)
    assert [record.getMessage() for record in handler.records] == ["shown"]
    assert handler.records[0].extra_fields == {"key": "value"}  # type: ignore[attr-defined]


def test_configure_logging_installs_handlers(restore_package_logger: None) -> None:
    extra = ListHandler()
    configure_logging(level="DEBUG", format_style="simple", extra_handlers=[extra])
    root = logging.getLogger(ROOT_LOGGER_NAME)
    assert root.level == logging.DEBUG
    assert extra in root.handlers
    assert root.propagate is False


def test_disabled_diagnostics_emit_nothing() -> None:
    handler = ListHandler()
    logger = logging.getLogger("sqlite3_vec.tests.diag_off")
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)
    diagnostics = Diagnostics(logger=logger)
    diagnostics.emit("prepare", sql="SELECT 1")
    diagnostics.warn("prepare.mixed_styles", sql="SELECT :a, ?")
    logger.removeHandler(handler)
    assert [record.getMessage() for record in handler.records] == ["prepare.mixed_styles"]


def test_enabled_diagnostics_emit_debug_events() -> None:
    handler = ListHandler()
    logger = logging.getLogger("sqlite3_vec.tests.diag_on")
    logger.addHandler(handler)
    diagnostics = Diagnostics(enabled=True, logger=logger)
    diagnostics.emit("bind", sql="SELECT ?", parameters=1)
    logger.removeHandler(handler)
    (record,) = handler.records
    assert record.levelno == logging.DEBUG
    assert record.extra_fields == {"event": "bind", "sql": "SELECT ?", "parameters": 1}  # type: ignore[attr-defined]
