"""Declared best-effort operations.

Every place that is allowed to swallow a failure goes through ``attempt`` or
``attempt_async`` so the swallow is named and logged rather than hidden in an
empty ``except`` block.
"""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, Optional, TypeVar

from sqlite3_vec.utils.logging import get_logger, log_with_context

__all__ = ("Attempt", "FallbackPolicy", "attempt", "attempt_async")

T = TypeVar("T")

logger = get_logger("utils.attempt")


class FallbackPolicy(str, Enum):
    """What to do with a failure raised by a best-effort operation."""

    IGNORE = "ignore"
    """Swallow silently (debug log only)."""
    WARN = "warn"
    """Swallow and log a warning."""
    RAISE = "raise"
    """Propagate the error unchanged."""


@dataclass(frozen=True)
class Attempt(Generic[T]):
    """Outcome of a best-effort operation."""

    ok: bool
    value: Optional[T] = None
    error: Optional[BaseException] = None

    def __bool__(self) -> bool:
        return self.ok


def _record_failure(operation: str, error: Exception, policy: FallbackPolicy, fields: "dict[str, Any]") -> None:
    level = logging.WARNING if policy is FallbackPolicy.WARN else logging.DEBUG
    log_with_context(
        logger, level, f"{operation} failed", operation=operation, error=f"{type(error).__name__}: {error}", **fields
    )


def attempt(
    operation: str,
    func: "Callable[..., T]",
    *args: Any,
    policy: FallbackPolicy = FallbackPolicy.IGNORE,
    context: "Optional[dict[str, Any]]" = None,
    **kwargs: Any,
) -> "Attempt[T]":
    """Run ``func`` and capture any ``Exception`` according to ``policy``.

    Args:
        operation: Name of the operation, used in the log record.
        func: Callable to invoke.
        *args: Positional arguments for ``func``.
        policy: How a failure is handled.
        context: Extra structured fields for the log record.
        **kwargs: Keyword arguments for ``func``.

    Returns:
        An ``Attempt`` holding either the value or the captured error.
    """
    try:
        value = func(*args, **kwargs)
    except Exception as e:
        if policy is FallbackPolicy.RAISE:
            raise
        _record_failure(operation, e, policy, context or {})
        return Attempt(ok=False, error=e)
    return Attempt(ok=True, value=value)


async def attempt_async(
    operation: str,
    func: "Callable[..., Awaitable[T]]",
    *args: Any,
    policy: FallbackPolicy = FallbackPolicy.IGNORE,
    context: "Optional[dict[str, Any]]" = None,
    **kwargs: Any,
) -> "Attempt[T]":
    """Await ``func`` and capture any ``Exception`` according to ``policy``."""
    try:
        value = await func(*args, **kwargs)
    except Exception as e:
        if policy is FallbackPolicy.RAISE:
            raise
        _record_failure(operation, e, policy, context or {})
        return Attempt(ok=False, error=e)
    return Attempt(ok=True, value=value)
