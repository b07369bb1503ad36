from collections.abc import Mapping, Sequence
from typing import Any, Literal, Union

from typing_extensions import TypeAlias

__all__ = (
    "BinaryPayload",
    "NamedParameters",
    "ParameterSet",
    "PositionalParameters",
    "RowData",
    "Status",
)

BinaryPayload: TypeAlias = Union[bytes, bytearray, memoryview]
"""Binary values bound as BLOBs. Any buffer-protocol object is accepted at runtime."""
PositionalParameters: TypeAlias = Sequence[Any]
NamedParameters: TypeAlias = Mapping[Union[str, int], Any]
ParameterSet: TypeAlias = Union[PositionalParameters, NamedParameters, None]
"""Parameters accepted by ``bind``/``run``/``get``/``all``."""
RowData: TypeAlias = dict[str, Any]
"""Canonical row shape: column name to value."""
Status: TypeAlias = Literal["open", "closed"]
