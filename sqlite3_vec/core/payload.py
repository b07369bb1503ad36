"""Binary payload normalization for BLOB binding.

Anything that exposes the buffer protocol (``bytearray``, ``memoryview``
slices, ``array.array``, NumPy arrays) is copied into an immutable ``bytes``
object covering exactly the addressed byte range. Scalars pass through.
"""

import struct
from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any, Final

import sqlite_vec

if TYPE_CHECKING:
    from sqlite3_vec.typing import NamedParameters, ParameterSet, PositionalParameters

__all__ = (
    "deserialize_float32",
    "is_binary_payload",
    "normalize_parameter_set",
    "normalize_value",
    "serialize_float32",
    "to_positional_param_object",
)

_SCALAR_TYPES: Final = (str, int, float, bool, type(None))
FLOAT32_SIZE: Final[int] = 4


def is_binary_payload(value: Any) -> bool:
    """Return True for values that should be bound as a BLOB.

    ``str`` supports neither the buffer protocol nor is treated as binary.
    """
    if isinstance(value, _SCALAR_TYPES):
        return False
    if isinstance(value, (bytes, bytearray, memoryview)):
        return True
    try:
        memoryview(value)
    except TypeError:
        return False
    return True


def normalize_value(value: Any) -> Any:
    """Normalize one parameter value.

    Binary payloads become ``bytes`` holding exactly the bytes the payload
    addresses, in order; ``memoryview(...).tobytes()`` respects offsets,
    strides and lengths of views rather than their underlying storage.
    Everything else is returned unchanged.
    """
    if isinstance(value, _SCALAR_TYPES) or type(value) is bytes:
        return value
    if is_binary_payload(value):
        with memoryview(value) as view:
            return view.tobytes()
    return value


def normalize_parameter_set(parameters: "ParameterSet") -> "ParameterSet":
    """Normalize every value in a parameter set.

    Positional sets keep their order and come back as a ``list``; named sets
    keep their keys and come back as a ``dict``. The caller's container is
    never mutated. A bare binary payload or scalar is treated as a single
    value, not as a sequence of values.

    Args:
        parameters: ``None``, a sequence of values or a mapping of values.

    Returns:
        A derived copy with binary payloads normalized.
    """
    if parameters is None:
        return None
    if isinstance(parameters, Mapping):
        return {key: normalize_value(value) for key, value in parameters.items()}
    if isinstance(parameters, (str, bytes, bytearray, memoryview)) or is_binary_payload(parameters):
        return [normalize_value(parameters)]
    if isinstance(parameters, Sequence):
        return [normalize_value(value) for value in parameters]
    return [normalize_value(parameters)]


def to_positional_param_object(values: "PositionalParameters") -> "NamedParameters":
    """Convert an ordered sequence into a 1-based index keyed mapping.

    Used when a backend's bind call accepts only a mapping even for numbered
    positional SQL (``?1``, ``?2``).
    """
    return {index: value for index, value in enumerate(values, start=1)}


def serialize_float32(vector: "Sequence[float]") -> bytes:
    """Serialize a list of floats into the compact float32 BLOB format used by vec0 columns."""
    return sqlite_vec.serialize_float32(list(vector))


def deserialize_float32(data: "bytes | bytearray | memoryview") -> "list[float]":
    """Decode a float32 BLOB back into a list of floats."""
    raw = normalize_value(data)
    count, remainder = divmod(len(raw), FLOAT32_SIZE)
    if remainder:
        msg = f"float32 payload length must be a multiple of {FLOAT32_SIZE}, got {len(raw)}"
        raise ValueError(msg)
    return list(struct.unpack(f"{count}f", raw))
