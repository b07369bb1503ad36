"""Backend-independent core: placeholder classification and payload normalization."""

from sqlite3_vec.core.parameters import ParameterStyle, SqlMeta, bare_parameter_name, classify_sql, null_parameters
from sqlite3_vec.core.result import RunResult, VersionInfo
from sqlite3_vec.core.payload import (
    deserialize_float32,
    is_binary_payload,
    normalize_parameter_set,
    normalize_value,
    serialize_float32,
    to_positional_param_object,
)

__all__ = (
    "ParameterStyle",
    "RunResult",
    "SqlMeta",
    "VersionInfo",
    "bare_parameter_name",
    "classify_sql",
    "deserialize_float32",
    "is_binary_payload",
    "normalize_parameter_set",
    "normalize_value",
    "null_parameters",
    "serialize_float32",
    "to_positional_param_object",
)
