"""JSON encoding for structured log records."""

from pathlib import PurePath
from typing import Any, Literal, overload

import msgspec

__all__ = ("decode_json", "encode_json")


def _enc_hook(value: Any) -> Any:
    if isinstance(value, PurePath):
        return str(value)
    if isinstance(value, (bytearray, memoryview)):
        return bytes(value)
    if isinstance(value, BaseException):
        return f"{type(value).__name__}: {value}"
    return repr(value)


_encoder = msgspec.json.Encoder(enc_hook=_enc_hook)
_decoder = msgspec.json.Decoder()


@overload
def encode_json(data: Any, *, as_bytes: Literal[False] = ...) -> str: ...


@overload
def encode_json(data: Any, *, as_bytes: Literal[True]) -> bytes: ...


def encode_json(data: Any, *, as_bytes: bool = False) -> "str | bytes":
    """Encode data to JSON.

    Values msgspec cannot encode natively are passed through ``_enc_hook``,
    which falls back to ``repr`` so a log record never fails to serialize.

    Args:
        data: Data to encode.
        as_bytes: Whether to return bytes instead of a string.

    Returns:
        JSON string or bytes.
    """
    encoded = _encoder.encode(data)
    if as_bytes:
        return encoded
    return encoded.decode("utf-8")


def decode_json(data: "str | bytes") -> Any:
    """Decode a JSON document."""
    return _decoder.decode(data)
