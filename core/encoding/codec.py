"""
Canonical codecs for plain objects
----------------------------------

Persisted and transmitted forms are built from plain values (dict, list,
int, str, bytes). Two encodings are offered:

- CBOR via `cbor2` in canonical mode (RFC 8949 §4.2.1 deterministic
  encoding: shortest integer forms, sorted map keys).
- JSON with sorted keys and compact separators, for config files, logs and
  CLI output.

Both raise `core.errors.SerializationError` / `DeserializationError` instead
of leaking codec-specific exceptions.
"""

from __future__ import annotations

import json
from typing import Any

import cbor2

from core.errors import DeserializationError, SerializationError


def cbor_dumps(obj: Any) -> bytes:
    try:
        return cbor2.dumps(obj, canonical=True)
    except (cbor2.CBOREncodeError, TypeError, ValueError) as e:
        raise SerializationError("CBOR encode failed", reason=str(e)).with_cause(e) from e


def cbor_loads(data: bytes) -> Any:
    if not isinstance(data, (bytes, bytearray, memoryview)):
        raise DeserializationError("CBOR input must be bytes", got=type(data).__name__)
    try:
        return cbor2.loads(bytes(data))
    except (cbor2.CBORDecodeError, ValueError, EOFError) as e:
        raise DeserializationError("CBOR decode failed", reason=str(e)).with_cause(e) from e


def json_dumps(obj: Any, *, indent: int | None = None) -> str:
    try:
        if indent is None:
            return json.dumps(obj, sort_keys=True, separators=(",", ":"))
        return json.dumps(obj, sort_keys=True, indent=indent)
    except (TypeError, ValueError) as e:
        raise SerializationError("JSON encode failed", reason=str(e)).with_cause(e) from e


def json_loads(text: str | bytes) -> Any:
    try:
        return json.loads(text)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise DeserializationError("JSON decode failed", reason=str(e)).with_cause(e) from e


__all__ = ["cbor_dumps", "cbor_loads", "json_dumps", "json_loads"]
