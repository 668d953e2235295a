from __future__ import annotations

import pytest

from core.encoding import cbor_dumps, cbor_loads, json_dumps, json_loads
from core.errors import CoreErrorCode, DeserializationError, SerializationError


def test_cbor_is_canonical_regardless_of_key_order():
    a = cbor_dumps({"map": [[0, 1]], "cached_digest": "ab"})
    b = cbor_dumps({"cached_digest": "ab", "map": [[0, 1]]})
    assert a == b
    assert cbor_loads(a) == {"map": [[0, 1]], "cached_digest": "ab"}


def test_json_is_sorted_and_compact():
    assert json_dumps({"b": 1, "a": [1, 2]}) == '{"a":[1,2],"b":1}'
    assert json_loads('{"a":1}') == {"a": 1}


def test_encode_errors_are_wrapped():
    with pytest.raises(SerializationError) as ei:
        json_dumps({"x": object()})
    assert ei.value.code == CoreErrorCode.SERIALIZATION
    with pytest.raises(SerializationError):
        cbor_dumps(object())


def test_decode_errors_are_wrapped():
    with pytest.raises(DeserializationError):
        json_loads("{")
    with pytest.raises(DeserializationError):
        cbor_loads(b"\x1b\x00")
    with pytest.raises(DeserializationError):
        cbor_loads("not bytes")  # type: ignore[arg-type]
