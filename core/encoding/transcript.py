from __future__ import annotations

"""
Digest transcripts (domain-separated, deterministic)
----------------------------------------------------

A transcript is an append-only hashing context: callers feed it labeled
messages in a fixed order and finally extract a 32-byte digest. Labels give
every field its own slot so that two different structures can never produce
the same byte stream.

Canonical framing (v1, interoperability-critical; do not change without a
new domain label):

- Running hash: SHA3-256.
- Every append is absorbed as

      u32_le(len(label)) || label || u64_le(len(message)) || message

- `DigestTranscript(label)` starts with the append `(b"dom-sep", label)`.
- `append_seq_header(label, n)` appends `(label, b"seq" || u64_le(n))`.
- `append_u32(label, v)` / `append_u64(label, v)` append the fixed-width
  little-endian encoding of `v` (4 / 8 bytes).
- `extract_digest()` appends `(b"extract", b"")` to a *copy* of the state and
  returns that copy's 32-byte digest, so the transcript remains usable.

Public API:
- DigestTranscript(label: bytes)
- DigestTranscript.append_message / append_seq_header / append_u32 / append_u64
- DigestTranscript.extract_digest() -> bytes
- DigestTranscript.hexdigest() -> str
"""

import hashlib
from typing import Union

from core.constants import U32_MAX, U64_MAX

DIGEST_SIZE = 32

BytesLike = Union[bytes, bytearray, memoryview]

_DOM_SEP = b"dom-sep"
_EXTRACT = b"extract"
_SEQ = b"seq"


def _u32_le(n: int) -> bytes:
    return n.to_bytes(4, "little")


def _u64_le(n: int) -> bytes:
    return n.to_bytes(8, "little")


def _check_uint(name: str, v: int, hi: int) -> int:
    if isinstance(v, bool) or not isinstance(v, int):
        raise TypeError(f"{name} expects int, got {type(v).__name__}")
    if not (0 <= v <= hi):
        raise ValueError(f"{name} out of range: {v}")
    return v


class DigestTranscript:
    """Append-only SHA3-256 transcript with labeled, length-framed slots."""

    __slots__ = ("_h",)

    def __init__(self, label: BytesLike) -> None:
        self._h = hashlib.sha3_256()
        self.append_message(_DOM_SEP, label)

    def append_message(self, label: BytesLike, message: BytesLike) -> None:
        label = bytes(label)
        message = bytes(message)
        if len(label) > U32_MAX:
            raise ValueError("label too long")
        self._h.update(_u32_le(len(label)))
        self._h.update(label)
        self._h.update(_u64_le(len(message)))
        self._h.update(message)

    def append_seq_header(self, label: BytesLike, n: int) -> None:
        """Announce that `n` labeled elements follow (length-prefix for sequences)."""
        self.append_message(label, _SEQ + _u64_le(_check_uint("seq length", n, U64_MAX)))

    def append_u32(self, label: BytesLike, v: int) -> None:
        self.append_message(label, _u32_le(_check_uint("u32", v, U32_MAX)))

    def append_u64(self, label: BytesLike, v: int) -> None:
        self.append_message(label, _u64_le(_check_uint("u64", v, U64_MAX)))

    def extract_digest(self) -> bytes:
        h = self._h.copy()
        h.update(_u32_le(len(_EXTRACT)))
        h.update(_EXTRACT)
        h.update(_u64_le(0))
        return h.digest()

    def hexdigest(self) -> str:
        return self.extract_digest().hex()


__all__ = ["DIGEST_SIZE", "DigestTranscript"]
