"""
core.encoding
=============

Deterministic encodings used for fingerprints and persistence:

- transcript.py: domain-separated SHA3-256 digest transcripts
- codec.py:      canonical CBOR / JSON helpers for plain objects

The public API is intentionally tiny to avoid accidental divergence of
digests between peers.
"""

from __future__ import annotations

from .codec import cbor_dumps, cbor_loads, json_dumps, json_loads
from .transcript import DIGEST_SIZE, DigestTranscript

__all__ = [
    "DIGEST_SIZE",
    "DigestTranscript",
    "cbor_dumps",
    "cbor_loads",
    "json_dumps",
    "json_loads",
]
