"""
core.types
==========

Canonical value types shared by the ledger components:

- token:        TokenId (u32 asset id), Token capability, Mob, KNOWN_TOKENS
- responder_id: ResponderId (opaque peer address)

Attributes resolve lazily on first access so importing `core.types` has no
import-time side effects.

Example
-------
>>> from core.types import TokenId, Mob
>>> from core.types import token  # submodule access works too
"""

from __future__ import annotations

import importlib
from typing import TYPE_CHECKING

__all__ = [
    # submodules
    "token",
    "responder_id",
    # common re-exported symbols
    "TokenId",
    "Token",
    "Mob",
    "KNOWN_TOKENS",
    "ResponderId",
]

_SUBMODULES = {
    "token": "core.types.token",
    "responder_id": "core.types.responder_id",
}

_SYMBOLS = {
    "TokenId": ("core.types.token", "TokenId"),
    "Token": ("core.types.token", "Token"),
    "Mob": ("core.types.token", "Mob"),
    "KNOWN_TOKENS": ("core.types.token", "KNOWN_TOKENS"),
    "ResponderId": ("core.types.responder_id", "ResponderId"),
}


def __getattr__(name: str):
    if name in _SUBMODULES:
        return importlib.import_module(_SUBMODULES[name])
    target = _SYMBOLS.get(name)
    if target:
        mod = importlib.import_module(target[0])
        return getattr(mod, target[1])
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


def __dir__():
    base = set(globals().keys())
    return sorted(base | set(_SUBMODULES.keys()) | set(_SYMBOLS.keys()))


if TYPE_CHECKING:
    from .responder_id import ResponderId  # noqa: F401
    from .token import KNOWN_TOKENS, Mob, Token, TokenId  # noqa: F401
