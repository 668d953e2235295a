"""
Token identifiers and per-token protocol constants
==================================================

- `TokenId`: a u32 asset identifier, wrapped so it can't be mixed up with
  amounts, heights or other bare integers. `TokenId(0)` is MOB.
- `Token`: the capability every supported token declares as class-level
  constants (`ID`, `MINIMUM_FEE`). The set of tokens is fixed by the protocol
  version; adding one means adding a subclass below and listing it in
  `KNOWN_TOKENS`, never registering at runtime.

>>> TokenId(2) > TokenId.MOB
True
>>> Mob.MINIMUM_FEE
400000000
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Dict, Optional, Tuple, Type

from core.constants import MICROMOB_TO_PICOMOB, U32_MAX, U64_MAX


@dataclass(frozen=True, order=True)
class TokenId:
    """Token id, used to identify different assets on the blockchain."""

    value: int

    MOB: ClassVar["TokenId"]

    def __post_init__(self) -> None:
        v = self.value
        if isinstance(v, bool) or not isinstance(v, int):
            raise TypeError(f"TokenId expects int, got {type(v).__name__}")
        if not (0 <= v <= U32_MAX):
            raise ValueError(f"TokenId out of u32 range: {v}")

    @classmethod
    def coerce(cls, x: "TokenId | int") -> "TokenId":
        """Accept either a TokenId or a plain int (as read from config/wire)."""
        return x if isinstance(x, TokenId) else cls(x)

    def __int__(self) -> int:
        return self.value

    def __str__(self) -> str:
        return str(self.value)

    def __repr__(self) -> str:
        return f"TokenId({self.value})"


TokenId.MOB = TokenId(0)


class Token:
    """
    A generic representation of a token.

    Subclasses must define:
      ID          : TokenId
      MINIMUM_FEE : int, 0 < fee <= u64::MAX, in the token's smallest unit
    """

    ID: ClassVar[TokenId]
    MINIMUM_FEE: ClassVar[int]

    def __init_subclass__(cls, **kwargs) -> None:
        super().__init_subclass__(**kwargs)
        if not isinstance(getattr(cls, "ID", None), TokenId):
            raise TypeError(f"{cls.__name__}.ID must be a TokenId")
        fee = getattr(cls, "MINIMUM_FEE", None)
        if isinstance(fee, bool) or not isinstance(fee, int) or not (0 < fee <= U64_MAX):
            raise ValueError(f"{cls.__name__}.MINIMUM_FEE must be a positive u64, got {fee!r}")

    def __new__(cls, *args, **kwargs):
        raise TypeError("Token classes carry constants only and are not instantiated")


class Mob(Token):
    """The MOB token."""

    ID = TokenId.MOB
    # Denominated in picoMOB.
    MINIMUM_FEE = 400 * MICROMOB_TO_PICOMOB


KNOWN_TOKENS: Tuple[Type[Token], ...] = (Mob,)

_BY_ID: Dict[TokenId, Type[Token]] = {t.ID: t for t in KNOWN_TOKENS}


def token_for_id(token_id: TokenId | int) -> Optional[Type[Token]]:
    """Return the capability class for `token_id`, or None if the protocol doesn't define one."""
    return _BY_ID.get(TokenId.coerce(token_id))


def protocol_minimum_fee(token_id: TokenId | int) -> Optional[int]:
    t = token_for_id(token_id)
    return t.MINIMUM_FEE if t is not None else None


__all__ = [
    "TokenId",
    "Token",
    "Mob",
    "KNOWN_TOKENS",
    "token_for_id",
    "protocol_minimum_fee",
]
