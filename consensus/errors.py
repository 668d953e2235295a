"""
Consensus Errors

Structured exceptions raised by the consensus-side fee map. They carry
stable integer codes so that RPC, the enclave bridge and tests can classify
failures without string-matching.

Design goals
------------
- Stable, integer error codes (see `ErrorCode`).
- Human-friendly messages with optional rich context.
- Value semantics for fee-map validation errors: two errors describing the
  same offending entry compare equal.

Subclasses
----------
- FeeMapError          : base for fee map problems.
- InvalidFee           : an entry's fee is zero (or not a valid u64).
- MissingFee           : a required token (MOB) is absent.
- FeeMapDigestMismatch : a persisted fee map's digest disagrees with its contents.
"""

from __future__ import annotations

from enum import IntEnum
from typing import Any, Dict, Mapping, Optional

from core.types.token import TokenId


class ErrorCode(IntEnum):
    """Stable error codes for consensus-layer exceptions."""
    CONSENSUS_GENERIC = 2000
    FEE_MAP           = 2100
    INVALID_FEE       = 2101
    MISSING_FEE       = 2102
    DIGEST_MISMATCH   = 2103


class ConsensusError(Exception):
    """
    Base class for consensus-layer exceptions.

    Parameters
    ----------
    message : str
        Human-readable description.
    code : ErrorCode | int
        Stable code for programmatic handling (default: CONSENSUS_GENERIC).
    context : Mapping[str, Any] | None
        Optional structured fields (small dict).
    cause : BaseException | None
        Optional underlying exception; also set via `raise ... from ...`.
    """

    def __init__(
        self,
        message: str,
        *,
        code: ErrorCode | int = ErrorCode.CONSENSUS_GENERIC,
        context: Optional[Mapping[str, Any]] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message)
        self.message: str = message
        self.code: int = int(code)
        self.context: Dict[str, Any] = dict(context) if context else {}
        if cause is not None:
            self.__cause__ = cause  # type: ignore[attr-defined]

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.message

    def to_dict(self) -> Dict[str, Any]:
        """Structured view suitable for logs or JSON-RPC error `data` fields."""
        out = {
            "code": self.code,
            "message": self.message,
        }
        if self.context:
            out["context"] = self.context
        return out

    def _key(self) -> tuple:
        return (type(self), self.code, tuple(sorted(self.context.items())))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ConsensusError):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._key())


class FeeMapError(ConsensusError):
    """Base for fee map validation and decoding failures."""

    def __init__(self, message: str, *, code: ErrorCode | int = ErrorCode.FEE_MAP,
                 context: Optional[Mapping[str, Any]] = None,
                 cause: Optional[BaseException] = None) -> None:
        super().__init__(message, code=code, context=context, cause=cause)


class InvalidFee(FeeMapError):
    """Token `{token_id}` has invalid fee `{fee}`"""

    def __init__(self, token_id: TokenId, fee: Any) -> None:
        self.token_id = token_id
        self.fee = fee
        super().__init__(
            f"Token `{token_id}` has invalid fee `{fee}`",
            code=ErrorCode.INVALID_FEE,
            context={"token_id": int(token_id), "fee": fee},
        )

    def __repr__(self) -> str:
        return f"InvalidFee({self.token_id!r}, {self.fee!r})"


class MissingFee(FeeMapError):
    """Token `{token_id}` is missing from the fee map"""

    def __init__(self, token_id: TokenId) -> None:
        self.token_id = token_id
        super().__init__(
            f"Token `{token_id}` is missing from the fee map",
            code=ErrorCode.MISSING_FEE,
            context={"token_id": int(token_id)},
        )

    def __repr__(self) -> str:
        return f"MissingFee({self.token_id!r})"


class FeeMapDigestMismatch(FeeMapError):
    """Stored digest doesn't match the digest recomputed from the stored map."""

    def __init__(self, expected: str, got: str) -> None:
        self.expected = expected
        self.got = got
        super().__init__(
            "fee map digest mismatch",
            code=ErrorCode.DIGEST_MISMATCH,
            context={"expected": expected, "got": got},
        )


__all__ = [
    "ErrorCode",
    "ConsensusError",
    "FeeMapError",
    "InvalidFee",
    "MissingFee",
    "FeeMapDigestMismatch",
]
