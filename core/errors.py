"""
core.errors
-----------

Errors raised by the core helpers (configuration loading, codecs).

- One root `LedgerError` with a machine-friendly `code` and optional `data`.
- `to_dict` gives a JSON-safe shape for logs and CLI output.

Consensus-side errors (fee map validation) live in `consensus.errors`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional


class CoreErrorCode(str, Enum):
    CONFIG = "CORE/CONFIG"
    SERIALIZATION = "CORE/SERIALIZATION"
    DESERIALIZATION = "CORE/DESERIALIZATION"


@dataclass(eq=False)
class LedgerError(Exception):
    """
    Root error for core components.

    Attributes
    ----------
    code: CoreErrorCode
        Machine-stable error code.
    message: str
        Human hint suitable for logs.
    data: dict
        Optional machine data, JSON-serializable.
    retryable: bool
        Whether the operation may succeed on retry with the same inputs.
    cause: Optional[BaseException]
        The exception this one was raised from; only in `to_dict()` on request.
    """

    code: CoreErrorCode
    message: str
    data: Dict[str, Any] = field(default_factory=dict)
    retryable: bool = False
    cause: Optional[BaseException] = field(default=None, compare=False, repr=False)

    def __post_init__(self) -> None:
        super().__init__(f"{self.code.value}: {self.message}")
        if self.cause is not None:
            self.__cause__ = self.cause

    def with_cause(self, exc: BaseException) -> "LedgerError":
        """Record `exc` as the cause and return self, for `raise Err(...).with_cause(e)`."""
        self.cause = exc
        self.__cause__ = exc
        return self

    def to_dict(self, include_cause: bool = False) -> Dict[str, Any]:
        out = {
            "code": self.code.value,
            "message": self.message,
            "data": _jsonmap(self.data),
            "retryable": self.retryable,
        }
        if include_cause and self.cause is not None:
            out["cause"] = {"type": type(self.cause).__name__, "message": str(self.cause)}
        return out

    def __str__(self) -> str:
        s = f"{self.code.value}: {self.message}"
        if self.data:
            s += " [" + ", ".join(f"{k}={_preview(v)}" for k, v in self.data.items()) + "]"
        return s


class ConfigError(LedgerError):
    def __init__(self, message="invalid configuration", **data: Any) -> None:
        super().__init__(code=CoreErrorCode.CONFIG, message=message, data=_jsonmap(data))


class SerializationError(LedgerError):
    def __init__(self, message="serialization failed", **data: Any) -> None:
        super().__init__(code=CoreErrorCode.SERIALIZATION, message=message, data=_jsonmap(data))


class DeserializationError(LedgerError):
    def __init__(self, message="deserialization failed", **data: Any) -> None:
        super().__init__(
            code=CoreErrorCode.DESERIALIZATION, message=message, data=_jsonmap(data)
        )


def _jsonmap(data: Mapping[str, Any]) -> Dict[str, Any]:
    return {k: _coerce_json(v) for k, v in data.items()}


def _coerce_json(v: Any) -> Any:
    # bytes as hex, anything non-primitive as str
    if v is None or isinstance(v, (bool, int, float, str, list, dict)):
        return v
    if isinstance(v, (bytes, bytearray)):
        return v.hex()
    return str(v)


def _preview(v: Any, limit: int = 96) -> str:
    s = str(_coerce_json(v))
    return s if len(s) <= limit else s[:limit] + "…"


__all__ = [
    "CoreErrorCode",
    "LedgerError",
    "ConfigError",
    "SerializationError",
    "DeserializationError",
]
