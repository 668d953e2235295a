"""
ResponderId: opaque network address of a peer (e.g. "1.2.3.4:5").

The core never parses or validates the contents; it only derives new ids
from existing ones by appending suffixes.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ResponderId:
    value: str

    def __post_init__(self) -> None:
        if not isinstance(self.value, str):
            raise TypeError(f"ResponderId expects str, got {type(self.value).__name__}")

    def with_suffix(self, suffix: str) -> "ResponderId":
        """Return `<self>-<suffix>`."""
        return ResponderId(f"{self.value}-{suffix}")

    def __str__(self) -> str:
        return self.value


__all__ = ["ResponderId"]
