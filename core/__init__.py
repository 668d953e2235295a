"""
Core package.

Canonical value types (token ids, responder ids), deterministic encodings,
configuration, logging and errors shared by the consensus-side fee map.

Only re-exports the version here to keep import-time side effects near zero.
"""

from __future__ import annotations

from .version import __version__


def get_version() -> str:
    """Return the semantic version string for this package."""
    return __version__


__all__ = ["__version__", "get_version"]
