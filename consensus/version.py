"""Consensus package version (tracks the core release)."""

from __future__ import annotations

from core.version import __version__

__all__ = ["__version__"]
