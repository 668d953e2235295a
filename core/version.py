"""
Version helpers for the fee map libraries.

- Exposes __version__ (PEP 440).
- FEEMAP_VERSION in the environment overrides the built-in value (release
  tooling stamps builds this way).
"""

from __future__ import annotations

import os

DEFAULT_VERSION = "0.1.0"

__version__: str = os.environ.get("FEEMAP_VERSION") or DEFAULT_VERSION

__all__ = ["__version__", "DEFAULT_VERSION"]
