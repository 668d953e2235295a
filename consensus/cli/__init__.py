"""
Consensus CLI package.

Modules
-------
- fee_map: inspect/validate fee maps and derive responder ids.
  Entrypoint: :func:`fee_map.main` (also `python -m consensus.cli.fee_map`).
"""

from __future__ import annotations

from .fee_map import app as fee_map_app
from .fee_map import main as fee_map_main

__all__ = ["fee_map_app", "fee_map_main"]
