"""
Protocol-wide unit constants.

Token amounts are integers in the smallest denomination of each token. For
MOB that is the picoMOB (1e-12 MOB).
"""

from __future__ import annotations

# 1 MOB = 1e12 picoMOB
MOB_TO_PICOMOB: int = 1_000_000_000_000

# 1 microMOB = 1e6 picoMOB
MICROMOB_TO_PICOMOB: int = 1_000_000

# Upper bounds of the fixed-width integers used on-wire.
U32_MAX: int = 0xFFFF_FFFF
U64_MAX: int = 0xFFFF_FFFF_FFFF_FFFF

__all__ = ["MOB_TO_PICOMOB", "MICROMOB_TO_PICOMOB", "U32_MAX", "U64_MAX"]
