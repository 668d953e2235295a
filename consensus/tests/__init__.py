"""
consensus.tests helpers

- Deterministic test defaults (RNG, Hypothesis profile).
- Shared sample fee maps used across the fee map tests.
"""

from __future__ import annotations

import os
import random

from hypothesis import settings

from core.types.token import Mob, TokenId

# Seed Python RNG (used only in tests; consensus code should be pure)
DEFAULT_TEST_SEED = int(os.environ.get("FEEMAP_TEST_SEED", "1337"))
random.seed(DEFAULT_TEST_SEED)

# Local: fewer examples for snappy feedback; no global deadline to avoid flakiness on CI
settings.register_profile("local", settings(max_examples=60, deadline=None))
settings.register_profile("ci", settings(max_examples=200, deadline=None))
settings.load_profile(os.environ.get("HYPOTHESIS_PROFILE") or ("ci" if os.environ.get("CI") else "local"))

TEST_TOKEN = TokenId(2)
OTHER_TOKEN = TokenId(30)

# A valid two-token map used by several tests.
SAMPLE_FEES = {Mob.ID: 100, TEST_TOKEN: 2000}

__all__ = ["DEFAULT_TEST_SEED", "TEST_TOKEN", "OTHER_TOKEN", "SAMPLE_FEES"]
