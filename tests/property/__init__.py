# -*- coding: utf-8 -*-
"""
tests.property package bootstrap.

Registers Hypothesis profiles (dev/ci/fast) and picks one from
HYPOTHESIS_PROFILE, otherwise "ci" when CI is set and "dev" locally.
"""
from __future__ import annotations

import os

from hypothesis import HealthCheck, settings

settings.register_profile(
    "dev",
    settings(max_examples=100, deadline=None, suppress_health_check=(HealthCheck.too_slow,)),
)
settings.register_profile(
    "ci",
    settings(
        max_examples=300,
        deadline=None,
        suppress_health_check=(HealthCheck.too_slow,),
        derandomize=True,
    ),
)
settings.register_profile("fast", settings(max_examples=25, deadline=None))

settings.load_profile(os.environ.get("HYPOTHESIS_PROFILE") or ("ci" if os.environ.get("CI") else "dev"))
