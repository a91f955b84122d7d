# tests/conftest.py
"""Shared test fixtures.

Registry Isolation:
    The process-wide TypeDefaultRegistry and the cached settings are global
    state. The autouse fixture below resets both after every test, the same
    teardown discipline callers of the library are expected to follow.

Hypothesis Configuration:
- "ci" profile: Fast tests for CI (100 examples) - default
- "nightly" profile: Thorough tests (1000 examples)
- "debug" profile: Minimal tests with verbose output (10 examples)

Set profile via environment variable:
    HYPOTHESIS_PROFILE=nightly pytest tests/property/
"""

import os
from collections.abc import Iterator

import pytest
from hypothesis import Phase, Verbosity, settings

from beanunit import reset_to_default_types
from beanunit.core.config import BeanunitSettings, configure_settings


@pytest.fixture(autouse=True)
def _reset_global_state() -> Iterator[None]:
    """Start every test from the built-in registry baseline and default settings."""
    configure_settings(BeanunitSettings())
    try:
        yield
    finally:
        reset_to_default_types()
        configure_settings(None)


@pytest.fixture
def default_settings() -> BeanunitSettings:
    return BeanunitSettings()


# =============================================================================
# Hypothesis profiles
# =============================================================================

_PHASES = [Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink]

# Asserters introspect and construct per example, so no per-example deadline
settings.register_profile("ci", max_examples=100, phases=_PHASES, deadline=None)
settings.register_profile("nightly", max_examples=1000, phases=_PHASES, deadline=None)
settings.register_profile("debug", max_examples=10, verbosity=Verbosity.verbose, phases=_PHASES, deadline=None)

settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "ci"))
