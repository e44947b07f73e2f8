"""
Pytest configuration and shared fixtures for the compliance-loop project.
"""
from datetime import datetime, timezone

import pytest
from hypothesis import settings, Verbosity

from tests.helpers import SequenceIdGenerator

# Configure Hypothesis settings for all property-based tests
settings.register_profile(
    "default",
    max_examples=100,
    deadline=5000,
    suppress_health_check=[],
    verbosity=Verbosity.normal,
)

settings.register_profile(
    "ci",
    max_examples=200,
    deadline=10000,
    suppress_health_check=[],
    verbosity=Verbosity.quiet,
)

settings.register_profile(
    "debug",
    max_examples=10,
    deadline=None,
    suppress_health_check=[],
    verbosity=Verbosity.verbose,
)

settings.load_profile("default")


@pytest.fixture
def fixed_clock():
    """Clock pinned to 2026-01-01 09:30 UTC."""
    from compliance_loop.core.clock import FixedClock
    return FixedClock(datetime(2026, 1, 1, 9, 30, tzinfo=timezone.utc))


@pytest.fixture
def id_generator():
    """Deterministic id generator."""
    return SequenceIdGenerator()


@pytest.fixture
def in_memory_repository():
    """Provide a fresh in-memory repository for each test."""
    from compliance_loop.repository.in_memory import InMemoryCaseRepository
    return InMemoryCaseRepository()
