"""Shared pytest fixtures."""

from datetime import datetime

import pytest

from random_source import RandomSource
from type import GenerationContext


@pytest.fixture
def reference_date() -> datetime:
    """Fixed "now" so date windows are reproducible."""
    return datetime(2024, 6, 15, 12, 0, 0)


@pytest.fixture
def random_source() -> RandomSource:
    return RandomSource(seed=1234)


@pytest.fixture
def ctx(random_source: RandomSource, reference_date: datetime) -> GenerationContext:
    """A depth-0 context over a seeded source."""
    return GenerationContext(
        random_source=random_source,
        reference_date=reference_date,
    )
