"""Shared fixtures for polygon_evolution tests."""

from __future__ import annotations

import random

import pytest

from polygon_evolution import EvolutionConfig
from tests.helpers import solid_reference


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture
def small_config() -> EvolutionConfig:
    return EvolutionConfig(
        vertex_count=3,
        polygon_count=4,
        population_size=6,
        generations=3,
        tournament_size=2,
        elitism_rate=0.2,
        mutation_rate=0.2,
        mutation_amount=0.2,
        supersample=1,
        seed=5,
    )


@pytest.fixture
def target():
    """Small colored target; random candidates score well below 1.0 against it."""
    return solid_reference(8, 8, (200, 40, 90, 255))
