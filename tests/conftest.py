"""Shared fixtures for relay zone tests."""

import pytest

from relay_zone.config import FitConfig
from relay_zone.geometry.shapes import CharacteristicParams, DataPoint


@pytest.fixture
def scenario_points():
    """One fault point per zone on the 45 degree line."""
    return [DataPoint(5, 5, 1), DataPoint(15, 15, 2), DataPoint(25, 25, 3)]


@pytest.fixture
def relay_defaults():
    """Settings screen defaults of a fresh relay."""
    return CharacteristicParams(
        dist_char_angle=75, x_reach=30, r_reach=30,
        a1_angle=30, a2_angle=22, inclination_angle=0,
    )


@pytest.fixture
def nested_settings():
    """Previously commissioned settings, strictly nested."""
    return {
        1: CharacteristicParams(80, 10, 10, 30, 30, 0),
        2: CharacteristicParams(80, 20, 20, 30, 30, 0),
        3: CharacteristicParams(80, 30, 30, 30, 30, 0),
    }


@pytest.fixture
def small_config():
    """Fast search for tests."""
    return FitConfig(population_size=20, generations=5, rng_seed=7)
