"""Root pytest configuration for all tests.

Provides the reference Mt. Fuji scenario shared with scripts/build_terrain.py.
"""

import pytest

from domain.terrain.config import TerrainConfig
from domain.terrain.value_objects import GeoBounds
from shared.scenarios import FUJI_BOUNDS, FUJI_RESOLUTION_DEG


@pytest.fixture
def fuji_bounds() -> GeoBounds:
    """Bounds: lat [35.33, 35.397], lon [138.69, 138.78]."""
    return GeoBounds(**FUJI_BOUNDS)


@pytest.fixture
def fuji_config(fuji_bounds: GeoBounds) -> TerrainConfig:
    """Uniform 0.01 degree grid, default (nearest) resampling."""
    return TerrainConfig(bounds=fuji_bounds, resolution=FUJI_RESOLUTION_DEG)
