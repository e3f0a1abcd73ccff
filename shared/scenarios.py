"""Reference build scenario shared by scripts/build_terrain.py and tests.

Mt. Fuji summit area: small enough for a single Open-Elevation request at
0.01 degree steps.
"""

from __future__ import annotations

FUJI_BOUNDS: dict[str, float] = {
    "north": 35.397,
    "south": 35.33,
    "east": 138.78,
    "west": 138.69,
}
FUJI_RESOLUTION_DEG = 0.01

# ceil(0.067 / 0.01) rows x ceil(0.09 / 0.01) cols
FUJI_GRID_SHAPE: tuple[int, int] = (7, 9)
