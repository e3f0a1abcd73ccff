"""Pytest configuration for terrain domain tests.

Domain tests never touch infrastructure: the elevation source and the mesh
are small in-memory fakes implementing the ports.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence

import pytest

from domain.terrain.errors import ElevationSourceError
from domain.terrain.value_objects import ElevationSample, GeoPoint

ElevationFn = Callable[[float, float], float | None]


class StubElevationSource:
    """Deterministic ElevationSource: elevation = elevation_fn(lat, lng).

    ``results`` overrides the answer entirely (e.g. [] or a short list);
    ``error`` is exposed as ``last_error`` like a failed real source;
    ``raises`` is raised from ``lookup`` instead of returning.
    """

    def __init__(
        self,
        elevation_fn: ElevationFn | None = None,
        *,
        results: list[ElevationSample] | None = None,
        error: ElevationSourceError | None = None,
        raises: ElevationSourceError | None = None,
    ) -> None:
        self.elevation_fn = elevation_fn or (lambda lat, lng: 100.0)
        self.results = results
        self.error = error
        self.raises = raises
        self.last_error: ElevationSourceError | None = None
        self.calls = 0

    async def lookup(self, coordinates: Sequence[GeoPoint]) -> list[ElevationSample]:
        self.calls += 1
        self.last_error = self.error
        if self.raises is not None:
            raise self.raises
        if self.results is not None:
            return list(self.results)
        return [
            ElevationSample(
                latitude=p.latitude,
                longitude=p.longitude,
                elevation=self.elevation_fn(p.latitude, p.longitude),
            )
            for p in coordinates
        ]


class GridMesh:
    """Minimal MeshGeometry: plane vertices, top (north) row first."""

    def __init__(
        self,
        width: float,
        height: float,
        width_segments: int,
        height_segments: int,
        initial_height: float = 0.0,
    ) -> None:
        self.size = (float(width), float(height))
        self.segments = (width_segments, height_segments)
        self.xy: list[tuple[float, float]] = []
        for iy in range(height_segments + 1):
            y = height / 2 - iy * height / height_segments
            for ix in range(width_segments + 1):
                x = ix * width / width_segments - width / 2
                self.xy.append((x, y))
        self.heights = [initial_height] * len(self.xy)
        self.writes = 0

    @classmethod
    def matching(cls, rows: int, cols: int, **kwargs: float) -> "GridMesh":
        """One vertex per sample, size == segments (cols-1 x rows-1)."""
        return cls(cols - 1, rows - 1, cols - 1, rows - 1, **kwargs)

    @property
    def vertex_count(self) -> int:
        return len(self.xy)

    def get_xy(self, index: int) -> tuple[float, float]:
        return self.xy[index]

    def set_height(self, index: int, height: float) -> None:
        self.heights[index] = height
        self.writes += 1

    def height_at(self, row: int, col: int) -> float:
        """Height of the vertex over grid cell (row, col); row 0 = south."""
        width_segments, height_segments = self.segments
        return self.heights[(height_segments - row) * (width_segments + 1) + col]


@pytest.fixture
def stub_source() -> Callable[..., StubElevationSource]:
    """Factory for StubElevationSource."""
    return StubElevationSource


@pytest.fixture
def grid_mesh() -> type[GridMesh]:
    return GridMesh
