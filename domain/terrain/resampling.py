"""Terrain Bounded Context - Mesh Vertex Resampling.

Maps a mesh vertex's planar position onto a HeightField value.

Both strategies first normalize the vertex position against the geometry's
logical size:

    u = (x + size_x / 2) / size_x      # 0 = west edge, 1 = east edge
    v = (y + size_y / 2) / size_y      # 0 = south edge, 1 = north edge

Row 0 of the height field is its southern row, so y grows northwards.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from typing import Protocol

import numpy as np
from numpy.typing import NDArray

from domain.terrain.config import ResampleStrategy
from domain.terrain.errors import CardinalityMismatchError, EmptyFieldError
from domain.terrain.repositories import MeshGeometry
from domain.terrain.value_objects import GeoBounds, HeightField

# Max elements of the query x sample distance matrix per nearest-neighbor batch
DISTANCE_BUDGET = 1 << 22


class Resampler(Protocol):
    """Vertex position -> elevation (None when no data applies)."""

    def sample(self, x: float, y: float) -> float | None: ...

    def sample_many(
        self, xs: Sequence[float], ys: Sequence[float]
    ) -> list[float | None]: ...


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _check_size(size: tuple[float, float]) -> None:
    if size[0] <= 0 or size[1] <= 0:
        raise ValueError(f"Geometry size must be positive: {size}")


# ---------------------------------------------------------------------------
# DirectIndex
# ---------------------------------------------------------------------------
class DirectIndexResampler:
    """Exact grid-aligned lookup.

    Valid only when the field is rectangular and has exactly one sample per
    mesh vertex (rows/cols == height/width segments + 1). For the matched
    mesh whose size equals its segment count this is
    ``col = round(x + size_x / 2)``, ``row = round(y + size_y / 2)``.
    """

    def __init__(
        self,
        field: HeightField,
        size: tuple[float, float],
        segments: tuple[int, int],
    ) -> None:
        _check_size(size)
        if not field.is_rectangular:
            raise CardinalityMismatchError(
                "Direct indexing needs a rectangular grid; rows have lengths "
                f"{min(field.row_lengths)}-{max(field.row_lengths)}"
            )
        expected = (segments[1] + 1, segments[0] + 1)
        if (field.rows, field.cols) != expected:
            raise CardinalityMismatchError(
                f"Height field is {field.rows}x{field.cols} but mesh has "
                f"{expected[0]}x{expected[1]} vertices"
            )
        self.field = field
        self.size = size

    def cell(self, x: float, y: float) -> tuple[int, int]:
        """(row, col) a vertex rounds to; may lie outside the field."""
        size_x, size_y = self.size
        u = (x + size_x / 2) / size_x
        v = (y + size_y / 2) / size_y
        return (
            _round_half_up(v * (self.field.rows - 1)),
            _round_half_up(u * (self.field.cols - 1)),
        )

    def sample(self, x: float, y: float) -> float | None:
        row, col = self.cell(x, y)
        if not (0 <= row < self.field.rows and 0 <= col < self.field.cols):
            return None
        return self.field.get(row, col)

    def sample_many(
        self, xs: Sequence[float], ys: Sequence[float]
    ) -> list[float | None]:
        return [self.sample(x, y) for x, y in zip(xs, ys, strict=True)]


# ---------------------------------------------------------------------------
# NearestNeighbor
# ---------------------------------------------------------------------------
class NearestNeighborResampler:
    """Distance-based lookup among resolved samples.

    The vertex is mapped to (lat, lng) by linear interpolation across the
    bounds, then the resolved sample with the smallest Euclidean distance in
    (lat, lng) space wins. Ties go to the first sample in grid order.

    O(n) per query. Works for any grid shape, including the non-rectangular
    grids produced by latitude-corrected longitude stepping.
    """

    def __init__(
        self, field: HeightField, bounds: GeoBounds, size: tuple[float, float]
    ) -> None:
        _check_size(size)
        coords, elevations = field.resolved_points()
        if elevations.size == 0:
            raise EmptyFieldError("No resolved sample to resample from")
        self.bounds = bounds
        self.size = size
        self._lat = coords[:, 0]
        self._lng = coords[:, 1]
        self._elevations = elevations

    def to_geo(
        self, xs: NDArray[np.float64], ys: NDArray[np.float64]
    ) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
        """Planar positions -> (latitudes, longitudes)."""
        size_x, size_y = self.size
        u = (xs + size_x / 2) / size_x
        v = (ys + size_y / 2) / size_y
        lat = self.bounds.south + v * self.bounds.lat_span
        lng = self.bounds.west + u * self.bounds.lng_span
        return lat, lng

    def _nearest(
        self, lat: NDArray[np.float64], lng: NDArray[np.float64]
    ) -> NDArray[np.float64]:
        d2 = (lat[:, None] - self._lat[None, :]) ** 2 + (
            lng[:, None] - self._lng[None, :]
        ) ** 2
        # argmin returns the first minimum -> grid-order tie-break
        return self._elevations[np.argmin(d2, axis=1)]

    def sample(self, x: float, y: float) -> float:
        lat, lng = self.to_geo(
            np.array([x], dtype=np.float64), np.array([y], dtype=np.float64)
        )
        return float(self._nearest(lat, lng)[0])

    def sample_many(
        self, xs: Sequence[float], ys: Sequence[float]
    ) -> list[float | None]:
        xs_arr = np.asarray(xs, dtype=np.float64)
        ys_arr = np.asarray(ys, dtype=np.float64)
        if xs_arr.shape != ys_arr.shape:
            raise ValueError(
                f"xs and ys differ in shape: {xs_arr.shape} vs {ys_arr.shape}"
            )
        lat, lng = self.to_geo(xs_arr, ys_arr)
        chunk = max(1, DISTANCE_BUDGET // self._elevations.size)
        out: list[float | None] = []
        for start in range(0, lat.shape[0], chunk):
            stop = start + chunk
            nearest = self._nearest(lat[start:stop], lng[start:stop])
            out.extend(float(e) for e in nearest)
        return out


# ---------------------------------------------------------------------------
# Factory
# ---------------------------------------------------------------------------
def make_resampler(
    strategy: ResampleStrategy,
    field: HeightField,
    bounds: GeoBounds,
    mesh: MeshGeometry,
) -> Resampler:
    """Build the configured resampler for ``mesh``.

    Raises:
        CardinalityMismatchError: Direct strategy on a mismatching grid
        EmptyFieldError: Nearest strategy on a field without resolved samples
    """
    if strategy is ResampleStrategy.DIRECT:
        return DirectIndexResampler(field, mesh.size, mesh.segments)
    return NearestNeighborResampler(field, bounds, mesh.size)
