"""Terrain Bounded Context - Value Objects.

Immutable data structures representing geographic concepts.
All validation occurs at construction time via Pydantic.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from functools import cached_property

import numpy as np
from numpy.typing import NDArray
from pydantic import BaseModel, ConfigDict, Field, model_validator

from domain.terrain.errors import EmptyFieldError, InvalidBoundsError, OutOfRangeError


# ---------------------------------------------------------------------------
# GeoPoint
# ---------------------------------------------------------------------------
class GeoPoint(BaseModel):
    """Geographic coordinate in WGS84 (Value Object).

    Invariants:
        GP-1: latitude in [-90, 90]
        GP-2: longitude in [-180, 180]
    """

    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)

    model_config = ConfigDict(frozen=True)


# ---------------------------------------------------------------------------
# GeoBounds
# ---------------------------------------------------------------------------
class GeoBounds(BaseModel):
    """Rectangular geographic region in decimal degrees (Value Object).

    Invariants are enforced at construction time - an inverted or
    out-of-range GeoBounds cannot be instantiated.
    """

    north: float  # Northern edge (latitude)
    south: float  # Southern edge (latitude)
    east: float  # Eastern edge (longitude)
    west: float  # Western edge (longitude)

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def validate_bounds(self) -> "GeoBounds":
        for name in ("north", "south"):
            value = getattr(self, name)
            if not (-90 <= value <= 90):
                raise ValueError(f"{name} latitude out of range: {value}")
        for name in ("east", "west"):
            value = getattr(self, name)
            if not (-180 <= value <= 180):
                raise ValueError(f"{name} longitude out of range: {value}")
        if not (self.north > self.south):
            raise ValueError(
                f"Invalid latitude ordering: north={self.north} <= south={self.south}"
            )
        if not (self.east > self.west):
            raise ValueError(
                f"Invalid longitude ordering: east={self.east} <= west={self.west}"
            )
        return self

    @property
    def lat_span(self) -> float:
        return self.north - self.south

    @property
    def lng_span(self) -> float:
        return self.east - self.west

    def contains(self, point: GeoPoint) -> bool:
        """Check if point is within bounds (inclusive)."""
        return (
            self.south <= point.latitude <= self.north
            and self.west <= point.longitude <= self.east
        )


def bounds_from_edges(
    north: float, south: float, east: float, west: float
) -> GeoBounds:
    """Build GeoBounds, reporting invalid edges as InvalidBoundsError."""
    try:
        return GeoBounds(north=north, south=south, east=east, west=west)
    except ValueError as e:
        raise InvalidBoundsError(str(e)) from e


# ---------------------------------------------------------------------------
# ElevationSample
# ---------------------------------------------------------------------------
class ElevationSample(BaseModel):
    """Elevation answer for one queried coordinate (Value Object).

    ``elevation`` is None when the provider has no data for the point.
    """

    latitude: float
    longitude: float
    elevation: float | None = None

    model_config = ConfigDict(frozen=True)

    @property
    def is_nodata(self) -> bool:
        return self.elevation is None


# ---------------------------------------------------------------------------
# SampleGrid
# ---------------------------------------------------------------------------
class SampleGrid(BaseModel):
    """Ordered coordinates at which elevation is queried (Value Object).

    Points run south to north by row and west to east inside a row.
    ``row_lengths`` holds the column count of every row; rows differ in
    length only when longitude stepping is latitude-corrected.

    Invariants:
        SG-1: at least one row, every row has at least one point
        SG-2: sum(row_lengths) == len(points)
    """

    bounds: GeoBounds
    lat_step: float = Field(gt=0)  # Degrees between rows
    row_lengths: tuple[int, ...]
    points: tuple[GeoPoint, ...]

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def validate_grid(self) -> "SampleGrid":
        if not self.row_lengths:
            raise ValueError("Sample grid must have at least one row")
        if any(length < 1 for length in self.row_lengths):
            raise ValueError(f"Rows must not be empty: {self.row_lengths}")
        if sum(self.row_lengths) != len(self.points):
            raise ValueError(
                f"Row lengths sum to {sum(self.row_lengths)} "
                f"but grid holds {len(self.points)} points"
            )
        return self

    def __len__(self) -> int:
        return len(self.points)

    @property
    def rows(self) -> int:
        return len(self.row_lengths)

    @property
    def cols(self) -> int:
        """Widest row (equals every row length for a rectangular grid)."""
        return max(self.row_lengths)

    @property
    def is_rectangular(self) -> bool:
        return len(set(self.row_lengths)) == 1

    @cached_property
    def row_offsets(self) -> tuple[int, ...]:
        offsets = [0]
        for length in self.row_lengths[:-1]:
            offsets.append(offsets[-1] + length)
        return tuple(offsets)

    def index(self, row: int, col: int) -> int:
        """Flat position of (row, col); raises OutOfRangeError."""
        if not (0 <= row < self.rows):
            raise OutOfRangeError(row, col, self.rows, self.cols)
        length = self.row_lengths[row]
        if not (0 <= col < length):
            raise OutOfRangeError(row, col, self.rows, length)
        return self.row_offsets[row] + col

    def coordinates(self) -> NDArray[np.float64]:
        """Return an (n, 2) array of (latitude, longitude) in grid order."""
        return np.array(
            [(p.latitude, p.longitude) for p in self.points], dtype=np.float64
        ).reshape(len(self.points), 2)


# ---------------------------------------------------------------------------
# HeightField
# ---------------------------------------------------------------------------
class HeightField(BaseModel):
    """Possibly-gappy elevations laid out on a SampleGrid (Value Object).

    ``elevations`` and ``resolved`` are parallel to ``grid.points``. Gaps are
    recorded in ``resolved``; the value stored under a gap is meaningless and
    is never returned - ``get`` yields None instead.

    Both arrays are made read-only at construction time.
    """

    grid: SampleGrid
    elevations: NDArray[np.float64]  # 1D, len(grid)
    resolved: NDArray[np.bool_]  # 1D, len(grid); False marks a gap

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    @model_validator(mode="after")
    def validate_field(self) -> "HeightField":
        n = len(self.grid)
        if self.elevations.ndim != 1 or self.elevations.shape[0] != n:
            raise ValueError(
                f"elevations must be 1D with {n} values, got {self.elevations.shape}"
            )
        if self.resolved.ndim != 1 or self.resolved.shape[0] != n:
            raise ValueError(
                f"resolved mask must be 1D with {n} values, got {self.resolved.shape}"
            )
        if self.resolved.dtype != np.bool_:
            raise ValueError(f"resolved mask must be bool, got {self.resolved.dtype}")
        if not np.isfinite(self.elevations[self.resolved]).all():
            raise ValueError("Resolved elevations must be finite")

        # Owned, read-only copies; caller arrays are never frozen in place.
        elevations = np.array(self.elevations, dtype=np.float64, copy=True)
        resolved = np.array(self.resolved, dtype=np.bool_, copy=True)
        elevations.flags.writeable = False
        resolved.flags.writeable = False
        object.__setattr__(self, "elevations", elevations)
        object.__setattr__(self, "resolved", resolved)
        return self

    @classmethod
    def from_results(
        cls, grid: SampleGrid, elevations: Sequence[float | None]
    ) -> "HeightField":
        """Build a field from per-point results in grid order.

        Args:
            grid: The queried SampleGrid
            elevations: One entry per grid point; None marks a gap

        Raises:
            ValueError: If lengths differ or a value is not finite
        """
        if len(elevations) != len(grid):
            raise ValueError(
                f"Expected {len(grid)} elevation results, got {len(elevations)}"
            )
        values = np.full(len(grid), np.nan, dtype=np.float64)
        resolved = np.zeros(len(grid), dtype=np.bool_)
        for i, elevation in enumerate(elevations):
            if elevation is None:
                continue
            value = float(elevation)
            if not math.isfinite(value):
                raise ValueError(f"Non-finite elevation at index {i}: {elevation}")
            values[i] = value
            resolved[i] = True
        return cls(grid=grid, elevations=values, resolved=resolved)

    @property
    def rows(self) -> int:
        return self.grid.rows

    @property
    def cols(self) -> int:
        return self.grid.cols

    @property
    def row_lengths(self) -> tuple[int, ...]:
        return self.grid.row_lengths

    @property
    def is_rectangular(self) -> bool:
        return self.grid.is_rectangular

    def get(self, row: int, col: int) -> float | None:
        """Return elevation at (row, col), or None for an unresolved sample.

        Raises:
            OutOfRangeError: If (row, col) is outside the grid
        """
        idx = self.grid.index(row, col)
        if not self.resolved[idx]:
            return None
        return float(self.elevations[idx])

    def max_elevation(self) -> float:
        """Highest resolved elevation; raises EmptyFieldError if none."""
        return float(np.max(self._resolved_values()))

    def min_elevation(self) -> float:
        """Lowest resolved elevation; raises EmptyFieldError if none."""
        return float(np.min(self._resolved_values()))

    def _resolved_values(self) -> NDArray[np.float64]:
        values = self.elevations[self.resolved]
        if values.size == 0:
            raise EmptyFieldError("Height field has no resolved elevation")
        return values

    def resolved_count(self) -> int:
        return int(np.count_nonzero(self.resolved))

    def nodata_count(self) -> int:
        """Return number of unresolved samples."""
        return len(self.grid) - self.resolved_count()

    def nodata_ratio(self) -> float:
        """Return fraction of samples that are unresolved (0.0 to 1.0)."""
        return self.nodata_count() / len(self.grid)

    def resolved_points(self) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
        """Return ((k, 2) lat/lng array, (k,) elevations) in grid order."""
        coords = self.grid.coordinates()[self.resolved]
        return coords, self.elevations[self.resolved]

    def to_rows(self) -> tuple[tuple[float | None, ...], ...]:
        """Nested per-row tuples with None for gaps."""
        return tuple(
            tuple(self.get(row, col) for col in range(length))
            for row, length in enumerate(self.row_lengths)
        )
