"""Terrain Bounded Context - Sample Grid Generation.

Turns a GeoBounds and a resolution into the ordered coordinates that are
sent to the elevation source. Rows run south to north, columns west to east.

Equirectangular approximation only: one degree of latitude is KM_PER_DEGREE
kilometres everywhere, one degree of longitude shrinks with cos(latitude).
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterator

from domain.terrain.config import ResolutionMode, TerrainConfig
from domain.terrain.errors import GridTooLargeError, InvalidBoundsError
from domain.terrain.value_objects import GeoBounds, GeoPoint, SampleGrid

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------
KM_PER_DEGREE = 111.32

# An axis span within step * STEP_TOLERANCE of an exact multiple of the step
# counts as that multiple (floating error must not add or drop a row/column).
STEP_TOLERANCE = 1e-6

# cos(latitude) below this is treated as a pole
POLE_COS_EPSILON = 1e-12


# ---------------------------------------------------------------------------
# Step helpers
# ---------------------------------------------------------------------------
def latitude_step(resolution: float, mode: ResolutionMode) -> float:
    """Degrees between consecutive rows."""
    if mode is ResolutionMode.METRIC:
        return resolution / KM_PER_DEGREE
    return resolution


def longitude_step(lat_step: float, latitude: float, corrected: bool) -> float:
    """Degrees between consecutive columns on a row at ``latitude``.

    With correction this is ``resolution / (KM_PER_DEGREE * cos(lat))`` in
    metric mode, i.e. roughly constant ground spacing.
    """
    if not corrected:
        return lat_step
    cos_lat = math.cos(math.radians(latitude))
    if cos_lat < POLE_COS_EPSILON:
        # Pole: a single column covers the whole row
        return math.inf
    return lat_step / cos_lat


def axis_count(span: float, step: float) -> int:
    """Number of samples along an axis: ceil(span / step), at least one."""
    if math.isinf(step):
        return 1
    return max(1, math.ceil(span / step - STEP_TOLERANCE))


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------
def _validate(bounds: GeoBounds, resolution: float) -> None:
    if not math.isfinite(resolution) or resolution <= 0:
        raise InvalidBoundsError(f"Resolution must be positive: {resolution}")
    if not (bounds.north > bounds.south and bounds.east > bounds.west):
        raise InvalidBoundsError(
            f"Inverted bounds: north={bounds.north} south={bounds.south} "
            f"east={bounds.east} west={bounds.west}"
        )


def _row_plan(
    bounds: GeoBounds, lat_step: float, corrected: bool
) -> Iterator[tuple[float, float, int]]:
    """Yield (latitude, longitude step, column count) per row."""
    for row in range(axis_count(bounds.lat_span, lat_step)):
        lat = bounds.south + row * lat_step
        lng_step = longitude_step(lat_step, lat, corrected)
        yield lat, lng_step, axis_count(bounds.lng_span, lng_step)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------
def generate(
    bounds: GeoBounds,
    resolution: float,
    *,
    mode: ResolutionMode = ResolutionMode.DEGREES,
    longitude_correction: bool = False,
) -> Iterator[GeoPoint]:
    """Lazily generate sample coordinates over ``bounds``.

    Arguments are validated immediately; the returned generator is single
    pass and yields the same points for the same inputs.

    Raises:
        InvalidBoundsError: If resolution <= 0 or bounds are inverted
    """
    _validate(bounds, resolution)
    lat_step = latitude_step(resolution, mode)

    def walk() -> Iterator[GeoPoint]:
        for lat, lng_step, n_cols in _row_plan(bounds, lat_step, longitude_correction):
            for col in range(n_cols):
                # col 0 sits on the west edge even when lng_step is inf (pole)
                lng = bounds.west + col * lng_step if col else bounds.west
                yield GeoPoint(latitude=lat, longitude=lng)

    return walk()


def generate_sample_grid(
    bounds: GeoBounds,
    resolution: float,
    *,
    mode: ResolutionMode = ResolutionMode.DEGREES,
    longitude_correction: bool = False,
    max_samples: int | None = None,
) -> SampleGrid:
    """Materialize the sample grid, checking the sample budget first.

    Raises:
        InvalidBoundsError: If resolution <= 0 or bounds are inverted
        GridTooLargeError: If the grid would hold more than max_samples points
    """
    _validate(bounds, resolution)
    lat_step = latitude_step(resolution, mode)
    row_lengths = tuple(
        n_cols for _, _, n_cols in _row_plan(bounds, lat_step, longitude_correction)
    )

    total = sum(row_lengths)
    if max_samples is not None and total > max_samples:
        raise GridTooLargeError(
            f"Sample grid of {total} points exceeds budget of {max_samples}"
        )

    points = tuple(
        generate(
            bounds, resolution, mode=mode, longitude_correction=longitude_correction
        )
    )
    logger.debug(
        "Sample grid: %d rows, %d-%d cols, %d points",
        len(row_lengths),
        min(row_lengths),
        max(row_lengths),
        total,
    )
    return SampleGrid(
        bounds=bounds, lat_step=lat_step, row_lengths=row_lengths, points=points
    )


def grid_for_config(config: TerrainConfig) -> SampleGrid:
    """Sample grid described by a TerrainConfig."""
    return generate_sample_grid(
        config.bounds,
        config.resolution,
        mode=config.resolution_mode,
        longitude_correction=config.longitude_correction,
        max_samples=config.max_samples,
    )
