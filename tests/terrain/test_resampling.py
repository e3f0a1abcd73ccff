"""Tests for mesh vertex resampling (DirectIndex / NearestNeighbor)."""

from __future__ import annotations

import numpy as np
import pytest

from domain.terrain import resampling
from domain.terrain.config import ResampleStrategy
from domain.terrain.errors import CardinalityMismatchError, EmptyFieldError
from domain.terrain.resampling import (
    DirectIndexResampler,
    NearestNeighborResampler,
    make_resampler,
)
from domain.terrain.sampling import generate_sample_grid
from domain.terrain.value_objects import GeoBounds, GeoPoint, HeightField, SampleGrid


# ---------------------------------------------------------------------------
# Test Fixture Helpers
# ---------------------------------------------------------------------------
def create_field(
    rows: int, cols: int, values: list[float | None] | None = None
) -> HeightField:
    """rows x cols field at 1 degree; default cell value = row * 100 + col."""
    bounds = GeoBounds(north=float(rows), south=0.0, east=float(cols), west=0.0)
    grid = generate_sample_grid(bounds, 1.0)
    if values is None:
        values = [float(r * 100 + c) for r in range(rows) for c in range(cols)]
    return HeightField.from_results(grid, values)


def vertex_xy(row: int, col: int, rows: int, cols: int) -> tuple[float, float]:
    """Planar position of the matched-mesh vertex over cell (row, col)."""
    return col - (cols - 1) / 2, row - (rows - 1) / 2


# ===========================================================================
# DirectIndex
# ===========================================================================
@pytest.mark.parametrize(("rows", "cols"), [(7, 9), (2, 2), (4, 3), (5, 6)])
def test_direct_index_reproduces_every_cell(rows, cols):
    field = create_field(rows, cols)
    segments = (cols - 1, rows - 1)
    resampler = DirectIndexResampler(field, segments, segments)

    for row in range(rows):
        for col in range(cols):
            x, y = vertex_xy(row, col, rows, cols)
            assert resampler.sample(x, y) == field.get(row, col)


def test_direct_index_matches_round_of_offset_position():
    """Matched mesh: col = round(x + size_x / 2), row = round(y + size_y / 2)."""
    field = create_field(7, 9)
    resampler = DirectIndexResampler(field, (8, 6), (8, 6))

    assert resampler.cell(-4.0, -3.0) == (0, 0)
    assert resampler.cell(4.0, 3.0) == (6, 8)
    assert resampler.cell(0.0, 0.0) == (3, 4)
    assert resampler.cell(0.5, 1.0) == (4, 5)  # half rounds up
    assert resampler.cell(0.49, -0.49) == (3, 4)


def test_direct_index_scales_with_geometry_size():
    """Same cardinality, geometry 10x larger: still hits the same cells."""
    field = create_field(3, 5)
    resampler = DirectIndexResampler(field, (40.0, 20.0), (4, 2))

    assert resampler.sample(-20.0, -10.0) == field.get(0, 0)
    assert resampler.sample(20.0, 10.0) == field.get(2, 4)
    assert resampler.sample(10.0, 0.0) == field.get(1, 3)


def test_direct_index_out_of_bounds_returns_none():
    field = create_field(3, 3)
    resampler = DirectIndexResampler(field, (2, 2), (2, 2))

    assert resampler.sample(5.0, 0.0) is None
    assert resampler.sample(0.0, -5.0) is None
    assert resampler.sample(-1.6, 0.0) is None


def test_direct_index_gap_returns_none():
    values: list[float | None] = [1.0] * 9
    values[4] = None
    field = create_field(3, 3, values)
    resampler = DirectIndexResampler(field, (2, 2), (2, 2))

    assert resampler.sample(0.0, 0.0) is None
    assert resampler.sample(1.0, 0.0) == 1.0


def test_direct_index_rejects_cardinality_mismatch():
    field = create_field(3, 4)

    with pytest.raises(CardinalityMismatchError, match="3x4"):
        DirectIndexResampler(field, (4, 2), (4, 2))


def test_direct_index_rejects_non_rectangular_grid():
    bounds = GeoBounds(north=60.0, south=0.0, east=10.0, west=0.0)
    grid = generate_sample_grid(bounds, 1.0, longitude_correction=True)
    field = HeightField.from_results(grid, [1.0] * len(grid))

    with pytest.raises(CardinalityMismatchError, match="rectangular"):
        DirectIndexResampler(field, (9, 59), (9, 59))


def test_direct_index_sample_many_matches_sample():
    field = create_field(4, 3)
    resampler = DirectIndexResampler(field, (2, 3), (2, 3))
    xs = [-1.0, 0.0, 1.0, 7.0]
    ys = [-1.5, 0.5, 1.5, 0.0]

    assert resampler.sample_many(xs, ys) == [
        resampler.sample(x, y) for x, y in zip(xs, ys)
    ]


# ===========================================================================
# NearestNeighbor
# ===========================================================================
def test_nearest_single_resolved_sample_answers_everywhere():
    values: list[float | None] = [None] * 12
    values[7] = 321.0
    field = create_field(3, 4, values)
    resampler = NearestNeighborResampler(field, field.grid.bounds, (3, 2))

    for x, y in [(-1.5, -1.0), (1.5, 1.0), (0.0, 0.0), (100.0, -100.0)]:
        assert resampler.sample(x, y) == 321.0


def test_nearest_maps_corners_to_bounds():
    field = create_field(3, 4)
    bounds = field.grid.bounds
    resampler = NearestNeighborResampler(field, bounds, (3, 2))

    lat, lng = resampler.to_geo(np.array([-1.5, 1.5]), np.array([-1.0, 1.0]))

    assert lat.tolist() == [bounds.south, bounds.north]
    assert lng.tolist() == [bounds.west, bounds.east]


def test_nearest_picks_closest_sample():
    field = create_field(3, 4)  # samples at lat 0..2, lon 0..3
    # size 4 x 3 over bounds lon [0, 4], lat [0, 3]: x = lng - 2, y = lat - 1.5
    resampler = NearestNeighborResampler(field, field.grid.bounds, (4, 3))

    assert resampler.sample(1.0 - 2, 2.0 - 1.5) == field.get(2, 1)
    assert resampler.sample(2.9 - 2, 0.1 - 1.5) == field.get(0, 3)


def test_nearest_tie_goes_to_first_sample_in_grid_order():
    bounds = GeoBounds(north=1.0, south=0.0, east=2.0, west=0.0)
    grid = generate_sample_grid(bounds, 1.0)  # (0, 0) and (0, 1)
    field = HeightField.from_results(grid, [10.0, 20.0])
    resampler = NearestNeighborResampler(field, bounds, (2.0, 1.0))

    # x = -0.5 -> lng 0.5, equidistant from both samples
    assert resampler.sample(-0.5, 0.0) == 10.0


def test_nearest_skips_unresolved_samples():
    field = create_field(1, 3, [5.0, None, 7.0])
    bounds = field.grid.bounds  # lon [0, 3]
    resampler = NearestNeighborResampler(field, bounds, (3.0, 1.0))

    # lng 1.1: the gap at lng 1 is skipped, lng 2 (0.9) beats lng 0 (1.1)
    assert resampler.sample(1.1 - 1.5, 0.0) == 7.0


def test_nearest_works_on_non_rectangular_grid():
    bounds = GeoBounds(north=2.0, south=0.0, east=3.0, west=0.0)
    points = tuple(
        GeoPoint(latitude=lat, longitude=lng)
        for lat, lng in [(0, 0), (0, 1), (0, 2), (1, 0), (1, 1.5)]
    )
    grid = SampleGrid(bounds=bounds, lat_step=1.0, row_lengths=(3, 2), points=points)
    field = HeightField.from_results(grid, [1.0, 2.0, 3.0, 4.0, 5.0])
    resampler = NearestNeighborResampler(field, bounds, (3.0, 2.0))

    # lat 1, lng 1.6 -> (1, 1.5)
    assert resampler.sample(1.6 - 1.5, 0.0) == 5.0


def test_nearest_on_empty_field_raises():
    field = create_field(2, 2, [None, None, None, None])

    with pytest.raises(EmptyFieldError):
        NearestNeighborResampler(field, field.grid.bounds, (1, 1))


def test_nearest_sample_many_spans_several_chunks(monkeypatch):
    field = create_field(4, 5)
    resampler = NearestNeighborResampler(field, field.grid.bounds, (5.0, 4.0))
    monkeypatch.setattr(resampling, "DISTANCE_BUDGET", 20 * 7)  # 7 queries per batch
    n = 50
    xs = [-2.5 + 5.0 * i / (n - 1) for i in range(n)]
    ys = [2.0 - 4.0 * i / (n - 1) for i in range(n)]

    many = resampler.sample_many(xs, ys)

    assert len(many) == n
    for i in (0, 6, 7, 13, 14, n - 1):
        assert many[i] == resampler.sample(xs[i], ys[i])


def test_nearest_sample_many_rejects_shape_mismatch():
    field = create_field(2, 2)
    resampler = NearestNeighborResampler(field, field.grid.bounds, (2.0, 2.0))

    with pytest.raises(ValueError):
        resampler.sample_many([0.0, 1.0], [0.0])


def test_non_positive_geometry_size_rejected():
    field = create_field(2, 2)

    with pytest.raises(ValueError, match="size"):
        NearestNeighborResampler(field, field.grid.bounds, (0.0, 1.0))
    with pytest.raises(ValueError, match="size"):
        DirectIndexResampler(field, (1.0, -1.0), (1, 1))


# ===========================================================================
# Factory
# ===========================================================================
def test_make_resampler_selects_strategy(grid_mesh):
    field = create_field(3, 4)
    mesh = grid_mesh.matching(3, 4)

    direct = make_resampler(ResampleStrategy.DIRECT, field, field.grid.bounds, mesh)
    nearest = make_resampler(ResampleStrategy.NEAREST, field, field.grid.bounds, mesh)

    assert isinstance(direct, DirectIndexResampler)
    assert isinstance(nearest, NearestNeighborResampler)


def test_nearest_tolerates_cardinality_mismatch(grid_mesh):
    field = create_field(3, 4)
    mesh = grid_mesh(10.0, 10.0, 20, 20)

    resampler = make_resampler(
        ResampleStrategy.NEAREST, field, field.grid.bounds, mesh
    )

    assert resampler.sample(*mesh.get_xy(0)) == field.get(2, 0)  # north-west corner
