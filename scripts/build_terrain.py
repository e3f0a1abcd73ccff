#!/usr/bin/env python3
"""Build a terrain height field from Open-Elevation and report on it.

Samples the configured bounds, resolves elevations over HTTP, writes heights
into a plane mesh with one vertex per sample column/row and prints a summary.
Nothing is written to disk.

Usage:
    python scripts/build_terrain.py configs/fuji.toml
    python scripts/build_terrain.py --demo --strategy nearest -v

Requirements:
    pip install -e .
"""

from __future__ import annotations

import argparse
import asyncio
import logging

from domain.terrain.config import ResampleStrategy, TerrainConfig
from domain.terrain.errors import BuildError, TerrainError
from domain.terrain.sampling import grid_for_config
from domain.terrain.services import BuildResult, TerrainBuilder
from domain.terrain.value_objects import GeoBounds
from infrastructure.config import load_config
from infrastructure.elevation import OpenElevationSource
from infrastructure.elevation.open_elevation import DEFAULT_ENDPOINT
from infrastructure.http import make_http_session
from infrastructure.http.client import DEFAULT_TIMEOUT_S
from infrastructure.mesh import PlaneGrid
from shared.scenarios import FUJI_BOUNDS, FUJI_RESOLUTION_DEG

logger = logging.getLogger("build_terrain")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("config", nargs="?", help="TOML terrain configuration")
    source.add_argument(
        "--demo", action="store_true", help="Mt. Fuji summit at 0.01 degrees"
    )
    parser.add_argument(
        "--strategy",
        choices=[s.value for s in ResampleStrategy],
        help="Override the configured resample strategy",
    )
    parser.add_argument("--endpoint", default=DEFAULT_ENDPOINT)
    parser.add_argument(
        "--batch-size", type=int, default=None, help="Max points per request"
    )
    parser.add_argument("--timeout", type=float, default=DEFAULT_TIMEOUT_S)
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser.parse_args(argv)


def resolve_config(args: argparse.Namespace) -> TerrainConfig:
    if args.demo:
        config = TerrainConfig(
            bounds=GeoBounds(**FUJI_BOUNDS),
            resolution=FUJI_RESOLUTION_DEG,
            resample_strategy=ResampleStrategy.DIRECT,
        )
    else:
        config = load_config(args.config)
    if args.strategy:
        config = TerrainConfig.model_validate(
            {**config.model_dump(), "resample_strategy": args.strategy}
        )
    return config


def plane_for(config: TerrainConfig) -> PlaneGrid:
    """One vertex per sample; the widest row sets the column count."""
    grid = grid_for_config(config)
    if grid.is_rectangular:
        return PlaneGrid.for_sample_grid(grid)
    return PlaneGrid(grid.cols - 1, grid.rows - 1, grid.cols - 1, grid.rows - 1)


def print_summary(result: BuildResult) -> None:
    field = result.height_field
    low, high = result.min_elevation, result.max_elevation
    print(f"Height field:     {field.rows} rows x {field.cols} cols")
    print(f"Samples:          {len(field.grid)} ({field.nodata_count()} no data)")
    print(f"No-data ratio:    {field.nodata_ratio():.1%}")
    print(f"Elevation range:  {low:.1f} .. {high:.1f} m")
    print(f"Strategy:         {result.strategy.value}")
    print(f"Vertices:         {result.vertex_count}")
    print(f"Missing vertices: {result.missing_vertex_count}")


async def run(args: argparse.Namespace) -> int:
    try:
        config = resolve_config(args)
        mesh = plane_for(config)
    except (TerrainError, ValueError, FileNotFoundError) as e:
        logger.error("Cannot prepare build: %s", e)
        return 1

    async with make_http_session(timeout_s=args.timeout) as session:
        source = OpenElevationSource(
            session, endpoint=args.endpoint, max_batch_size=args.batch_size
        )
        try:
            result = await TerrainBuilder(config, source).build(mesh)
        except BuildError as e:
            logger.error("Build failed (%s): %s", e.reason.value, e)
            return 1

    print_summary(result)
    return 0


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    return asyncio.run(run(args))


if __name__ == "__main__":
    raise SystemExit(main())
