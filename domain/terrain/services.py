"""Terrain Bounded Context - Domain Services.

TerrainBuilder orchestrates one mesh build:

    SampleGrid -> ElevationSource -> HeightField -> Resampler -> mesh heights

NO concrete I/O here - the elevation provider and the mesh are reached only
through the ports in ``domain/terrain/repositories.py``.
"""

from __future__ import annotations

import logging
from enum import Enum

from pydantic import BaseModel, ConfigDict

from domain.terrain.config import ResampleStrategy, TerrainConfig
from domain.terrain.errors import (
    BuildError,
    BuildFailureReason,
    BuilderStateError,
    CardinalityMismatchError,
    ElevationSourceError,
    EmptyFieldError,
    GridTooLargeError,
    InvalidBoundsError,
    MalformedResponseError,
)
from domain.terrain.repositories import ElevationSource, MeshGeometry
from domain.terrain.resampling import make_resampler
from domain.terrain.sampling import grid_for_config
from domain.terrain.value_objects import HeightField, SampleGrid

logger = logging.getLogger(__name__)

# Above this share of unresolved samples the build logs a warning
NODATA_WARNING_RATIO = 0.8


class BuilderState(str, Enum):
    UNBUILT = "unbuilt"
    BUILT = "built"
    FAILED = "failed"


class BuildResult(BaseModel):
    """Outcome of a completed TerrainBuilder run (Value Object)."""

    height_field: HeightField
    strategy: ResampleStrategy
    vertex_count: int
    missing_vertex_count: int  # Vertices that got missing_height (or were skipped)
    max_elevation: float
    min_elevation: float

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)


class TerrainBuilder:
    """Single-use terrain build for one mesh.

    State machine: UNBUILT -> BUILT | FAILED, both terminal; rebuilding
    takes a new TerrainBuilder. Pipeline failures raise BuildError before
    the mesh is touched.

    Usage:
        builder = TerrainBuilder(config, source)
        result = await builder.build(mesh)
    """

    def __init__(self, config: TerrainConfig, source: ElevationSource) -> None:
        self.config = config
        self.source = source
        self._state = BuilderState.UNBUILT
        self._height_field: HeightField | None = None

    @property
    def state(self) -> BuilderState:
        return self._state

    @property
    def height_field(self) -> HeightField | None:
        """Field of the completed build; None before a successful build."""
        return self._height_field

    async def build(self, mesh: MeshGeometry) -> BuildResult:
        """Fetch elevations and write scaled heights into ``mesh``.

        Every height is computed before the first ``mesh.set_height`` call.
        The write pass only uses indices below ``mesh.vertex_count``;
        ``set_height`` must not fail for those, an error it raises anyway
        propagates unchanged and the mesh may then be partially written.

        Raises:
            BuilderStateError: If this builder already ran a build
            BuildError: If the grid, the source or the data make the build
                impossible; ``reason`` tells which
        """
        if self._state is not BuilderState.UNBUILT:
            raise BuilderStateError(
                f"TerrainBuilder is single-use (state: {self._state.value}); "
                "create a new one"
            )

        try:
            result = await self._run(mesh)
        except Exception:
            self._state = BuilderState.FAILED
            raise
        self._height_field = result.height_field
        self._state = BuilderState.BUILT
        return result

    async def _run(self, mesh: MeshGeometry) -> BuildResult:
        grid = self._sample_grid()
        field = await self._fetch_height_field(grid)

        try:
            max_elevation = field.max_elevation()
            min_elevation = field.min_elevation()
        except EmptyFieldError as e:
            raise BuildError(
                f"No elevation resolved for any of {len(grid)} samples",
                BuildFailureReason.NO_DATA,
            ) from e

        ratio = field.nodata_ratio()
        if ratio > NODATA_WARNING_RATIO:
            logger.warning("Height field: %.1f%% samples unresolved", ratio * 100.0)

        heights, missing = self._resample(field, mesh)

        # Every height is known at this point; only now touch the mesh.
        for index, height in enumerate(heights):
            if height is not None:
                mesh.set_height(index, height)

        if missing:
            logger.warning(
                "%d of %d vertices had no elevation; %s",
                missing,
                mesh.vertex_count,
                "left unset"
                if self.config.missing_height is None
                else f"set to {self.config.missing_height}",
            )
        logger.info(
            "Max elevation: %.1f m, min elevation: %.1f m", max_elevation, min_elevation
        )
        logger.info(
            "Built %d vertices from %dx%d height field (%s)",
            mesh.vertex_count,
            field.rows,
            field.cols,
            self.config.resample_strategy.value,
        )
        return BuildResult(
            height_field=field,
            strategy=self.config.resample_strategy,
            vertex_count=mesh.vertex_count,
            missing_vertex_count=missing,
            max_elevation=max_elevation,
            min_elevation=min_elevation,
        )

    # -----------------------------------------------------------------------
    # Steps
    # -----------------------------------------------------------------------
    def _sample_grid(self) -> SampleGrid:
        try:
            return grid_for_config(self.config)
        except InvalidBoundsError as e:
            raise BuildError(str(e), BuildFailureReason.INVALID_BOUNDS) from e
        except GridTooLargeError as e:
            raise BuildError(str(e), BuildFailureReason.INVALID_CONFIG) from e

    async def _fetch_height_field(self, grid: SampleGrid) -> HeightField:
        try:
            samples = await self.source.lookup(grid.points)
        except ElevationSourceError as e:
            raise BuildError(
                f"Elevation lookup failed: {e}", BuildFailureReason.SOURCE_FAILURE
            ) from e

        if not samples:
            cause = self.source.last_error
            detail = f": {cause}" if cause is not None else ""
            raise BuildError(
                f"Elevation source returned no results{detail}",
                BuildFailureReason.SOURCE_FAILURE,
            ) from cause

        if len(samples) != len(grid):
            # Misaligned responses are never index-matched to the grid
            cause = MalformedResponseError(
                f"Expected {len(grid)} results, got {len(samples)}"
            )
            raise BuildError(str(cause), BuildFailureReason.SOURCE_FAILURE) from cause

        try:
            return HeightField.from_results(grid, [s.elevation for s in samples])
        except ValueError as e:
            raise BuildError(
                f"Unusable elevation results: {e}", BuildFailureReason.SOURCE_FAILURE
            ) from e

    def _resample(
        self, field: HeightField, mesh: MeshGeometry
    ) -> tuple[list[float | None], int]:
        """Scaled height per vertex (None = leave untouched) and the miss count."""
        try:
            resampler = make_resampler(
                self.config.resample_strategy, field, self.config.bounds, mesh
            )
        except CardinalityMismatchError as e:
            raise BuildError(str(e), BuildFailureReason.INVALID_CONFIG) from e

        positions = [mesh.get_xy(i) for i in range(mesh.vertex_count)]
        elevations = resampler.sample_many(
            [p[0] for p in positions], [p[1] for p in positions]
        )

        scale = self.config.elevation_scale
        heights: list[float | None] = []
        missing = 0
        for elevation in elevations:
            if elevation is None:
                missing += 1
                heights.append(self.config.missing_height)
            else:
                heights.append(elevation * scale)
        return heights, missing
