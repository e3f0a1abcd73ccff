"""Terrain Bounded Context - Build Configuration.

A single explicit configuration object replaces process-wide constants, so
several independent builds can coexist.

Field names are snake_case; the camelCase names of the mesh client
(``resolutionMode``, ``elevationScale``, ...) are accepted as aliases.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from domain.terrain.value_objects import GeoBounds

# Metres of mesh height per metre of elevation
DEFAULT_ELEVATION_SCALE = 0.01


class ResolutionMode(str, Enum):
    """How ``TerrainConfig.resolution`` is interpreted."""

    DEGREES = "degrees"  # Step in decimal degrees
    METRIC = "metric"  # Step in kilometres


class ResampleStrategy(str, Enum):
    """How mesh vertices are mapped onto the height field."""

    DIRECT = "direct"  # Grid-aligned index lookup
    NEAREST = "nearest"  # Nearest resolved sample in lat/lng space


class TerrainConfig(BaseModel):
    """Everything a TerrainBuilder needs besides its collaborators.

    ``resolution`` is deliberately not range-checked here: grid generation
    reports a non-positive resolution as InvalidBoundsError.
    """

    bounds: GeoBounds
    resolution: float
    resolution_mode: ResolutionMode = ResolutionMode.DEGREES
    longitude_correction: bool = False
    elevation_scale: float = DEFAULT_ELEVATION_SCALE
    resample_strategy: ResampleStrategy = ResampleStrategy.NEAREST
    missing_height: float | None = 0.0  # None leaves such vertices untouched
    max_samples: int | None = Field(default=None, gt=0)

    model_config = ConfigDict(
        frozen=True, alias_generator=to_camel, populate_by_name=True
    )

    @model_validator(mode="after")
    def validate_strategy(self) -> "TerrainConfig":
        # Latitude-corrected rows have differing lengths: no direct indexing.
        if (
            self.resample_strategy is ResampleStrategy.DIRECT
            and self.longitude_correction
        ):
            raise ValueError(
                "resample_strategy 'direct' requires a uniform grid; "
                "use 'nearest' with longitude_correction"
            )
        return self
