"""Pydantic schemas for the Open-Elevation lookup API."""

from __future__ import annotations

from collections.abc import Sequence

from pydantic import BaseModel

from domain.terrain.value_objects import ElevationSample, GeoPoint


class LookupLocation(BaseModel):
    """One requested coordinate."""

    latitude: float
    longitude: float


class LookupRequest(BaseModel):
    """Request body: ``{"locations": [{"latitude": .., "longitude": ..}]}``."""

    locations: list[LookupLocation]

    @classmethod
    def from_points(cls, points: Sequence[GeoPoint]) -> "LookupRequest":
        return cls(
            locations=[
                LookupLocation(latitude=p.latitude, longitude=p.longitude)
                for p in points
            ]
        )


class LookupResult(BaseModel):
    """Elevation data for a single coordinate pair; elevation may be null."""

    latitude: float
    longitude: float
    elevation: float | None = None

    def to_sample(self) -> ElevationSample:
        return ElevationSample(
            latitude=self.latitude, longitude=self.longitude, elevation=self.elevation
        )


class LookupResponse(BaseModel):
    """Response schema for the elevation lookup endpoint."""

    results: list[LookupResult]
