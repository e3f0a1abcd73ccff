"""Terrain Bounded Context.

Responsible for turning elevation samples into mesh heights:
- Value Objects: GeoPoint, GeoBounds, SampleGrid, HeightField
- Sampling: sample grid generation over a bounding box
- Resampling: DirectIndex / NearestNeighbor vertex lookup
- Services: TerrainBuilder (build orchestration)
"""
