"""Terrain Mesh Domain Layer.

This package contains the core logic organized by bounded contexts:
- terrain: Sample grids, height fields, vertex resampling, terrain builds
"""

from domain import terrain

__all__ = ["terrain"]
