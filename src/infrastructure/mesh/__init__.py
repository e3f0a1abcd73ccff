"""Infrastructure adapters for mesh geometry."""

from .plane_grid import PlaneGrid

__all__ = ["PlaneGrid"]
