"""numpy plane mesh implementing the MeshGeometry port.

Vertex layout follows three.js ``PlaneGeometry``: vertices are stored row by
row starting with the top (north, +y) row, each row running west to east
(-x to +x). Position z is the height channel.
"""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray

from domain.terrain.value_objects import SampleGrid


class PlaneGrid:
    """Planar vertex grid centred on the origin.

    Parameters
    ----------
    width, height: float
        Logical size; x spans [-width/2, width/2], y spans [-height/2, height/2].
    width_segments, height_segments: int
        Number of cells per axis; vertices per axis = segments + 1.
    """

    def __init__(
        self,
        width: float,
        height: float,
        width_segments: int = 1,
        height_segments: int = 1,
    ) -> None:
        if width <= 0 or height <= 0:
            raise ValueError(f"Plane size must be positive: {width}x{height}")
        if width_segments < 1 or height_segments < 1:
            raise ValueError(
                f"Segments must be >= 1: {width_segments}x{height_segments}"
            )
        self._size = (float(width), float(height))
        self._segments = (int(width_segments), int(height_segments))

        seg_w = width / width_segments
        seg_h = height / height_segments
        xs = np.arange(width_segments + 1, dtype=np.float64) * seg_w - width / 2
        ys = height / 2 - np.arange(height_segments + 1, dtype=np.float64) * seg_h
        grid_x, grid_y = np.meshgrid(xs, ys)
        self.positions: NDArray[np.float64] = np.column_stack(
            [grid_x.ravel(), grid_y.ravel(), np.zeros(grid_x.size)]
        )

    @classmethod
    def for_sample_grid(cls, grid: SampleGrid) -> "PlaneGrid":
        """Mesh with one vertex per sample: size and segments = cols-1 x rows-1."""
        if not grid.is_rectangular:
            raise ValueError("Cannot derive a plane from a non-rectangular grid")
        if grid.rows < 2 or grid.cols < 2:
            raise ValueError(
                f"Grid of {grid.rows}x{grid.cols} is too small for a plane mesh"
            )
        return cls(grid.cols - 1, grid.rows - 1, grid.cols - 1, grid.rows - 1)

    @property
    def vertex_count(self) -> int:
        return int(self.positions.shape[0])

    @property
    def size(self) -> tuple[float, float]:
        return self._size

    @property
    def segments(self) -> tuple[int, int]:
        return self._segments

    def get_xy(self, index: int) -> tuple[float, float]:
        return float(self.positions[index, 0]), float(self.positions[index, 1])

    def set_height(self, index: int, height: float) -> None:
        self.positions[index, 2] = height

    def heights(self) -> NDArray[np.float64]:
        """Copy of the height channel in vertex order."""
        return self.positions[:, 2].copy()

    def height_grid(self) -> NDArray[np.float64]:
        """Heights reshaped to (rows, cols), row 0 being the north edge."""
        width_segments, height_segments = self._segments
        return self.heights().reshape(height_segments + 1, width_segments + 1)
