"""Terrain Bounded Context - Error Hierarchy.

Custom exceptions for the sampling / resampling pipeline.

Grid generation errors abort the build, elevation source errors are
recovered by the TerrainBuilder as BuildError, index errors are programmer
errors.
"""

from __future__ import annotations

from enum import Enum


class TerrainError(Exception):
    """Base error for terrain operations."""


class InvalidBoundsError(TerrainError):
    """Bounds are inverted/out of range, or the resolution is not positive."""


class GridTooLargeError(TerrainError):
    """Sample grid would exceed the configured sample budget."""


class InvalidConfigError(TerrainError):
    """Configuration is malformed or combines incompatible options."""


# ---------------------------------------------------------------------------
# Elevation source errors
# ---------------------------------------------------------------------------
class ElevationSourceError(TerrainError):
    """Base error for elevation provider failures."""


class TransportError(ElevationSourceError):
    """Network failure, timeout or non-success HTTP status."""


class MalformedResponseError(ElevationSourceError):
    """Provider response is missing expected fields or misaligned."""


# ---------------------------------------------------------------------------
# HeightField / Resampler errors
# ---------------------------------------------------------------------------
class OutOfRangeError(TerrainError, IndexError):
    """Height field indices are outside the grid.

    Attributes:
        row: Requested row
        col: Requested column
        rows: Number of rows in the field
        cols: Number of columns available in the requested row (or the
            widest row when the row itself is out of range)
    """

    def __init__(self, row: int, col: int, rows: int, cols: int) -> None:
        self.row = row
        self.col = col
        self.rows = rows
        self.cols = cols
        super().__init__(
            f"Cell ({row}, {col}) outside height field [0, {rows}) x [0, {cols})"
        )


class EmptyFieldError(TerrainError):
    """Height field has no resolved elevation at all."""


class CardinalityMismatchError(TerrainError):
    """Height field grid does not line up with the mesh vertex grid."""


# ---------------------------------------------------------------------------
# TerrainBuilder errors
# ---------------------------------------------------------------------------
class BuildFailureReason(str, Enum):
    """Why a terrain build was aborted."""

    INVALID_BOUNDS = "invalid_bounds"
    INVALID_CONFIG = "invalid_config"
    SOURCE_FAILURE = "source_failure"
    NO_DATA = "no_data"


class BuildError(TerrainError):
    """Terrain build aborted; no partial mesh was written.

    The underlying error (if any) is available as ``__cause__``.
    """

    def __init__(self, message: str, reason: BuildFailureReason) -> None:
        self.reason = reason
        super().__init__(f"[{reason.value}] {message}")


class BuilderStateError(TerrainError):
    """TerrainBuilder used after it already completed a build."""
