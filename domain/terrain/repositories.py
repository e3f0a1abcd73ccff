"""Domain Port(s) for Terrain I/O.

Defines interfaces (Protocols) that infrastructure adapters must implement.
No concrete I/O here.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

from .errors import ElevationSourceError
from .value_objects import ElevationSample, GeoPoint


class ElevationSource(Protocol):
    """Port for resolving elevations of a batch of coordinates.

    Implementations live in infrastructure (e.g., the Open-Elevation adapter).
    """

    last_error: ElevationSourceError | None

    async def lookup(self, coordinates: Sequence[GeoPoint]) -> list[ElevationSample]:
        """Return one sample per coordinate, in request order.

        Unresolvable points carry ``elevation=None``. On TransportError or
        MalformedResponseError the implementation stores the error in
        ``last_error`` and returns an empty list - never partial results.
        """
        ...


class MeshGeometry(Protocol):
    """Port for the externally owned planar vertex grid.

    Vertex planar coordinates lie in [-size/2, size/2]; the core only ever
    writes the height channel.
    """

    @property
    def vertex_count(self) -> int: ...

    @property
    def size(self) -> tuple[float, float]:
        """Logical (width, height) in geometry-local units."""
        ...

    @property
    def segments(self) -> tuple[int, int]:
        """(width_segments, height_segments); vertices = segments + 1 per axis."""
        ...

    def get_xy(self, index: int) -> tuple[float, float]: ...

    def set_height(self, index: int, height: float) -> None:
        """Write the height of vertex ``index``.

        Must not fail for ``0 <= index < vertex_count``; the builder only
        writes those indices and does not guard the calls.
        """
        ...
