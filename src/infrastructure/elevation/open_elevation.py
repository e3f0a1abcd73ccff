"""Open-Elevation adapter for the ElevationSource port.

Resolves batches of coordinates with ``POST /api/v1/lookup``:

    request:  {"locations": [{"latitude": 35.33, "longitude": 138.69}, ...]}
    response: {"results": [{"latitude": .., "longitude": .., "elevation": 1234}]}

Failure policy: any transport or response problem in any batch yields an
empty result list and records the error on ``last_error``. Partial results
are never returned.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence
from typing import Any

import aiohttp
from pydantic import ValidationError

from domain.terrain.errors import (
    ElevationSourceError,
    MalformedResponseError,
    TransportError,
)
from domain.terrain.value_objects import ElevationSample, GeoPoint

from .schemas import LookupRequest, LookupResponse

logger = logging.getLogger(__name__)

DEFAULT_ENDPOINT = "https://api.open-elevation.com/api/v1/lookup"
HTTP_OK = 200

# Echoed coordinates may be rounded by the provider
COORD_TOLERANCE_DEG = 1e-4


class OpenElevationSource:
    """ElevationSource backed by an Open-Elevation compatible HTTP API.

    Parameters
    ----------
    session: aiohttp.ClientSession
        Session owned by the caller (see ``infrastructure.http.make_http_session``).
    endpoint: str
        Lookup URL.
    max_batch_size: int | None
        Split requests into sequential batches of at most this many points.
        None sends everything in a single request.
    """

    def __init__(
        self,
        session: aiohttp.ClientSession,
        *,
        endpoint: str = DEFAULT_ENDPOINT,
        max_batch_size: int | None = None,
    ) -> None:
        if max_batch_size is not None and max_batch_size < 1:
            raise ValueError(f"max_batch_size must be positive: {max_batch_size}")
        self.session = session
        self.endpoint = endpoint
        self.max_batch_size = max_batch_size
        self.last_error: ElevationSourceError | None = None

    async def lookup(self, coordinates: Sequence[GeoPoint]) -> list[ElevationSample]:
        self.last_error = None
        points = list(coordinates)
        if not points:
            return []

        samples: list[ElevationSample] = []
        try:
            for batch in self._batches(points):
                samples.extend(await self._lookup_batch(batch))
        except ElevationSourceError as e:
            self.last_error = e
            logger.error("Elevation lookup of %d points failed: %s", len(points), e)
            return []

        nodata = sum(1 for s in samples if s.is_nodata)
        logger.debug(
            "Elevation lookup: %d points, %d without data", len(samples), nodata
        )
        return samples

    def _batches(self, points: list[GeoPoint]) -> Iterator[list[GeoPoint]]:
        size = self.max_batch_size or len(points)
        for start in range(0, len(points), size):
            yield points[start : start + size]

    async def _lookup_batch(self, batch: list[GeoPoint]) -> list[ElevationSample]:
        data = await self._post(LookupRequest.from_points(batch).model_dump())

        try:
            response = LookupResponse.model_validate(data)
        except ValidationError as e:
            raise MalformedResponseError(
                f"Unexpected response shape ({e.error_count()} errors)"
            ) from e

        if len(response.results) != len(batch):
            raise MalformedResponseError(
                f"Requested {len(batch)} points, got {len(response.results)} results"
            )

        for i, (point, result) in enumerate(zip(batch, response.results)):
            if (
                abs(point.latitude - result.latitude) > COORD_TOLERANCE_DEG
                or abs(point.longitude - result.longitude) > COORD_TOLERANCE_DEG
            ):
                raise MalformedResponseError(
                    f"Result {i} is for ({result.latitude}, {result.longitude}), "
                    f"expected ({point.latitude}, {point.longitude})"
                )

        return [result.to_sample() for result in response.results]

    async def _post(self, body: dict[str, Any]) -> Any:
        try:
            async with self.session.post(self.endpoint, json=body) as resp:
                if resp.status != HTTP_OK:
                    raise TransportError(
                        f"HTTP {resp.status} from elevation provider"
                    )
                try:
                    return await resp.json(content_type=None)
                except ValueError as e:
                    raise MalformedResponseError("Response is not valid JSON") from e
        except (aiohttp.ClientError, TimeoutError) as e:
            raise TransportError(f"Elevation request failed: {e!r}") from e
