"""Pytest configuration for infrastructure adapter tests.

No network: ``FakeSession`` stands in for ``aiohttp.ClientSession`` and
answers each POST from a queue of canned responses.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, Union

import pytest


class FakeResponse:
    """Just enough of aiohttp.ClientResponse: ``status`` and ``json()``."""

    def __init__(self, payload: Any = None, status: int = 200) -> None:
        self.payload = payload
        self.status = status

    async def json(self, content_type: str | None = "application/json") -> Any:
        if isinstance(self.payload, Exception):
            raise self.payload
        return self.payload


class _RequestContext:
    def __init__(self, outcome: FakeResponse | Exception) -> None:
        self.outcome = outcome

    async def __aenter__(self) -> FakeResponse:
        if isinstance(self.outcome, Exception):
            raise self.outcome
        return self.outcome

    async def __aexit__(self, *exc_info: object) -> None:
        return None


Outcome = Union[FakeResponse, Exception, Callable[[Any], FakeResponse]]


class FakeSession:
    """Records POST bodies; each call consumes the next queued outcome.

    An outcome is a FakeResponse, an exception raised on entering the
    request, or a callable building the response from the request body.
    """

    def __init__(self, *outcomes: Outcome) -> None:
        self.outcomes = list(outcomes)
        self.requests: list[tuple[str, Any]] = []

    def post(self, url: str, *, json: Any = None) -> _RequestContext:
        self.requests.append((url, json))
        outcome = self.outcomes.pop(0)
        if callable(outcome):
            outcome = outcome(json)
        return _RequestContext(outcome)


def echo(body: dict[str, Any], elevation: float | None = 100.0) -> FakeResponse:
    """Provider-style answer echoing every requested location."""
    return FakeResponse(
        {
            "results": [
                {
                    "latitude": loc["latitude"],
                    "longitude": loc["longitude"],
                    "elevation": elevation,
                }
                for loc in body["locations"]
            ]
        }
    )


@pytest.fixture
def fake_session() -> type[FakeSession]:
    return FakeSession


@pytest.fixture
def fake_response() -> type[FakeResponse]:
    return FakeResponse


@pytest.fixture
def echo_response() -> Callable[..., FakeResponse]:
    return echo
