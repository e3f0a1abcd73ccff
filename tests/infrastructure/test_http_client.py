"""Tests for the aiohttp session factory."""

import aiohttp
import pytest

from infrastructure.http import make_http_session
from infrastructure.http.client import DEFAULT_CONNECT_TIMEOUT_S, DEFAULT_TIMEOUT_S


class TestMakeHttpSession:
    """Tests for make_http_session function."""

    @pytest.mark.asyncio
    async def test_creates_session_with_default_timeouts(self):
        session = make_http_session()
        try:
            assert isinstance(session, aiohttp.ClientSession)
            assert session.timeout.total == DEFAULT_TIMEOUT_S
            assert session.timeout.connect == DEFAULT_CONNECT_TIMEOUT_S
        finally:
            await session.close()

    @pytest.mark.asyncio
    async def test_custom_timeouts(self):
        session = make_http_session(timeout_s=5.0, connect_timeout_s=1.0)
        try:
            assert session.timeout.total == 5.0
            assert session.timeout.sock_connect == 1.0
        finally:
            await session.close()

    @pytest.mark.asyncio
    async def test_usable_as_async_context_manager(self):
        async with make_http_session() as session:
            assert not session.closed
        assert session.closed
