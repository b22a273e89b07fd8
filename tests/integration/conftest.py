"""Fixtures for API integration tests."""

from __future__ import annotations

from collections.abc import AsyncGenerator

import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from paye.api.app import create_app
from paye.api.dependencies import get_engine


@pytest_asyncio.fixture
async def client(clean_settings) -> AsyncGenerator[AsyncClient, None]:
    """Create async HTTP client for API testing."""
    get_engine.cache_clear()
    app = create_app()
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    get_engine.cache_clear()
