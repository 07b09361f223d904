"""Pytest configuration and shared fixtures."""

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from toolflow.api import create_app
from toolflow.demo import build_demo_tools
from toolflow.domain.ports.config import AppConfig


@pytest.fixture
def app():
    """Reference host serving the demonstration flows."""
    return create_app(build_demo_tools(), AppConfig(), configure_logging=False)


@pytest_asyncio.fixture
async def client(app):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c
