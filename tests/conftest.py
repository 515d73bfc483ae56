"""Test configuration and fixtures."""

import os

import pytest
import pytest_asyncio
from aiohttp.test_utils import TestServer

from docker_tag_poller import RegistryPoller
from docker_tag_poller.core.session import create_session
from tests.helpers import FakeRegistry


@pytest_asyncio.fixture
async def fake_registry():
    """Start an in-process fake registry."""
    registry = FakeRegistry()
    server = TestServer(registry.app)
    await server.start_server()
    registry.url = str(server.make_url("/"))
    try:
        yield registry
    finally:
        await server.close()


@pytest_asyncio.fixture
async def closed_url():
    """URL of a server that has already been shut down."""
    registry = FakeRegistry()
    server = TestServer(registry.app)
    await server.start_server()
    url = str(server.make_url("/v2/"))
    await server.close()
    return url


@pytest_asyncio.fixture
async def session():
    """Client session for fetcher level tests."""
    session = await create_session()
    try:
        yield session
    finally:
        await session.close()


@pytest_asyncio.fixture
async def poller():
    """Poller with an open session."""
    async with RegistryPoller(timeout=10) as poller:
        yield poller


# Pytest configuration
def pytest_configure(config):
    """Configure pytest markers and settings."""
    config.addinivalue_line(
        "markers", "integration: mark test as integration test requiring registry"
    )
    config.addinivalue_line("markers", "unit: mark test as unit test (default)")


def pytest_collection_modifyitems(config, items):
    """Skip integration tests unless a registry is available."""
    skip_integration = pytest.mark.skip(reason="Registry not available")

    for item in items:
        if (
            "integration" in item.keywords
            and os.getenv("REGISTRY_AVAILABLE", "false").lower() != "true"
        ):
            item.add_marker(skip_integration)
