"""Tests for the functional facade."""

import asyncio

import aiohttp
import pytest

import docker_tag_poller
from docker_tag_poller import (
    check_connection_to_package,
    check_connection_to_repository,
    get_latest_revision,
    get_latest_revision_since,
    package_configuration,
    repository_configuration,
    validate_package_configuration,
    validate_repository_configuration,
)
from docker_tag_poller.core.session import USER_AGENT, create_session, parse_json_response
from docker_tag_poller.core.types import RegistryConfig
from tests.helpers import V2_HEADERS


def test_async_operations_are_coroutines():
    """Test that network operations are async functions."""
    assert asyncio.iscoroutinefunction(check_connection_to_repository)
    assert asyncio.iscoroutinefunction(check_connection_to_package)
    assert asyncio.iscoroutinefunction(get_latest_revision)
    assert asyncio.iscoroutinefunction(get_latest_revision_since)


def test_configuration_operations_are_sync():
    assert "DOCKER_REGISTRY_URL" in repository_configuration()
    assert "DOCKER_IMAGE" in package_configuration()
    assert not validate_repository_configuration({}).success
    assert validate_package_configuration({"DOCKER_IMAGE": "app"}).success


def test_version():
    assert USER_AGENT == f"docker-tag-poller/{docker_tag_poller.__version__}"


@pytest.mark.asyncio
async def test_create_session():
    session = await create_session(RegistryConfig(timeout=5))
    try:
        assert isinstance(session, aiohttp.ClientSession)
        assert session.timeout.total == 5
    finally:
        await session.close()


@pytest.mark.asyncio
async def test_create_session_with_shared_connector():
    connector = aiohttp.TCPConnector()
    try:
        session = await create_session(RegistryConfig(timeout=5), connector)
        assert session.connector is connector
        assert session.headers["User-Agent"] == USER_AGENT
        await session.close()
        assert not connector.closed
    finally:
        await connector.close()


def test_parse_json_response():
    assert parse_json_response('{"key": "value", "number": 42}') == {
        "key": "value",
        "number": 42,
    }
    assert parse_json_response(b'{"tags": []}') == {"tags": []}
    assert parse_json_response("invalid json") is None
    assert parse_json_response("") is None
    assert parse_json_response(None) is None


@pytest.mark.asyncio
async def test_full_poll_cycle(fake_registry):
    """Repository check, package check, latest and latest-since in sequence."""
    fake_registry.respond("/v2/", json={}, headers=V2_HEADERS)
    fake_registry.respond(
        "/v2/library/app/tags/list",
        json={"name": "library/app", "tags": ["3.9", "3.10", "3.10-slim", "latest"]},
        headers=V2_HEADERS,
    )
    repository = {
        "DOCKER_REGISTRY_URL": {"value": fake_registry.url_for("/v2/")},
        "DOCKER_REGISTRY_NAME": {"value": "fake"},
    }
    package = {
        "DOCKER_IMAGE": {"value": "library/app"},
        "DOCKER_TAG_FILTER": {"value": r"^[0-9.]+$"},
    }

    repository_check = await check_connection_to_repository(repository, timeout=10)
    package_check = await check_connection_to_package(package, repository, timeout=10)
    latest = await get_latest_revision(package, repository, timeout=10)
    since_old = await get_latest_revision_since(
        package, repository, {"revision": "3.9"}, timeout=10
    )
    since_same = await get_latest_revision_since(
        package, repository, latest.to_dict(), timeout=10
    )

    assert repository_check.to_dict() == {
        "status": "success",
        "messages": ["Docker registry found."],
    }
    assert package_check.success
    assert latest.revision == "3.10"
    assert since_old.revision == "3.10"
    assert since_same.to_dict()["revision"] is None
