"""aiohttp session creation and response parsing helpers."""

import json
from typing import Any

import aiohttp

from .. import __version__
from .types import RegistryConfig

USER_AGENT = f"docker-tag-poller/{__version__}"


async def create_session(
    config: RegistryConfig | None = None,
    connector: aiohttp.BaseConnector | None = None,
) -> aiohttp.ClientSession:
    """Create a client session for registry requests.

    Args:
        config: Registry configuration carrying the request timeout
        connector: Shared connector; the session does not take ownership of it

    Returns:
        A new aiohttp session; the caller is responsible for closing it
    """
    config = config or RegistryConfig()
    return aiohttp.ClientSession(
        connector=connector,
        connector_owner=connector is None,
        timeout=aiohttp.ClientTimeout(total=config.timeout),
        headers={"User-Agent": USER_AGENT},
    )


def parse_json_response(text: str | bytes | None) -> Any:
    """Parse a JSON body, returning None for empty or invalid content."""
    if not text:
        return None
    try:
        return json.loads(text)
    except (json.JSONDecodeError, UnicodeDecodeError):
        return None
