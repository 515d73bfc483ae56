"""Registry GET with bearer token challenge handling.

A fetch is a fixed sequence of at most two requests against the target URL:

    Unauthenticated -> ChallengeReceived -> TokenAcquired -> Retried

The retried response is returned whatever its status; a second challenge is
never answered.
"""

import asyncio
import logging
import re
from urllib.parse import urlencode

import aiohttp

from ..exceptions import (
    AuthHeaderParseError,
    HttpStatusError,
    TokenFetchError,
    TransportError,
)
from .session import parse_json_response
from .types import AuthChallenge, RequestResult

logger = logging.getLogger(__name__)

REALM_PATTERN = re.compile(r'\brealm="([^"]+)"', re.IGNORECASE)
SERVICE_PATTERN = re.compile(r'\bservice="([^"]+)"', re.IGNORECASE)
SCOPE_PATTERN = re.compile(r'\bscope="([^"]+)"', re.IGNORECASE)


def parse_auth_challenge(header: str) -> AuthChallenge:
    """Extract the token realm from a WWW-Authenticate header.

    Args:
        header: Header value, e.g. 'Bearer realm="https://auth.example/token"'

    Returns:
        AuthChallenge with the realm and optional service/scope

    Raises:
        AuthHeaderParseError: If the header carries no realm
    """
    realm = REALM_PATTERN.search(header)
    if not realm:
        raise AuthHeaderParseError(f"No realm found in WWW-Authenticate: {header}")

    service = SERVICE_PATTERN.search(header)
    scope = SCOPE_PATTERN.search(header)
    return AuthChallenge(
        realm=realm.group(1),
        service=service.group(1) if service else None,
        scope=scope.group(1) if scope else None,
    )


def build_token_url(challenge: AuthChallenge) -> str:
    """Token endpoint URL for a challenge, with service and scope as query."""
    params = {}
    if challenge.service:
        params["service"] = challenge.service
    if challenge.scope:
        params["scope"] = challenge.scope
    if not params:
        return challenge.realm

    separator = "&" if "?" in challenge.realm else "?"
    return f"{challenge.realm}{separator}{urlencode(params)}"


async def _get(
    session: aiohttp.ClientSession,
    url: str,
    headers: dict[str, str] | None = None,
) -> RequestResult:
    """Issue a single GET without raising on non-2xx status."""
    try:
        async with session.get(url, headers=headers) as resp:
            data = await resp.read()
            logger.debug(f"HTTP GET URL: {url} {resp.status}")
            return RequestResult(
                status_code=resp.status,
                headers=resp.headers.copy(),
                data=data,
                url=url,
            )
    except (aiohttp.ClientError, asyncio.TimeoutError) as e:
        raise TransportError(f"Failed to fetch {url}: {e!r}") from e


async def fetch_token(session: aiohttp.ClientSession, challenge: AuthChallenge) -> str:
    """Fetch an anonymous bearer token from the challenge realm.

    Raises:
        TokenFetchError: If the endpoint fails or returns no token
    """
    token_url = build_token_url(challenge)
    logger.debug(f"Token URL: {token_url}")

    try:
        response = await _get(session, token_url)
    except TransportError as e:
        raise TokenFetchError(f"Could not reach token endpoint {token_url}: {e}") from e

    if not response.ok:
        raise TokenFetchError(
            f"Token endpoint {token_url} answered HTTP {response.status_code}"
        )

    payload = parse_json_response(response.data)
    token = payload.get("token") if isinstance(payload, dict) else None
    if not isinstance(token, str) or not token:
        raise TokenFetchError(f"No token in response from {token_url}")
    return token


async def fetch(session: aiohttp.ClientSession, url: str) -> RequestResult:
    """GET a registry URL, answering one bearer challenge if needed.

    Args:
        session: Client session to issue requests with
        url: Absolute registry URL

    Returns:
        The first successful response, or the retried response after a
        bearer challenge regardless of its status

    Raises:
        TransportError: If the registry cannot be reached
        HttpStatusError: If the status is neither 2xx nor a 401 challenge
        AuthHeaderParseError: If the challenge carries no realm
        TokenFetchError: If no token could be obtained
    """
    response = await _get(session, url)
    if response.ok:
        return response

    authenticate = response.headers.get("WWW-Authenticate")
    if response.status_code == 401 and authenticate is not None:
        logger.debug(f"WWW-Authenticate: {authenticate}")
        challenge = parse_auth_challenge(authenticate)
        token = await fetch_token(session, challenge)
        return await _get(session, url, headers={"Authorization": f"Bearer {token}"})

    raise HttpStatusError(response.status_code, url)
