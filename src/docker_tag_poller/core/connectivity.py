"""Docker distribution API version checks for connection tests."""

import logging
from collections.abc import Mapping

from .types import ConnectionCheckResult, RequestResult

logger = logging.getLogger(__name__)

API_VERSION_HEADER = "docker-distribution-api-version"
API_VERSION_PREFIX = "registry/2."


def get_header(headers: Mapping[str, str], name: str) -> str | None:
    """Case-insensitive header lookup that also works on plain dicts."""
    wanted = name.lower()
    for key, value in headers.items():
        if key.lower() == wanted:
            return value
    return None


def check_api_version_header(headers: Mapping[str, str]) -> bool:
    """Check whether headers announce a v2 distribution registry."""
    value = get_header(headers, API_VERSION_HEADER)
    return value is not None and value.startswith(API_VERSION_PREFIX)


def validate_connectivity_response(
    result: RequestResult, what: str = "registry"
) -> ConnectionCheckResult:
    """Turn a fetched response into a connection check result.

    Args:
        result: Response of the registry root or tag list URL
        what: What was checked, "registry" or "image"

    Returns:
        Success when the API version header is present with a registry/2.x
        value, failure with a diagnostic message otherwise
    """
    value = get_header(result.headers, API_VERSION_HEADER)
    if value is None:
        seen = ", ".join(dict.fromkeys(key.lower() for key in result.headers))
        message = f"Missing header: {API_VERSION_HEADER} found only: [{seen}]"
        logger.warning(message)
        return ConnectionCheckResult.failed(message)

    if not check_api_version_header(result.headers):
        message = f"Unknown value {value} for header {API_VERSION_HEADER}"
        logger.warning(message)
        return ConnectionCheckResult.failed(message)

    message = f"Docker {what} found."
    logger.debug(message)
    return ConnectionCheckResult.succeeded(message)


def connection_error_result(error: Exception, what: str) -> ConnectionCheckResult:
    """Failure result for a fetch that did not produce a response."""
    message = f"Could not find docker {what}. [{error}]"
    logger.warning(message)
    return ConnectionCheckResult.failed(message)
