"""Tag list retrieval."""

import logging
import re

import aiohttp

from ..core.fetcher import fetch
from ..core.session import parse_json_response
from ..exceptions import FetchError, InvalidFilterError, ParseError

logger = logging.getLogger(__name__)

MATCH_ALL = ".*"


def parse_tag_list(data: bytes | None, url: str) -> list[str]:
    """Parse a tag list body of the form {"tags": [...]}.

    Raises:
        ParseError: If the body is not JSON or the tags field is malformed
    """
    payload = parse_json_response(data)
    if not isinstance(payload, dict):
        raise ParseError(f"Tag list from {url} is not a JSON object")
    if "tags" not in payload:
        raise ParseError(f"Tag list from {url} has no tags field")

    tags = payload["tags"]
    # The distribution registry answers null for a repository without tags
    if tags is None:
        return []
    if not isinstance(tags, list) or not all(isinstance(tag, str) for tag in tags):
        raise ParseError(f"Tag list from {url} is not a list of strings: {tags!r}")
    return tags


async def list_tags(session: aiohttp.ClientSession, url: str) -> list[str]:
    """List the tags found at an image's tag list URL.

    Fetch failures degrade to an empty list so a poll against an unreachable
    registry reports no revision instead of failing.

    Args:
        session: Client session to issue requests with
        url: Tag list URL (registry URL + image + "/tags/list")

    Returns:
        Tags in registry order, possibly empty

    Raises:
        ParseError: If the registry answered with a malformed body
    """
    logger.debug(f"Fetch tags for {url}")
    try:
        response = await fetch(session, url)
    except FetchError as e:
        logger.warning(f"Got no tags! ({e})")
        return []

    if not response.ok:
        logger.warning(f"Got no tags! (HTTP {response.status_code} for {url})")
        return []

    tags = parse_tag_list(response.data, url)
    logger.debug(f"Got tags: {tags}")
    return tags


def compile_tag_filter(tag_filter: str, url: str) -> re.Pattern[str]:
    """Compile a tag filter; an empty filter matches every tag.

    Raises:
        InvalidFilterError: If the filter is not a valid regular expression
    """
    tag_filter = tag_filter or MATCH_ALL
    try:
        return re.compile(tag_filter)
    except re.error as e:
        error = InvalidFilterError(tag_filter, url, str(e))
        logger.error(str(error))
        raise error from e


def filter_tags(tags: list[str], pattern: re.Pattern[str]) -> list[str]:
    """Keep tags where the pattern matches anywhere in the tag."""
    return [tag for tag in tags if pattern.search(tag)]
