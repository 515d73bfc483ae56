"""Configuration schema and validation for repository and package properties."""

import re
from collections.abc import Mapping
from typing import Any
from urllib.parse import urlparse

from ..core.types import (
    DOCKER_IMAGE,
    DOCKER_REGISTRY_NAME,
    DOCKER_REGISTRY_URL,
    DOCKER_TAG_FILTER,
    ValidationResult,
    property_value,
)


def _property(
    display_name: str, display_order: int, required: bool, part_of_identity: bool
) -> dict[str, Any]:
    return {
        "display-name": display_name,
        "display-order": str(display_order),
        "required": required,
        "part-of-identity": part_of_identity,
        "secure": False,
    }


def repository_configuration() -> dict[str, dict[str, Any]]:
    """Property schema of a Docker registry repository."""
    return {
        DOCKER_REGISTRY_URL: _property("Docker Registry URL", 0, True, True),
        DOCKER_REGISTRY_NAME: _property("Docker Registry Name", 1, True, False),
    }


def package_configuration() -> dict[str, dict[str, Any]]:
    """Property schema of a Docker image package."""
    return {
        DOCKER_IMAGE: _property("Docker Image Name", 0, True, True),
        DOCKER_TAG_FILTER: _property("Docker Tag Filter Regular Expression", 1, False, True),
    }


def is_registry_url(url: str) -> bool:
    """Check if URL is an absolute http(s) URL with a host."""
    parsed = urlparse(url)
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def is_valid_pattern(pattern: str) -> bool:
    """Check if pattern compiles as a regular expression."""
    try:
        re.compile(pattern)
    except re.error:
        return False
    return True


def _check_unknown_keys(
    props: Mapping[str, Any], schema: Mapping[str, Any], result: ValidationResult
) -> None:
    for key in props:
        if key not in schema:
            result.add_error(key, f"Unsupported key: {key}")


def validate_repository_configuration(
    props: Mapping[str, Any] | None,
) -> ValidationResult:
    """Validate repository properties.

    Args:
        props: Host property bag with the registry URL and name

    Returns:
        ValidationResult listing every problem found
    """
    props = props or {}
    result = ValidationResult()
    _check_unknown_keys(props, repository_configuration(), result)

    url = property_value(props, DOCKER_REGISTRY_URL)
    if not url:
        result.add_error(DOCKER_REGISTRY_URL, "Docker registry URL must be specified")
    elif not is_registry_url(url):
        result.add_error(
            DOCKER_REGISTRY_URL, f"Docker registry URL must be an http(s) URL: {url}"
        )

    if not property_value(props, DOCKER_REGISTRY_NAME):
        result.add_error(DOCKER_REGISTRY_NAME, "Docker registry name must be specified")

    return result


def validate_package_configuration(props: Mapping[str, Any] | None) -> ValidationResult:
    """Validate package properties.

    Args:
        props: Host property bag with the image path and optional tag filter

    Returns:
        ValidationResult listing every problem found
    """
    props = props or {}
    result = ValidationResult()
    _check_unknown_keys(props, package_configuration(), result)

    if not property_value(props, DOCKER_IMAGE):
        result.add_error(DOCKER_IMAGE, "Docker image name must be specified")

    tag_filter = property_value(props, DOCKER_TAG_FILTER)
    if tag_filter and not is_valid_pattern(tag_filter):
        result.add_error(
            DOCKER_TAG_FILTER, f"Invalid docker tag filter regular expression: {tag_filter}"
        )

    return result
