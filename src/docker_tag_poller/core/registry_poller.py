"""Docker registry tag poller."""

import logging
from collections.abc import Callable, Mapping
from datetime import datetime, timezone
from typing import Any, Optional, Union

import aiohttp

from ..exceptions import FetchError
from ..operations.tags import compile_tag_filter, filter_tags, list_tags
from ..utils.validator import validate_repository_configuration
from ..utils.version import biggest, latest_of
from .connectivity import connection_error_result, validate_connectivity_response
from .fetcher import fetch
from .session import create_session
from .types import (
    ConnectionCheckResult,
    PackageConfig,
    RegistryConfig,
    RepositoryConfig,
    Revision,
    ValidationResult,
)

logger = logging.getLogger(__name__)

RepositoryLike = Union[RepositoryConfig, Mapping[str, Any]]
PackageLike = Union[PackageConfig, Mapping[str, Any]]
RevisionLike = Union[Revision, Mapping[str, Any], None]


def _repository(config: RepositoryLike) -> RepositoryConfig:
    if isinstance(config, RepositoryConfig):
        return config
    return RepositoryConfig.from_properties(config)


def _package(config: PackageLike) -> PackageConfig:
    if isinstance(config, PackageConfig):
        return config
    return PackageConfig.from_properties(config)


def _revision(previous: RevisionLike) -> Revision:
    if isinstance(previous, Revision):
        return previous
    return Revision.from_dict(previous)


class RegistryPoller:
    """Polls a v2 registry for the latest tag of an image.

    The poller holds one aiohttp session for connection pooling and no other
    state; every operation takes its configuration as arguments.
    """

    def __init__(
        self,
        timeout: int = 30,
        connector: Optional[aiohttp.BaseConnector] = None,
        validator: Callable[[Mapping[str, Any]], ValidationResult] = (
            validate_repository_configuration
        ),
    ) -> None:
        """Initialize the poller.

        Args:
            timeout: Request timeout in seconds
            connector: aiohttp connector for connection pooling
            validator: Repository configuration validator run before a
                repository connection check
        """
        self.config = RegistryConfig(timeout=timeout)
        self.connector = connector
        self.validator = validator
        self.session: Optional[aiohttp.ClientSession] = None

    async def __aenter__(self) -> "RegistryPoller":
        """Enter async context manager."""
        if not self.session:
            self.session = await create_session(self.config, self.connector)
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Exit async context manager."""
        await self.close()

    async def close(self) -> None:
        """Close the client session."""
        if self.session and not self.session.closed:
            await self.session.close()

    def _require_session(self) -> aiohttp.ClientSession:
        if self.session is None or self.session.closed:
            raise RuntimeError("RegistryPoller must be used as 'async with' context")
        return self.session

    async def _check_url(self, url: str, what: str) -> ConnectionCheckResult:
        logger.debug(f"Checking URL: {url}")
        try:
            response = await fetch(self._require_session(), url)
        except FetchError as e:
            return connection_error_result(e, what)
        return validate_connectivity_response(response, what)

    async def check_connection_to_repository(
        self, repository: RepositoryLike
    ) -> ConnectionCheckResult:
        """Check that the configured registry URL serves the v2 API.

        Args:
            repository: Repository configuration or host property bag

        Returns:
            Failure with the validation messages if the configuration is
            invalid (no request is made), otherwise the header check result
        """
        props = (
            repository.to_properties()
            if isinstance(repository, RepositoryConfig)
            else repository
        )
        validation = self.validator(props)
        if not validation.success:
            return ConnectionCheckResult.failed(*validation.messages)

        registry_url = _repository(repository).registry_url
        return await self._check_url(registry_url, "registry")

    async def check_connection_to_package(
        self, package: PackageLike, repository: RepositoryLike
    ) -> ConnectionCheckResult:
        """Check that the image's tag list URL serves the v2 API."""
        url = _package(package).tag_list_url(_repository(repository))
        return await self._check_url(url, "image")

    async def get_latest_revision(
        self, package: PackageLike, repository: RepositoryLike
    ) -> Revision:
        """Find the biggest tag matching the package's tag filter.

        Args:
            package: Package configuration or host property bag
            repository: Repository configuration or host property bag

        Returns:
            Revision for the latest matching tag, or an empty Revision when no
            tag matches

        Raises:
            InvalidFilterError: If the tag filter is not a valid pattern
            ParseError: If the registry returned a malformed tag list
        """
        package = _package(package)
        url = package.tag_list_url(_repository(repository))
        logger.debug(f"Polling latest revision of {url}")
        tags = await list_tags(self._require_session(), url)

        pattern = compile_tag_filter(package.tag_filter, url)
        matching = filter_tags(tags, pattern)
        if not matching:
            logger.warning("Found no matching revision.")
            return Revision.empty()

        latest = latest_of(matching)
        logger.info(f"Latest revision is: {latest}")
        return Revision(revision=latest, timestamp=datetime.now(timezone.utc))

    async def get_latest_revision_since(
        self,
        package: PackageLike,
        repository: RepositoryLike,
        previous: RevisionLike,
    ) -> Revision:
        """Return the latest revision only if it is newer than ``previous``.

        Returns:
            The latest Revision when it beats the previous tag, otherwise an
            empty Revision
        """
        previous = _revision(previous)
        logger.debug(f"Polling revision newer than {previous.revision}")
        latest = await self.get_latest_revision(package, repository)

        if latest.is_empty or latest.revision == previous.revision:
            logger.info("Found no new revision.")
            return Revision.empty()

        # Argument order matters: ties go to the second argument
        if biggest(previous.revision or "", latest.revision) == latest.revision:
            logger.info(f"Latest revision is: {latest.revision}")
            return latest

        logger.info(f"No revision newer than {previous.revision}")
        return Revision.empty()
