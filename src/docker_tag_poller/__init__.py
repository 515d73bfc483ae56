"""Docker Tag Poller - find the latest matching tag in a Docker Registry v2."""

__version__ = "0.1.0"

from .core.registry_poller import RegistryPoller
from .core.types import (
    ConnectionCheckResult,
    PackageConfig,
    RepositoryConfig,
    Revision,
    ValidationResult,
)
from .exceptions import (
    AuthHeaderParseError,
    FetchError,
    HttpStatusError,
    InvalidFilterError,
    ParseError,
    PollerError,
    TokenFetchError,
    TransportError,
)
from .registry import (
    check_connection_to_package,
    check_connection_to_repository,
    get_latest_revision,
    get_latest_revision_since,
    package_configuration,
    repository_configuration,
    validate_package_configuration,
    validate_repository_configuration,
)
from .utils.version import biggest, expand

__all__ = [
    "RegistryPoller",
    "RepositoryConfig",
    "PackageConfig",
    "Revision",
    "ConnectionCheckResult",
    "ValidationResult",
    "PollerError",
    "FetchError",
    "TransportError",
    "HttpStatusError",
    "AuthHeaderParseError",
    "TokenFetchError",
    "InvalidFilterError",
    "ParseError",
    "repository_configuration",
    "package_configuration",
    "validate_repository_configuration",
    "validate_package_configuration",
    "check_connection_to_repository",
    "check_connection_to_package",
    "get_latest_revision",
    "get_latest_revision_since",
    "expand",
    "biggest",
]
