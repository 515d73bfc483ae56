"""Data types shared by the poller modules."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

# Property keys used by the host in repository and package property bags
DOCKER_REGISTRY_URL = "DOCKER_REGISTRY_URL"
DOCKER_REGISTRY_NAME = "DOCKER_REGISTRY_NAME"
DOCKER_IMAGE = "DOCKER_IMAGE"
DOCKER_TAG_FILTER = "DOCKER_TAG_FILTER"

REVISION_USER = "docker"


def property_value(props: Mapping[str, Any] | None, key: str) -> str:
    """Read one value from a host property bag.

    Both ``{"KEY": "value"}`` and ``{"KEY": {"value": "value"}}`` are accepted;
    a missing key or a null value reads as an empty string.
    """
    if not props:
        return ""
    raw = props.get(key)
    if isinstance(raw, Mapping):
        raw = raw.get("value")
    return "" if raw is None else str(raw)


@dataclass(frozen=True)
class RegistryConfig:
    """Transport settings for talking to a registry."""

    timeout: int = 30


@dataclass(frozen=True)
class RepositoryConfig:
    """Registry endpoint configured on the repository level."""

    registry_url: str
    registry_name: str = ""

    @classmethod
    def from_properties(cls, props: Mapping[str, Any] | None) -> "RepositoryConfig":
        return cls(
            registry_url=property_value(props, DOCKER_REGISTRY_URL),
            registry_name=property_value(props, DOCKER_REGISTRY_NAME),
        )

    def to_properties(self) -> dict[str, str]:
        return {
            DOCKER_REGISTRY_URL: self.registry_url,
            DOCKER_REGISTRY_NAME: self.registry_name,
        }


@dataclass(frozen=True)
class PackageConfig:
    """Image path and tag filter configured on the package level."""

    image: str
    tag_filter: str = ""

    @classmethod
    def from_properties(cls, props: Mapping[str, Any] | None) -> "PackageConfig":
        return cls(
            image=property_value(props, DOCKER_IMAGE),
            tag_filter=property_value(props, DOCKER_TAG_FILTER),
        )

    def to_properties(self) -> dict[str, str]:
        return {DOCKER_IMAGE: self.image, DOCKER_TAG_FILTER: self.tag_filter}

    def tag_list_url(self, repository: RepositoryConfig) -> str:
        # Concatenated verbatim, slashes are the configuration's business
        return repository.registry_url + self.image + "/tags/list"


@dataclass
class RequestResult:
    """Status, headers and body of a single registry response."""

    status_code: int
    headers: Mapping[str, str]
    data: bytes | None = None
    url: str = ""

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


@dataclass(frozen=True)
class AuthChallenge:
    """Bearer challenge parsed from a WWW-Authenticate header."""

    realm: str
    service: str | None = None
    scope: str | None = None


def _format_timestamp(value: datetime) -> str:
    value = value.astimezone(timezone.utc)
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"


def _parse_timestamp(value: Any) -> datetime | None:
    """Parse an ISO-8601 timestamp; anything else reads as no timestamp."""
    if not isinstance(value, str) or not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None


@dataclass(frozen=True)
class Revision:
    """A tag chosen as latest, or an empty revision when nothing matched."""

    revision: str | None = None
    timestamp: datetime | None = None
    user: str = REVISION_USER
    revision_comment: str | None = None
    trackback_url: str | None = None

    @classmethod
    def empty(cls) -> "Revision":
        return cls()

    @property
    def is_empty(self) -> bool:
        return self.revision is None

    def to_dict(self) -> dict[str, Any]:
        return {
            "revision": self.revision,
            "timestamp": _format_timestamp(self.timestamp) if self.timestamp else None,
            "user": self.user,
            "revisionComment": self.revision_comment,
            "trackbackUrl": self.trackback_url,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> "Revision":
        if not data or data.get("revision") is None:
            return cls.empty()
        return cls(
            revision=str(data["revision"]),
            timestamp=_parse_timestamp(data.get("timestamp")),
            user=data.get("user") or REVISION_USER,
            revision_comment=data.get("revisionComment"),
            trackback_url=data.get("trackbackUrl"),
        )


@dataclass(frozen=True)
class ConnectionCheckResult:
    """Outcome of a repository or package connection check."""

    success: bool
    messages: tuple[str, ...] = ()

    @classmethod
    def succeeded(cls, *messages: str) -> "ConnectionCheckResult":
        return cls(True, tuple(messages))

    @classmethod
    def failed(cls, *messages: str) -> "ConnectionCheckResult":
        return cls(False, tuple(messages))

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": "success" if self.success else "failure",
            "messages": list(self.messages),
        }


@dataclass(frozen=True)
class ValidationMessage:
    """A single configuration problem tied to a property key."""

    key: str
    message: str


@dataclass
class ValidationResult:
    """Collected configuration problems; empty means valid."""

    errors: list[ValidationMessage] = field(default_factory=list)

    def add_error(self, key: str, message: str) -> None:
        self.errors.append(ValidationMessage(key, message))

    @property
    def success(self) -> bool:
        return not self.errors

    @property
    def messages(self) -> list[str]:
        return [error.message for error in self.errors]

    def to_dict(self) -> list[dict[str, str]]:
        return [{"key": error.key, "message": error.message} for error in self.errors]
