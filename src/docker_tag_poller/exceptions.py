"""Custom exceptions for the Docker tag poller."""


class PollerError(Exception):
    """Base exception for all poller errors."""

    pass


class FetchError(PollerError):
    """Raised when a registry URL could not be fetched."""

    pass


class TransportError(FetchError):
    """Raised when the registry cannot be reached (DNS, timeout, refused)."""

    pass


class HttpStatusError(FetchError):
    """Raised when the registry answers with a status we cannot resolve."""

    def __init__(self, status: int, url: str) -> None:
        self.status = status
        self.url = url
        super().__init__(f"HTTP {status} for {url}")


class AuthHeaderParseError(FetchError):
    """Raised when a WWW-Authenticate header carries no realm."""

    pass


class TokenFetchError(FetchError):
    """Raised when a bearer token cannot be obtained from the realm."""

    pass


class InvalidFilterError(PollerError):
    """Raised when the configured tag filter is not a valid regular expression."""

    def __init__(self, pattern: str, url: str, reason: str) -> None:
        self.pattern = pattern
        self.url = url
        self.reason = reason
        super().__init__(
            f"Invalid docker tag filter '{pattern}' used for image '{url}': {reason}"
        )


class ParseError(PollerError):
    """Raised when a registry response body is malformed."""

    pass
