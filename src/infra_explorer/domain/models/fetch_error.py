"""Fetch error domain model."""

from enum import Enum


class FetchErrorKind(str, Enum):
    """Failure categories at the API boundary."""

    NETWORK = "network"
    TIMEOUT = "timeout"
    SERVER_ERROR = "server_error"
    DECODE_ERROR = "decode_error"


def describe_status(status_code: int) -> str:
    """Human readable reason for a non-2xx HTTP status."""
    if status_code == 429:
        return "Rate limit exceeded"
    if status_code == 502:
        return "Bad gateway (server error)"
    if status_code == 503:
        return "Service unavailable"
    if status_code == 504:
        return "Gateway timeout"
    return f"HTTP {status_code}"


class FetchError(Exception):
    """A failed fetch of an infrastructure collection.

    Raised by the API client and carried as data in fetch outcomes; it is
    shown to the operator on the status line and never ends the process.
    """

    def __init__(
        self, kind: FetchErrorKind, detail: str = "", status_code: int | None = None
    ) -> None:
        self.kind = kind
        self.detail = detail
        self.status_code = status_code
        super().__init__(self.message)

    @classmethod
    def timeout(cls) -> "FetchError":
        return cls(FetchErrorKind.TIMEOUT)

    @classmethod
    def network(cls, detail: str = "") -> "FetchError":
        return cls(FetchErrorKind.NETWORK, detail)

    @classmethod
    def server_error(cls, status_code: int) -> "FetchError":
        return cls(FetchErrorKind.SERVER_ERROR, describe_status(status_code), status_code)

    @classmethod
    def decode_error(cls, detail: str = "") -> "FetchError":
        return cls(FetchErrorKind.DECODE_ERROR, detail)

    @property
    def message(self) -> str:
        """Status line text for this error."""
        if self.kind is FetchErrorKind.TIMEOUT:
            return "Timeout"
        if self.kind is FetchErrorKind.SERVER_ERROR:
            return f"Server error: {self.detail}"
        label = "Network error" if self.kind is FetchErrorKind.NETWORK else "Decode error"
        return f"{label}: {self.detail}" if self.detail else label

    def __repr__(self) -> str:
        return f"FetchError(kind={self.kind.value!r}, message={self.message!r})"
