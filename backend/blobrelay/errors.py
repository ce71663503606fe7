from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    BLOCKED = "blocked"
    TIMEOUT = "timeout"
    TOO_LARGE = "too_large"
    UPSTREAM = "upstream"
    STORE = "store"
    CONFIG = "config"
    NOT_FOUND = "not_found"


class RelayError(Exception):
    """Base for every failure the relay reports to a caller.

    ``message`` is safe to show to the client; ``status_code`` is the HTTP
    status the API layer answers with. Nothing in the relay retries on these.
    """

    kind: ErrorKind = ErrorKind.VALIDATION
    status_code: int = 400
    default_message: str = "Bad request"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(RelayError):
    kind = ErrorKind.VALIDATION
    default_message = "Invalid request"


class UnsupportedType(ValidationError):
    default_message = "Unsupported file type"


class InvalidEncoding(ValidationError):
    default_message = "Invalid base64"


class SecurityBlocked(RelayError):
    # Same text for every guard rule so the filter can't be probed
    kind = ErrorKind.BLOCKED
    default_message = "URL not allowed"


class FetchTimeout(RelayError):
    kind = ErrorKind.TIMEOUT
    default_message = "Request timed out"


class TooLarge(RelayError):
    kind = ErrorKind.TOO_LARGE
    default_message = "File too large"


class UpstreamError(RelayError):
    kind = ErrorKind.UPSTREAM
    default_message = "Failed to fetch"


class StoreCheckError(RelayError):
    """Existence check came back with something other than found / not found."""

    kind = ErrorKind.UPSTREAM
    status_code = 502
    default_message = "Store check failed"


class StoreError(RelayError):
    kind = ErrorKind.STORE
    default_message = "Upload failed"


class BlobExistsError(StoreError):
    """Create lost the race: the key was written by someone else first."""

    status_code = 409
    default_message = "Object already exists"


class ConfigError(RelayError):
    kind = ErrorKind.CONFIG
    status_code = 500
    default_message = "Server not configured"


class BlobNotFound(RelayError):
    kind = ErrorKind.NOT_FOUND
    status_code = 404
    default_message = "Not found"
