"""Exception hierarchy for universal-api.

Every exception inherits from :class:`UniversalApiError` and carries an
``exit_code`` used by the CLI. Library code raises these and lets them
propagate; only :mod:`universal_api.cli` turns them into process exits.

Subclass hierarchy::

    UniversalApiError          (exit 1)
    +-- InvalidRequest         (exit 2)
    +-- UnsupportedContentType (exit 3)
    +-- MalformedInput         (exit 4)
    +-- NotOpenAPIDocument     (exit 5)
    +-- NetworkError           (exit 6)
    +-- DocumentNotFound       (exit 7)
    +-- RateLimitExceeded      (exit 8)
    +-- StorageError           (exit 1)
    +-- ConfigError            (exit 1)
"""


class UniversalApiError(Exception):
    """Base exception for all universal-api errors.

    Args:
        message: Human-readable error description.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = 1

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidRequest(UniversalApiError):
    """Raised when a submission is missing required input (e.g. an empty URL)."""

    exit_code = 2


class UnsupportedContentType(UniversalApiError):
    """Raised when an explicit format or content type maps to no parser."""

    exit_code = 3


class MalformedInput(UniversalApiError):
    """Raised on JSON or YAML syntax errors."""

    exit_code = 4


class NotOpenAPIDocument(UniversalApiError):
    """Raised when well-formed JSON/YAML has neither an ``openapi`` nor a ``swagger`` field."""

    exit_code = 5


class NetworkError(UniversalApiError):
    """Raised by the fetcher when the server answers with a non-success status."""

    exit_code = 6

    def __init__(self, status_code: int, url: str = ""):
        message = f"HTTP request failed with status code: {status_code}"
        if url:
            message += f" ({url})"
        super().__init__(message)
        self.status_code = status_code
        self.url = url


class DocumentNotFound(UniversalApiError):
    """Raised when a storage lookup has no document with the requested id."""

    exit_code = 7

    def __init__(self, doc_id: str):
        super().__init__(f"API doc not found: {doc_id}")
        self.doc_id = doc_id


class RateLimitExceeded(UniversalApiError):
    """Raised when a domain has been submitted too often within the rate window."""

    exit_code = 8


class StorageError(UniversalApiError):
    """Raised when a document cannot be written to or read from storage."""


class ConfigError(UniversalApiError):
    """Raised for unreadable config files or invalid setting values."""
