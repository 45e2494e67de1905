"""Exception taxonomy for the archive storage layer.

- ValidationError: malformed input, raised before any I/O
- NotFound: a referenced blob or record does not exist
- TransportError: the document or blob store failed or is unreachable
"""


class ArchiveStoreError(Exception):
    """Base class for all archive storage errors."""


class ValidationError(ArchiveStoreError, ValueError):
    """Input failed validation. Never retried."""

    def __init__(self, message: str, errors: list[str] | None = None):
        super().__init__(message)
        self.errors = errors or []


class NotFound(ArchiveStoreError, LookupError):
    """Referenced blob or metadata record is absent."""


class TransportError(ArchiveStoreError, ConnectionError):
    """Underlying store unreachable or returned a protocol-level failure."""
