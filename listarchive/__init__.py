"""Persistence layer for archived mailing lists.

Message headers, topics, lists and the processed-URL ledger live in
SurrealDB; message bodies live in MinIO under a content address derived
from the message id.
"""

from .blob_store import BlobStore, body_address, body_location
from .config import ArchiveConfig, load_config
from .errors import ArchiveStoreError, NotFound, TransportError, ValidationError
from .factory import create_repository, open_repository
from .ledger import DedupLedger
from .metadata_store import MetadataStore
from .repository import ArchiveRepository, Page
from .validation import (
    ValidationResult,
    is_message,
    is_subject,
    validate_message,
    validate_subject,
)

__all__ = [
    # Stores
    "BlobStore",
    "body_address",
    "body_location",
    "DedupLedger",
    "MetadataStore",
    # Repository
    "ArchiveRepository",
    "Page",
    "create_repository",
    "open_repository",
    # Config
    "ArchiveConfig",
    "load_config",
    # Errors
    "ArchiveStoreError",
    "ValidationError",
    "NotFound",
    "TransportError",
    # Validation
    "ValidationResult",
    "validate_message",
    "validate_subject",
    "is_message",
    "is_subject",
]
