"""Configuration for the archive storage layer.

Values come from the environment, optionally seeded from a .env file:

    SURREALDB_URL, SURREALDB_USER, SURREALDB_PASSWORD,
    SURREALDB_NAMESPACE, SURREALDB_DATABASE   document store
    ARCHIVE_BUCKET                            key/secret/bucket for bodies
    MINIO_URL, MINIO_SECURE                   blob store endpoint

Leaving ARCHIVE_BUCKET unset runs the repository in metadata-only mode.
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from .minio.config import MinIOConfig
from .surrealdb.config import SurrealDBConfig

logger = logging.getLogger(__name__)


@dataclass
class ArchiveConfig:
    """Connection descriptors for both stores."""

    surrealdb: SurrealDBConfig = field(default_factory=SurrealDBConfig)
    bucket_credentials: Optional[str] = field(
        default_factory=lambda: os.getenv("ARCHIVE_BUCKET") or None
    )
    init_schema: bool = True

    def minio_config(self) -> Optional[MinIOConfig]:
        """MinIO settings, or None in metadata-only mode."""
        if not self.bucket_credentials:
            return None
        return MinIOConfig.from_credentials(self.bucket_credentials)

    def validate(self) -> None:
        """Validate configuration.

        Raises:
            ValueError: If the document store settings are incomplete or the
                bucket credentials are malformed
        """
        self.surrealdb.validate()
        self.minio_config()


def load_config(env_file: Optional[Path] = None) -> ArchiveConfig:
    """Load configuration, reading a .env file first if one is found.

    Real environment variables always win over .env entries.

    Args:
        env_file: Explicit .env path. Defaults to searching from the cwd up.
    """
    if env_file is not None:
        loaded = load_dotenv(env_file, override=False)
    else:
        loaded = load_dotenv(override=False)
    if loaded:
        logger.debug("Loaded environment from .env")
    return ArchiveConfig()
