"""Factory functions for creating MinIO service instances."""

from typing import Optional

from .client import MinIOClient
from .config import MinIOConfig


def create_minio_client(
    config: Optional[MinIOConfig] = None,
    credentials: Optional[str] = None,
) -> MinIOClient:
    """Create and initialize a MinIO client.

    Args:
        config: Explicit configuration.
        credentials: ``key/secret/bucket`` string, used when config is omitted.

    Returns:
        Initialized MinIOClient instance with its bucket created.
    """
    if config is None:
        if credentials is None:
            raise ValueError("Either config or credentials is required")
        config = MinIOConfig.from_credentials(credentials)
    client = MinIOClient(config)
    client.ensure_bucket()
    return client
