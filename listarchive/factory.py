"""Construction of a fully wired ArchiveRepository.

Usage:
    async with open_repository() as repo:
        page = await repo.get_page("dev-list", 0, 20)
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from .blob_store import BlobStore
from .config import ArchiveConfig, load_config
from .metadata_store import MetadataStore
from .minio.factory import create_minio_client
from .repository import ArchiveRepository
from .surrealdb.driver import connect_executor
from .surrealdb.schema import init_schema

logger = logging.getLogger(__name__)


async def create_repository(config: ArchiveConfig) -> ArchiveRepository:
    """Connect both stores and build a repository.

    The caller owns the result and must close() it.
    """
    config.validate()
    minio_config = config.minio_config()

    executor = await connect_executor(config.surrealdb)
    try:
        if config.init_schema:
            await init_schema(executor)
        blobs = None
        if minio_config is not None:
            blobs = BlobStore(create_minio_client(minio_config))
        else:
            logger.info("No bucket credentials configured, storing metadata only")
    except BaseException:
        await executor.close()
        raise
    return ArchiveRepository(MetadataStore(executor), blobs)


@asynccontextmanager
async def open_repository(
    config: Optional[ArchiveConfig] = None,
) -> AsyncIterator[ArchiveRepository]:
    """Async context manager yielding a connected repository.

    The document-store connection is released on every exit path.
    """
    repository = await create_repository(config or load_config())
    try:
        yield repository
    finally:
        await repository.close()
