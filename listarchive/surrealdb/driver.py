"""SurrealDB connection management with async support and retry logic.

One SurrealExecutor owns one connection. It is built once at process start
by the factory and injected into the metadata store; close() releases it.

Usage:
    executor = await connect_executor(SurrealDBConfig())
    try:
        rows = await executor.execute("SELECT * FROM topics")
    finally:
        await executor.close()
"""

import asyncio
import logging
from typing import Any, Optional

from surrealdb import AsyncSurreal

from ..errors import TransportError
from .config import SurrealDBConfig

logger = logging.getLogger(__name__)


class SurrealExecutor:
    """DatabaseExecutor backed by a live SurrealDB connection."""

    def __init__(self, config: SurrealDBConfig, max_retries: int = 3, retry_delay: float = 1.0):
        self.config = config
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self._db: Optional[AsyncSurreal] = None

    @property
    def connected(self) -> bool:
        return self._db is not None

    async def connect(self) -> None:
        """Open the connection, select namespace/database and sign in.

        Raises:
            ValueError: If configuration validation fails
            TransportError: If the connection fails after retries
        """
        if self._db is not None:
            return

        config = self.config
        config.validate()

        db = AsyncSurreal(config.url)

        for attempt in range(self.max_retries):
            try:
                await db.use(config.namespace, config.database)
                logger.info(f"Connected to SurrealDB at {config.url}")
                logger.info(
                    f"Using namespace={config.namespace}, database={config.database}"
                )
                break
            except Exception as e:
                if attempt == self.max_retries - 1:
                    logger.error(f"Failed to connect to SurrealDB: {e}")
                    raise TransportError(f"Failed to connect to SurrealDB at {config.url}") from e
                logger.warning(
                    f"Connection attempt {attempt + 1} failed, retrying: {e}"
                )
                await asyncio.sleep(self.retry_delay)

        try:
            await db.signin({
                "username": config.user,
                "password": config.password,
            })
            logger.info("Signed in to SurrealDB")
        except Exception as e:
            logger.error(f"Failed to sign in: {e}")
            raise TransportError("Failed to sign in to SurrealDB") from e

        self._db = db

    async def execute(
        self,
        query: str,
        params: Optional[dict[str, Any]] = None,
    ) -> list[dict[str, Any]]:
        """Execute a SurrealQL query and return results.

        Args:
            query: SurrealQL query string
            params: Query parameters

        Returns:
            List of result records as dictionaries

        Raises:
            TransportError: If the connection is closed or the query fails
        """
        if self._db is None:
            raise TransportError("SurrealDB connection is not open")
        try:
            result = await self._db.query(query, params or {})
        except Exception as e:
            logger.error(f"Query execution error: {e}")
            raise TransportError(f"SurrealDB query failed: {e}") from e
        # Single-statement queries come back as a plain list of records
        if isinstance(result, list):
            return result
        return []

    async def close(self) -> None:
        """Close the connection. Safe to call more than once."""
        db, self._db = self._db, None
        if db is None:
            return
        try:
            await db.close()
            logger.info("Closed SurrealDB connection")
        except Exception as e:
            logger.error(f"Error closing SurrealDB connection: {e}")


async def connect_executor(config: Optional[SurrealDBConfig] = None) -> SurrealExecutor:
    """Create and connect a SurrealExecutor.

    Args:
        config: Connection descriptor. Read from the environment if omitted.

    Returns:
        Connected executor
    """
    executor = SurrealExecutor(config or SurrealDBConfig())
    await executor.connect()
    return executor


async def verify_connection(executor) -> bool:
    """Verify a SurrealDB connection is working.

    Returns:
        True if connection successful, False otherwise
    """
    try:
        # SurrealDB requires a valid query - use time::now() as a simple ping
        await executor.execute("RETURN time::now()")
        return True
    except Exception as e:
        logger.error(f"Connection verification failed: {e}")
        return False
