"""Protocols for SurrealDB operations.

Defines the query-execution interface the metadata store depends on, so a
live connection can be swapped for an in-memory fake in tests.
"""

from typing import Any, Protocol


class DatabaseExecutor(Protocol):
    """Protocol for database query execution.

    Implementations:
    - SurrealExecutor: Uses an actual SurrealDB connection
    - FakeDatabaseExecutor: In-memory implementation for testing
    """

    async def execute(
        self, query: str, params: dict[str, Any] | None = None
    ) -> list[dict[str, Any]]:
        """Execute a SurrealQL query and return results.

        Args:
            query: SurrealQL query string
            params: Query parameters

        Returns:
            List of result records as dictionaries
        """
        ...

    async def close(self) -> None:
        """Release the underlying connection."""
        ...
