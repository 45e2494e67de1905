"""SurrealDB service module for archive metadata storage.

Provides:
- Connection management (async with retry logic)
- DatabaseExecutor protocol for dependency injection
- Schema setup for the lists, topics, messages and processed tables
"""

from .config import SurrealDBConfig
from .driver import SurrealExecutor, connect_executor, verify_connection
from .protocols import DatabaseExecutor
from .schema import COLLECTIONS, init_schema

__all__ = [
    # Config
    "SurrealDBConfig",
    # Driver
    "SurrealExecutor",
    "connect_executor",
    "verify_connection",
    "DatabaseExecutor",
    # Schema
    "COLLECTIONS",
    "init_schema",
]
