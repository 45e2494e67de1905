"""Document-store CRUD over the archive collections.

Every record is a plain dict keyed by ``_id``. The SurrealDB record id is
derived from the same value (``type::thing(table, _id)``), so an upsert for
an existing ``_id`` replaces that record instead of creating a second one.

Collections:
- lists: mailing list descriptions, written by an external importer
- topics: one record per subject thread
- messages: message headers (bodies live in the blob store)
- processed: source URLs that ingestion has already handled
"""

import logging
import re
from typing import Any, Mapping, Optional

from .errors import ValidationError
from .surrealdb.protocols import DatabaseExecutor
from .surrealdb.schema import COLLECTIONS
from .validation import require_identifier

logger = logging.getLogger(__name__)

_FIELD_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

# Reserved by SurrealDB for the record id
_RECORD_ID_KEY = "id"


def _check_collection(collection: str) -> str:
    if collection not in COLLECTIONS:
        raise ValidationError(f"Unknown collection: {collection!r}")
    return collection


def _quote_field(name: str) -> str:
    if not isinstance(name, str) or not _FIELD_PATTERN.match(name):
        raise ValidationError(f"Invalid field name: {name!r}")
    return f"`{name}`"


def _clean(row: dict[str, Any]) -> dict[str, Any]:
    """Drop the store's record id, leaving the caller's document."""
    return {key: value for key, value in row.items() if key != _RECORD_ID_KEY}


def _where_clause(
    filter: Optional[Mapping[str, Any]], params: dict[str, Any]
) -> str:
    """Build an equality WHERE clause, adding its values to params.

    Fields whose filter value is None are left unconstrained.
    """
    conditions = []
    for index, (field, value) in enumerate((filter or {}).items()):
        if value is None:
            continue
        param = f"f{index}"
        conditions.append(f"{_quote_field(field)} = ${param}")
        params[param] = value
    if not conditions:
        return ""
    return " WHERE " + " AND ".join(conditions)


def _order_clause(sort: Optional[Mapping[str, int]]) -> str:
    if not sort:
        return ""
    parts = []
    for field, direction in sort.items():
        if direction not in (1, -1) or isinstance(direction, bool):
            raise ValidationError(f"Sort direction for {field!r} must be 1 or -1")
        parts.append(f"{_quote_field(field)} {'ASC' if direction == 1 else 'DESC'}")
    return " ORDER BY " + ", ".join(parts)


class MetadataStore:
    """CRUD over the lists, topics, messages and processed collections.

    Args:
        db: DatabaseExecutor (SurrealExecutor, or FakeDatabaseExecutor in tests)
    """

    def __init__(self, db: DatabaseExecutor):
        self.db = db

    async def upsert(
        self, collection: str, id: str, record: Mapping[str, Any]
    ) -> dict[str, Any]:
        """Insert or fully replace the record with the given id.

        The stored document becomes exactly ``record`` (plus ``_id``); fields
        from a previous version are not merged in.

        Raises:
            ValidationError: If record carries the reserved ``id`` key

        Returns:
            The stored document
        """
        _check_collection(collection)
        require_identifier(id, "_id")
        if _RECORD_ID_KEY in record:
            raise ValidationError(f"'{_RECORD_ID_KEY}' is reserved by the document store")
        content = dict(record)
        content["_id"] = id

        await self.db.execute(
            "UPSERT type::thing($table, $id) CONTENT $record;",
            {"table": collection, "id": id, "record": content},
        )
        logger.debug(f"Upserted {collection}:{id}")
        return content

    async def find_by_id(self, collection: str, id: str) -> Optional[dict[str, Any]]:
        """Get a single record by id, or None if it does not exist."""
        _check_collection(collection)
        require_identifier(id, "_id")
        results = await self.db.execute(
            "SELECT * FROM type::thing($table, $id);",
            {"table": collection, "id": id},
        )
        if not results:
            return None
        return _clean(results[0])

    async def find_many(
        self,
        collection: str,
        filter: Optional[Mapping[str, Any]] = None,
        sort: Optional[Mapping[str, int]] = None,
        skip: int = 0,
        limit: Optional[int] = None,
    ) -> list[dict[str, Any]]:
        """Query a collection.

        Args:
            collection: One of COLLECTIONS
            filter: Field equality constraints; None values are ignored
            sort: {field: 1 | -1} applied in mapping order
            skip: Number of leading records to drop
            limit: Maximum number of records to return

        Returns:
            Matching records in sort order
        """
        _check_collection(collection)
        if not isinstance(skip, int) or isinstance(skip, bool) or skip < 0:
            raise ValidationError("skip must be a non-negative integer")
        if limit is not None and (
            not isinstance(limit, int) or isinstance(limit, bool) or limit <= 0
        ):
            raise ValidationError("limit must be a positive integer")

        params: dict[str, Any] = {"table": collection}
        query = "SELECT * FROM type::table($table)"
        query += _where_clause(filter, params)
        query += _order_clause(sort)
        if limit is not None:
            query += " LIMIT $limit"
            params["limit"] = limit
        if skip:
            query += " START $start"
            params["start"] = skip

        results = await self.db.execute(query + ";", params)
        return [_clean(row) for row in results]

    async def count(
        self, collection: str, filter: Optional[Mapping[str, Any]] = None
    ) -> int:
        """Count records matching an equality filter."""
        _check_collection(collection)
        params: dict[str, Any] = {"table": collection}
        query = "SELECT count() FROM type::table($table)"
        query += _where_clause(filter, params)
        query += " GROUP ALL;"

        results = await self.db.execute(query, params)
        # GROUP ALL over an empty set yields no rows at all
        if not results:
            return 0
        return int(results[0]["count"])

    async def close(self) -> None:
        """Release the underlying database connection."""
        await self.db.close()
