"""Archive repository: the storage façade for lists, topics and messages.

Storage:
- SurrealDB for metadata (lists, topics, message headers, processed URLs)
- MinIO for message bodies at <sha512(message_id)>/original.md

A message is split on the way in (headers to the document store, body to the
blob store, both written concurrently) and reassembled on the way out.

The two writes in add_message() are not atomic. If one fails after the other
succeeded the stores disagree: headers pointing at a missing body, or an
orphan body. Callers that need stronger guarantees must reconcile
externally.
"""

import asyncio
import logging
from typing import Any, Optional

from pydantic import BaseModel, Field

from .blob_store import BlobStore, body_address
from .errors import TransportError, ValidationError
from .ledger import DedupLedger
from .metadata_store import MetadataStore
from .validation import is_message, is_subject, require_identifier

logger = logging.getLogger(__name__)

LISTS = "lists"
TOPICS = "topics"
MESSAGES = "messages"


class Page(BaseModel):
    """One page of topics, most recently active first."""

    items: list[dict[str, Any]] = Field(default_factory=list)
    first: bool
    last: bool
    page_index: int
    page_size: int

    def __len__(self) -> int:
        return len(self.items)


def _require_page_args(page_index: Any, page_size: Any) -> None:
    if not isinstance(page_index, int) or isinstance(page_index, bool) or page_index < 0:
        raise ValidationError("page_index must be a non-negative integer")
    if not isinstance(page_size, int) or isinstance(page_size, bool) or page_size <= 0:
        raise ValidationError("page_size must be a positive integer")


class ArchiveRepository:
    """Repository for archived mailing lists using SurrealDB + MinIO.

    Supports dependency injection for testability:
    - Pass a MetadataStore built on any DatabaseExecutor (e.g., FakeDatabaseExecutor)
    - Pass a BlobStore built on any MinIOClient (e.g., FakeMinIOClient)

    Without a blob store the repository runs in metadata-only mode: message
    bodies are dropped on ingestion and retrieval returns headers only.
    """

    def __init__(self, metadata: MetadataStore, blobs: Optional[BlobStore] = None):
        self.metadata = metadata
        self.blobs = blobs
        self.ledger = DedupLedger(metadata)

    @property
    def stores_bodies(self) -> bool:
        return self.blobs is not None

    async def __aenter__(self) -> "ArchiveRepository":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def close(self) -> None:
        """Release the document-store connection."""
        await self.metadata.close()

    # -------------------------------------------------------------------------
    # Processed-URL ledger
    # -------------------------------------------------------------------------

    async def is_processed(self, url: str) -> bool:
        """True if the source message at url was already ingested."""
        return await self.ledger.is_processed(url)

    async def mark_processed(self, url: str) -> None:
        """Record that the source message at url has been ingested."""
        await self.ledger.mark_processed(url)

    # -------------------------------------------------------------------------
    # Messages
    # -------------------------------------------------------------------------

    async def add_message(self, message: dict[str, Any]) -> None:
        """Store a message: headers in SurrealDB, body in MinIO.

        Both writes run concurrently and the call succeeds only if both do.
        The caller's dict is left untouched.

        Raises:
            ValidationError: If the message is malformed (nothing is written)
            TransportError: If either store fails
        """
        is_message(message)
        headers = dict(message)
        body = headers.pop("body")
        message_id = headers["_id"]

        writes = [self.metadata.upsert(MESSAGES, message_id, headers)]
        if self.blobs is not None:
            writes.append(self.blobs.put(body_address(message_id), body.encode("utf-8")))

        try:
            await asyncio.gather(*writes)
        except Exception as e:
            logger.error(f"Failed to store message {message_id}, stores may disagree: {e}")
            raise
        logger.debug(f"Stored message {message_id} in topic {headers['subjectToken']}")

    async def get_message_headers(self, subject_token: str) -> list[dict[str, Any]]:
        """Message headers of a topic, oldest first. Bodies are not fetched."""
        require_identifier(subject_token, "subject_token")
        return await self.metadata.find_many(
            MESSAGES, {"subjectToken": subject_token}, sort={"date": 1}
        )

    async def get_messages(self, subject_token: str) -> list[dict[str, Any]]:
        """Full messages of a topic, oldest first, with bodies reattached.

        Bodies are fetched concurrently; the result keeps header order.

        Raises:
            NotFound: If a message's body is missing from the blob store
            TransportError: If a body cannot be read or is not valid UTF-8
        """
        messages = await self.get_message_headers(subject_token)
        if self.blobs is None:
            return messages

        bodies = await asyncio.gather(
            *(self.blobs.get(body_address(message["_id"])) for message in messages)
        )
        for message, body in zip(messages, bodies):
            try:
                message["body"] = body.decode("utf-8")
            except UnicodeDecodeError as e:
                raise TransportError(f"Body of message {message['_id']} is not valid UTF-8") from e
        return messages

    # -------------------------------------------------------------------------
    # Topics
    # -------------------------------------------------------------------------

    async def get_topic(self, id: str) -> Optional[dict[str, Any]]:
        return await self.metadata.find_by_id(TOPICS, id)

    async def update_subject(self, subject: dict[str, Any]) -> None:
        """Create or replace a topic record.

        Raises:
            ValidationError: If the subject is malformed (nothing is written)
        """
        is_subject(subject)
        await self.metadata.upsert(TOPICS, subject["_id"], subject)

    async def get_page(
        self, source: Optional[str], page_index: int, page_size: int
    ) -> Page:
        """Page through topics, most recently active first.

        Fetches one row beyond the page: if it exists there is a next page,
        so no separate count query is needed.

        Args:
            source: List id to restrict to, or None for every list
            page_index: Zero-based page number
            page_size: Topics per page

        Returns:
            Page with at most page_size items and first/last flags
        """
        _require_page_args(page_index, page_size)
        rows = await self.metadata.find_many(
            TOPICS,
            {"source": source},
            sort={"end": -1},
            skip=page_index * page_size,
            limit=page_size + 1,
        )
        last = len(rows) < page_size + 1
        if not last:
            rows.pop()
        return Page(
            items=rows,
            first=page_index == 0,
            last=last,
            page_index=page_index,
            page_size=page_size,
        )

    # -------------------------------------------------------------------------
    # Lists
    # -------------------------------------------------------------------------

    async def get_lists(self) -> list[dict[str, Any]]:
        return await self.metadata.find_many(LISTS)

    async def get_list(self, id: str) -> Optional[dict[str, Any]]:
        return await self.metadata.find_by_id(LISTS, id)
