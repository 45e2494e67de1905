"""Ledger of source URLs that ingestion has already handled.

A processed record is just ``{"_id": url}``: its existence is the whole
meaning. Marking is an upsert keyed by the URL, so re-running an ingestion
after a partial failure never trips over duplicates.
"""

import logging

from .metadata_store import MetadataStore
from .validation import require_source_url

logger = logging.getLogger(__name__)

PROCESSED = "processed"


class DedupLedger:
    """Membership set of processed source URLs."""

    def __init__(self, metadata: MetadataStore):
        self.metadata = metadata

    async def is_processed(self, url: str) -> bool:
        """Test if a source message has been processed.

        Lookup failures count as "not processed": re-processing a message
        is preferable to silently skipping it.

        Args:
            url: The url of the original message

        Returns:
            True if the message has been processed, otherwise False

        Raises:
            ValidationError: If url is not an http(s) URL
        """
        require_source_url(url)
        try:
            return await self.metadata.find_by_id(PROCESSED, url) is not None
        except Exception as e:
            logger.warning(f"Processed lookup failed for {url}, treating as unprocessed: {e}")
            return False

    async def mark_processed(self, url: str) -> None:
        """Mark a source message as processed.

        Raises:
            ValidationError: If url is not an http(s) URL
        """
        require_source_url(url)
        await self.metadata.upsert(PROCESSED, url, {"_id": url})
        logger.debug(f"Marked processed: {url}")
