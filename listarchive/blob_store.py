"""Content-addressed storage for message bodies.

A body's location is derived from its message id, never chosen by the
caller:

    <hex sha512(message_id)>/original.md

so the same message always lands in the same place and re-ingesting it
simply overwrites the object.
"""

import asyncio
import hashlib
import logging

from .errors import NotFound, TransportError, ValidationError
from .minio.client import MinIOClient

logger = logging.getLogger(__name__)

BODY_FILENAME = "original.md"
BODY_CONTENT_TYPE = "text/markdown; charset=utf-8"


def body_location(message_id: str) -> str:
    """Hex SHA-512 digest of a message id."""
    return hashlib.sha512(message_id.encode("utf-8")).hexdigest()


def body_address(message_id: str) -> str:
    """Blob address holding the body of a message."""
    return f"{body_location(message_id)}/{BODY_FILENAME}"


def _require_address(address) -> None:
    if not isinstance(address, str) or not address:
        raise ValidationError("Path must be a non-empty string")


class BlobStore:
    """Async read/write of opaque byte payloads in MinIO.

    The MinIO SDK is blocking, so every call runs on a worker thread.
    """

    def __init__(self, client: MinIOClient):
        self.client = client

    async def put(self, address: str, payload: bytes) -> str:
        """Write a payload, replacing whatever is stored at the address.

        Args:
            address: Object path, see body_address()
            payload: Raw bytes (text must be encoded by the caller)

        Returns:
            The address written

        Raises:
            ValidationError: On an empty address or non-bytes payload
            TransportError: If the storage call fails
        """
        _require_address(address)
        if not isinstance(payload, (bytes, bytearray)):
            raise ValidationError("Body must be a buffer")
        try:
            await asyncio.to_thread(
                self.client.put_bytes, address, bytes(payload), BODY_CONTENT_TYPE
            )
        except Exception as e:
            raise TransportError(f"Failed to store blob {address}: {e}") from e
        logger.debug(f"Stored blob {address} ({len(payload)} bytes)")
        return address

    async def get(self, address: str) -> bytes:
        """Read the full payload stored at an address.

        Raises:
            ValidationError: On an empty address
            NotFound: If no object exists at the address
            TransportError: If the storage call fails
        """
        _require_address(address)
        try:
            data = await asyncio.to_thread(self.client.get_bytes, address)
        except NotFound:
            raise
        except Exception as e:
            raise TransportError(f"Failed to read blob {address}: {e}") from e
        logger.debug(f"Read blob {address} ({len(data)} bytes)")
        return data
