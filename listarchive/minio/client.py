"""MinIO client wrapper for object storage operations."""

from io import BytesIO

from minio import Minio
from minio.error import S3Error

from ..errors import NotFound
from .config import MinIOConfig

# S3 error codes meaning "nothing stored at this key"
MISSING_OBJECT_CODES = {"NoSuchKey", "NoSuchObject", "ResourceNotFound"}


class MinIOClient:
    """Client for interacting with MinIO object storage."""

    def __init__(self, config: MinIOConfig):
        """Initialize MinIO client.

        Args:
            config: MinIOConfig instance with connection details.
        """
        self.client = Minio(
            config.endpoint,
            access_key=config.access_key,
            secret_key=config.secret_key,
            secure=config.secure,
        )
        self.bucket = config.bucket

    def ensure_bucket(self) -> None:
        """Create bucket if it doesn't exist."""
        if not self.client.bucket_exists(self.bucket):
            self.client.make_bucket(self.bucket)

    def put_bytes(self, path: str, data: bytes, content_type: str = "application/octet-stream") -> str:
        """Store raw bytes in MinIO, replacing any object at the same path.

        Args:
            path: Object path in bucket.
            data: Content to store.
            content_type: MIME type recorded with the object.

        Returns:
            The path where data was stored.
        """
        self.client.put_object(
            self.bucket,
            path,
            BytesIO(data),
            len(data),
            content_type=content_type,
        )
        return path

    def get_bytes(self, path: str) -> bytes:
        """Retrieve an object's full content from MinIO.

        The response stream is read to the end and its connection released
        before returning.

        Args:
            path: Object path in bucket.

        Returns:
            Object content.

        Raises:
            NotFound: If no object exists at path.
        """
        try:
            response = self.client.get_object(self.bucket, path)
        except S3Error as e:
            if e.code in MISSING_OBJECT_CODES:
                raise NotFound(f"Object not found: {path}") from e
            raise
        try:
            return response.read()
        finally:
            response.close()
            response.release_conn()
