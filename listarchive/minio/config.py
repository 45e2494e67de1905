"""MinIO configuration from environment variables and credential strings."""

import os
from dataclasses import dataclass, field
from typing import Optional

from ..errors import ValidationError


def _get_env(key: str, default: str) -> str:
    """Get environment variable at call time, not import time."""
    return os.getenv(key, default)


@dataclass
class MinIOConfig:
    """MinIO configuration.

    The endpoint comes from the environment. Access key, secret and bucket
    usually come from a single ``key/secret/bucket`` credential string, see
    from_credentials().
    """

    access_key: str
    secret_key: str
    bucket: str
    url: str = field(default_factory=lambda: _get_env("MINIO_URL", "http://localhost:9000"))
    # None: MINIO_SECURE if set, otherwise TLS exactly when url is https
    secure: Optional[bool] = None

    def __post_init__(self):
        if self.secure is None:
            flag = _get_env("MINIO_SECURE", "")
            if flag:
                self.secure = flag.lower() in ("true", "1", "yes", "on")
            else:
                self.secure = self.url.lower().startswith("https://")

    @classmethod
    def from_credentials(cls, credentials: str, **kwargs) -> "MinIOConfig":
        """Build a config from a ``key/secret/bucket`` string.

        Args:
            credentials: Access key, secret key and bucket joined by "/"
            **kwargs: Overrides for url or secure

        Raises:
            ValidationError: If the string does not split into three non-empty parts
        """
        parts = credentials.split("/") if isinstance(credentials, str) else []
        if len(parts) != 3 or not all(parts):
            raise ValidationError("Bucket credentials must look like key/secret/bucket")
        access_key, secret_key, bucket = parts
        return cls(access_key=access_key, secret_key=secret_key, bucket=bucket, **kwargs)

    @property
    def endpoint(self) -> str:
        """Host[:port] without the scheme, as the Minio client expects."""
        return self.url.replace("http://", "").replace("https://", "")
