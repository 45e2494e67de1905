"""Shared pytest fixtures for archive storage tests."""

from datetime import datetime, timedelta, timezone

import pytest

from listarchive.blob_store import BlobStore
from listarchive.metadata_store import MetadataStore
from listarchive.repository import ArchiveRepository
from listarchive.tests.fakes import FakeDatabaseExecutor, FakeMinIOClient

BASE_TIME = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


def make_message(
    message_id: str,
    subject_token: str = "t1",
    minutes: int = 0,
    body: str = "hello",
    **headers,
) -> dict:
    """Build a well-formed message record."""
    return {
        "_id": message_id,
        "subjectToken": subject_token,
        "date": BASE_TIME + timedelta(minutes=minutes),
        "body": body,
        **headers,
    }


def make_topic(topic_id: str, source: str = "es-discuss", hours: int = 0, **fields) -> dict:
    """Build a well-formed topic record."""
    return {
        "_id": topic_id,
        "source": source,
        "end": BASE_TIME + timedelta(hours=hours),
        **fields,
    }


# =============================================================================
# Fakes
# =============================================================================


@pytest.fixture
def fake_db():
    """Create a fresh FakeDatabaseExecutor for each test."""
    return FakeDatabaseExecutor()


@pytest.fixture
def fake_minio():
    """Create a fresh FakeMinIOClient for each test."""
    return FakeMinIOClient()


# =============================================================================
# Stores
# =============================================================================


@pytest.fixture
def metadata(fake_db):
    return MetadataStore(fake_db)


@pytest.fixture
def blobs(fake_minio):
    return BlobStore(fake_minio)


@pytest.fixture
def repo(metadata, blobs):
    """ArchiveRepository with injected fakes."""
    return ArchiveRepository(metadata, blobs)


@pytest.fixture
def metadata_only_repo(metadata):
    """ArchiveRepository without a blob store."""
    return ArchiveRepository(metadata)


@pytest.fixture
def temp_dir(tmp_path):
    """Temporary directory for tests."""
    return tmp_path
