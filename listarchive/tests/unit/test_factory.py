"""Tests for repository construction and scoped lifecycle.

Run with: uv run pytest listarchive/tests/unit/test_factory.py -v
"""

from unittest.mock import AsyncMock, patch

import pytest

from listarchive.config import ArchiveConfig
from listarchive.errors import ValidationError
from listarchive.factory import create_repository, open_repository
from listarchive.surrealdb.config import SurrealDBConfig
from listarchive.tests.fakes import FakeDatabaseExecutor, FakeMinIOClient


def _config(bucket=None, init_schema=True) -> ArchiveConfig:
    return ArchiveConfig(
        surrealdb=SurrealDBConfig(
            url="ws://db:8000", user="root", password="root", namespace="ns", database="db"
        ),
        bucket_credentials=bucket,
        init_schema=init_schema,
    )


@pytest.fixture
def wiring():
    """Patch the client constructors used by the factory."""
    executor = FakeDatabaseExecutor()
    minio_client = FakeMinIOClient()
    with patch(
        "listarchive.factory.connect_executor", AsyncMock(return_value=executor)
    ) as connect, patch(
        "listarchive.factory.create_minio_client", return_value=minio_client
    ) as create_minio:
        yield executor, minio_client, connect, create_minio


@pytest.mark.asyncio
@pytest.mark.unit
class TestCreateRepository:
    """Tests for create_repository."""

    async def test_with_bucket_stores_bodies(self, wiring):
        executor, minio_client, connect, create_minio = wiring

        repo = await create_repository(_config(bucket="k/s/bodies"))

        assert repo.stores_bodies is True
        assert repo.blobs.client is minio_client
        assert repo.metadata.db is executor
        assert create_minio.call_args[0][0].bucket == "bodies"

    async def test_without_bucket_is_metadata_only(self, wiring):
        _, _, _, create_minio = wiring

        repo = await create_repository(_config())

        assert repo.stores_bodies is False
        create_minio.assert_not_called()

    async def test_initialises_schema(self, wiring):
        executor = wiring[0]

        await create_repository(_config())

        assert executor.queries("DEFINE TABLE")

    async def test_schema_setup_can_be_skipped(self, wiring):
        executor = wiring[0]

        await create_repository(_config(init_schema=False))

        assert executor.query_log == []

    async def test_bad_credentials_fail_before_connecting(self, wiring):
        connect = wiring[2]

        with pytest.raises(ValidationError):
            await create_repository(_config(bucket="not-a-credential"))

        connect.assert_not_called()

    async def test_connection_closed_when_blob_setup_fails(self, wiring):
        executor, _, _, create_minio = wiring
        create_minio.side_effect = OSError("minio down")

        with pytest.raises(OSError):
            await create_repository(_config(bucket="k/s/b"))

        assert executor.closed is True


@pytest.mark.asyncio
@pytest.mark.unit
class TestOpenRepository:
    """Tests for the open_repository context manager."""

    async def test_round_trip_and_close(self, wiring):
        executor = wiring[0]

        async with open_repository(_config(bucket="k/s/b")) as repo:
            await repo.add_message(
                {"_id": "m1", "subjectToken": "t1", "date": 1, "body": "hello"}
            )
            messages = await repo.get_messages("t1")

        assert messages[0]["body"] == "hello"
        assert executor.closed is True

    async def test_closes_on_error(self, wiring):
        executor = wiring[0]

        with pytest.raises(RuntimeError):
            async with open_repository(_config()):
                raise RuntimeError("boom")

        assert executor.closed is True
