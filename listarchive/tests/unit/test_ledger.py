"""Tests for the processed-URL ledger.

Run with: uv run pytest listarchive/tests/unit/test_ledger.py -v
"""

import pytest

from listarchive.errors import TransportError, ValidationError
from listarchive.ledger import DedupLedger

URL = "https://mail.mozilla.org/pipermail/es-discuss/2014-March/036394.html"


@pytest.fixture
def ledger(metadata):
    return DedupLedger(metadata)


@pytest.mark.asyncio
@pytest.mark.unit
class TestDedupLedger:
    """Tests for is_processed / mark_processed."""

    async def test_unmarked_url_is_not_processed(self, ledger):
        assert await ledger.is_processed(URL) is False

    async def test_marked_url_is_processed(self, ledger):
        await ledger.mark_processed(URL)

        assert await ledger.is_processed(URL) is True

    async def test_marking_twice_is_a_no_op(self, ledger, fake_db):
        await ledger.mark_processed(URL)
        await ledger.mark_processed(URL)

        assert await ledger.is_processed(URL) is True
        assert list(fake_db.tables["processed"].values()) == [
            {"_id": URL, "id": f"processed:{URL}"}
        ]

    async def test_other_urls_unaffected(self, ledger):
        await ledger.mark_processed(URL)

        assert await ledger.is_processed(URL + "?page=2") is False

    @pytest.mark.parametrize("url", ["ftp://example.com/a", "example.com", ""])
    async def test_non_http_url_rejected(self, ledger, fake_db, url):
        with pytest.raises(ValidationError):
            await ledger.is_processed(url)
        with pytest.raises(ValidationError):
            await ledger.mark_processed(url)

        assert fake_db.query_log == []

    async def test_lookup_failure_reads_as_not_processed(self, ledger, fake_db):
        await ledger.mark_processed(URL)
        fake_db.set_next_error(TransportError("store unreachable"))

        assert await ledger.is_processed(URL) is False

    async def test_lookup_is_by_record_id(self, ledger, fake_db):
        await ledger.is_processed(URL)

        assert fake_db.query_log[-1] == (
            "SELECT * FROM type::thing($table, $id);",
            {"table": "processed", "id": URL},
        )
        assert fake_db.queries("SELECT count()") == []

    async def test_malformed_row_reads_as_not_processed(self, ledger, fake_db):
        fake_db.set_next_response(["not a record"])

        assert await ledger.is_processed(URL) is False

    async def test_mark_failure_propagates(self, ledger, fake_db):
        fake_db.set_next_error(TransportError("store unreachable"))

        with pytest.raises(TransportError):
            await ledger.mark_processed(URL)
