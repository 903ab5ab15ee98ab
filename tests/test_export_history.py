"""Tests for the export history service."""

import pytest

from chaintrack.domain.errors import NotFoundError, ValidationError
from chaintrack.domain.export_history import ExportHistoryService


@pytest.fixture
def history_service(temp_db):
    return ExportHistoryService(temp_db)


def test_record_and_get(history_service):
    record = history_service.record_export("celo", "0xabc", 3, "0x01", file_path="/tmp/x.csv")

    assert record.id is not None
    assert history_service.get_export(record.id) == record
    assert record.created_at.tzinfo is not None


def test_get_missing_export(history_service):
    with pytest.raises(NotFoundError, match="Export 999 not found"):
        history_service.get_export(999)


def test_record_rejects_bad_input(history_service):
    with pytest.raises(ValidationError):
        history_service.record_export("celo", "0xabc", -1, "0x01")
    with pytest.raises(ValidationError):
        history_service.record_export("celo", "0xabc", 1, "")


def test_list_newest_first_and_filtered(history_service):
    first = history_service.record_export("celo", "0xabc", 1, "0x01")
    second = history_service.record_export("kaspa", "kaspa:qabc", 2, "0x02")
    third = history_service.record_export("celo", "0xdef", 3, "0x03")

    assert [r.id for r in history_service.list_exports()] == [third.id, second.id, first.id]
    assert [r.id for r in history_service.list_exports(blockchain="celo")] == [third.id, first.id]
    assert [r.id for r in history_service.list_exports(wallet_address="0xabc")] == [first.id]


def test_summarize(history_service):
    history_service.record_export("celo", "0xabc", 1, "0x01")
    history_service.record_export("kaspa", "kaspa:qabc", 2, "0x02")
    history_service.record_export("celo", "0xabc", 4, "0x03")

    assert history_service.summarize() == {
        "exports": 3,
        "transactions": 7,
        "by_chain": {"celo": 2, "kaspa": 1},
    }
    assert history_service.summarize(blockchain="kaspa")["transactions"] == 2


def test_summarize_empty(history_service):
    assert history_service.summarize() == {"exports": 0, "transactions": 0, "by_chain": {}}
