"""Unit tests for archive toggling and the recycle bin"""

import pytest
from datetime import datetime
from unittest.mock import AsyncMock, MagicMock

from src.app.use_cases.ledger.archive_receivable import ArchiveReceivable, UnarchiveReceivable
from src.app.use_cases.ledger.recycle_bin import (
    ListDeletedReceivables,
    PurgeReceivable,
    RestoreReceivable,
)

PAYMENT = {"id": "p1", "amount": "10.00", "method": "cash", "payment_date": "2024-02-01", "notes": None}


@pytest.fixture
def mock_receivable_repo():
    repo = MagicMock()
    repo.update = AsyncMock(side_effect=lambda r: r)
    repo.delete_permanently = AsyncMock(return_value=True)
    return repo


@pytest.mark.asyncio
class TestArchive:

    async def test_archive_sets_flag_and_timestamp(self, mock_uow, mock_receivable_repo, make_receivable):
        mock_receivable_repo.get_by_id = AsyncMock(return_value=make_receivable())

        result = await ArchiveReceivable(mock_uow, mock_receivable_repo).execute("rcv_1")

        assert result.value.archived is True
        assert result.value.archived_at is not None
        assert result.value.visibility == "manually_archived"
        mock_uow.commit.assert_called_once()

    async def test_unarchive_clears_flag(self, mock_uow, mock_receivable_repo, make_receivable):
        receivable = make_receivable(archived=True, archived_at=datetime(2024, 2, 1))
        mock_receivable_repo.get_by_id = AsyncMock(return_value=receivable)

        result = await UnarchiveReceivable(mock_uow, mock_receivable_repo).execute("rcv_1")

        assert result.value.archived is False
        assert result.value.archived_at is None

    async def test_archive_unknown_receivable(self, mock_uow, mock_receivable_repo):
        mock_receivable_repo.get_by_id = AsyncMock(return_value=None)

        result = await ArchiveReceivable(mock_uow, mock_receivable_repo).execute("missing")

        assert result.error.code == "RECEIVABLE_NOT_FOUND"


@pytest.mark.asyncio
class TestRecycleBin:

    async def test_list_deleted(self, mock_receivable_repo, make_receivable):
        mock_receivable_repo.list_deleted = AsyncMock(
            return_value=[make_receivable(deleted_at=datetime(2024, 2, 1))]
        )

        result = await ListDeletedReceivables(mock_receivable_repo).execute()

        assert len(result.value) == 1
        assert result.value[0].deleted_at == datetime(2024, 2, 1)

    async def test_restore(self, mock_uow, mock_receivable_repo, make_receivable):
        deleted = make_receivable(deleted_at=datetime(2024, 2, 1))
        mock_receivable_repo.get_by_id = AsyncMock(return_value=deleted)
        mock_receivable_repo.restore = AsyncMock(return_value=make_receivable())

        result = await RestoreReceivable(mock_uow, mock_receivable_repo).execute("rcv_1")

        assert result.value.deleted_at is None
        mock_receivable_repo.restore.assert_called_once_with("rcv_1")

    async def test_restore_live_receivable_is_not_found(self, mock_uow, mock_receivable_repo, make_receivable):
        mock_receivable_repo.get_by_id = AsyncMock(return_value=make_receivable())

        result = await RestoreReceivable(mock_uow, mock_receivable_repo).execute("rcv_1")

        assert result.error.code == "RECEIVABLE_NOT_FOUND"

    async def test_purge_with_payments_requires_refund(self, mock_uow, mock_receivable_repo, make_receivable):
        """
        Given: A live receivable with payments
        When: It is permanently deleted
        Then: PURGE_REQUIRES_REFUND and nothing is deleted
        """
        receivable = make_receivable(paid="10.00", payments=[PAYMENT])
        mock_receivable_repo.get_by_id = AsyncMock(return_value=receivable)

        result = await PurgeReceivable(mock_uow, mock_receivable_repo).execute("rcv_1")

        assert result.error.code == "PURGE_REQUIRES_REFUND"
        mock_receivable_repo.delete_permanently.assert_not_called()

    async def test_purge_refunded_receivable(self, mock_uow, mock_receivable_repo, make_receivable):
        receivable = make_receivable(paid="10.00", payments=[PAYMENT], deleted_at=datetime(2024, 2, 1))
        mock_receivable_repo.get_by_id = AsyncMock(return_value=receivable)

        result = await PurgeReceivable(mock_uow, mock_receivable_repo).execute("rcv_1")

        assert result.is_ok()
        mock_receivable_repo.delete_permanently.assert_called_once_with("rcv_1")
        mock_uow.commit.assert_called_once()

    async def test_purge_unpaid_receivable(self, mock_uow, mock_receivable_repo, make_receivable):
        mock_receivable_repo.get_by_id = AsyncMock(return_value=make_receivable())

        result = await PurgeReceivable(mock_uow, mock_receivable_repo).execute("rcv_1")

        assert result.is_ok()
