"""Recycle Bin Use Cases

Soft-deleted receivables can be listed, restored or purged for good.
"""

import logging
from typing import List
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.receivable_repository import ReceivableRepository
from .dtos import ReceivableResponseDTO, receivable_to_dto

logger = logging.getLogger(__name__)


class ListDeletedReceivables:

    def __init__(self, receivable_repo: ReceivableRepository):
        self.receivable_repo = receivable_repo

    async def execute(self) -> Result[List[ReceivableResponseDTO]]:
        receivables = await self.receivable_repo.list_deleted()
        return Return.ok([receivable_to_dto(r) for r in receivables])


class RestoreReceivable:
    """
    Use Case: Undo a soft delete

    Restoring does not reverse side effects of the refund that deleted it
    (store credit, catalog restock); those stay as recorded.
    """

    def __init__(self, uow: UnitOfWork, receivable_repo: ReceivableRepository):
        self.uow = uow
        self.receivable_repo = receivable_repo

    async def execute(self, receivable_id: str) -> Result[ReceivableResponseDTO]:
        try:
            receivable = await self.receivable_repo.get_by_id(
                receivable_id, include_deleted=True, for_update=True
            )
            if not receivable or not receivable.is_deleted:
                return Return.err(
                    Error(
                        code="RECEIVABLE_NOT_FOUND",
                        message=f"Deleted receivable {receivable_id} not found",
                    )
                )

            restored = await self.receivable_repo.restore(receivable_id)
            await self.uow.commit()

            logger.info(f"Receivable {receivable_id} restored")
            return Return.ok(receivable_to_dto(restored))

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Failed to restore receivable {receivable_id}: {e}")
            return Return.err(
                Error(
                    code="RESTORE_RECEIVABLE_FAILED",
                    message="Failed to restore receivable",
                    reason=str(e),
                )
            )


class PurgeReceivable:
    """
    Use Case: Permanently delete a receivable

    Business Rules:
    1. A receivable with payments can only be purged after it was soft
       deleted, which is what a refund does; otherwise the refund decision
       for money already paid would be lost
    2. Receivables without payments can be purged directly
    """

    def __init__(self, uow: UnitOfWork, receivable_repo: ReceivableRepository):
        self.uow = uow
        self.receivable_repo = receivable_repo

    async def execute(self, receivable_id: str) -> Result[None]:
        try:
            receivable = await self.receivable_repo.get_by_id(
                receivable_id, include_deleted=True, for_update=True
            )
            if not receivable:
                return Return.err(
                    Error(
                        code="RECEIVABLE_NOT_FOUND",
                        message=f"Receivable {receivable_id} not found",
                    )
                )

            if receivable.has_payments and not receivable.is_deleted:
                return Return.err(
                    Error(
                        code="PURGE_REQUIRES_REFUND",
                        message="Receivable has payments; refund it before deleting permanently",
                        reason=f"paid_amount={receivable.paid_amount}",
                    )
                )

            await self.receivable_repo.delete_permanently(receivable_id)
            await self.uow.commit()

            logger.info(f"Receivable {receivable_id} permanently deleted")
            return Return.ok(None)

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Failed to purge receivable {receivable_id}: {e}")
            return Return.err(
                Error(
                    code="PURGE_RECEIVABLE_FAILED",
                    message="Failed to delete receivable permanently",
                    reason=str(e),
                )
            )
