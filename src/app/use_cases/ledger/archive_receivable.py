"""Archive / Unarchive Use Cases

Manual archive toggle. Independent of the computed archive eligibility and
allowed whatever the settlement status.
"""

import logging
from datetime import datetime
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.receivable_repository import ReceivableRepository
from .dtos import ReceivableResponseDTO, receivable_to_dto

logger = logging.getLogger(__name__)


class SetReceivableArchived:
    """
    Use Case: Set or clear the manual archive flag

    archived_at is stamped when archiving and cleared when unarchiving.
    """

    def __init__(self, uow: UnitOfWork, receivable_repo: ReceivableRepository):
        self.uow = uow
        self.receivable_repo = receivable_repo

    async def execute(self, receivable_id: str, archived: bool) -> Result[ReceivableResponseDTO]:
        try:
            receivable = await self.receivable_repo.get_by_id(receivable_id, for_update=True)
            if not receivable:
                return Return.err(
                    Error(
                        code="RECEIVABLE_NOT_FOUND",
                        message=f"Receivable {receivable_id} not found",
                    )
                )

            now = datetime.utcnow()
            receivable.archived = archived
            receivable.archived_at = now if archived else None
            receivable.updated_at = now

            updated = await self.receivable_repo.update(receivable)
            await self.uow.commit()

            logger.info(f"Receivable {receivable_id} {'archived' if archived else 'unarchived'}")
            return Return.ok(receivable_to_dto(updated))

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Failed to change archive flag of receivable {receivable_id}: {e}")
            return Return.err(
                Error(
                    code="ARCHIVE_RECEIVABLE_FAILED",
                    message="Failed to change archive flag",
                    reason=str(e),
                )
            )


class ArchiveReceivable(SetReceivableArchived):
    async def execute(self, receivable_id: str) -> Result[ReceivableResponseDTO]:
        return await super().execute(receivable_id, archived=True)


class UnarchiveReceivable(SetReceivableArchived):
    async def execute(self, receivable_id: str) -> Result[ReceivableResponseDTO]:
        return await super().execute(receivable_id, archived=False)
