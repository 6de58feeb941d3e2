"""UpdateReceivable Use Case

Edits a receivable. Sale fields are locked once a payment exists; money
then only moves through payments or refunds.
"""

import logging
from datetime import datetime
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.receivable_repository import ReceivableRepository
from src.domain.receivable import ReceivableSource
from src.domain.receivable_state import derive_profit, refresh_balances, to_money
from .dtos import ReceivableResponseDTO, UpdateReceivableCommandDTO, receivable_to_dto

logger = logging.getLogger(__name__)

# Fields that cannot change once the receivable has payments
LOCKED_AFTER_PAYMENT = frozenset({"total_amount", "product_name", "cost_price", "sale_price"})


class UpdateReceivable:
    """
    Use Case: Partially update a receivable

    Business Rules:
    1. Receivable must exist and not be deleted
    2. total_amount, product_name, cost_price, sale_price are locked once
       payments is non-empty
    3. paid_amount is never edited directly
    4. status/remaining are recomputed only when total_amount changes
    5. profit is recomputed from cost_price and sale_price
    6. product_id is fixed for catalog sales and once the catalog sale is linked
    7. product_name, total_amount, due_date, warranty_period_days cannot be cleared
    """

    def __init__(self, uow: UnitOfWork, receivable_repo: ReceivableRepository):
        self.uow = uow
        self.receivable_repo = receivable_repo

    async def execute(self, command: UpdateReceivableCommandDTO) -> Result[ReceivableResponseDTO]:
        try:
            receivable = await self.receivable_repo.get_by_id(command.receivable_id, for_update=True)
            if not receivable:
                return Return.err(
                    Error(
                        code="RECEIVABLE_NOT_FOUND",
                        message=f"Receivable {command.receivable_id} not found",
                    )
                )

            changes = command.changes()
            if not changes:
                return Return.ok(receivable_to_dto(receivable))

            locked = sorted(LOCKED_AFTER_PAYMENT.intersection(changes))
            if locked and receivable.has_payments:
                return Return.err(
                    Error(
                        code="EDIT_LOCKED",
                        message="Receivable already has payments; use a payment or a refund instead",
                        reason=f"locked fields: {', '.join(locked)}",
                    )
                )

            if "product_id" in changes and changes["product_id"] != receivable.product_id and (
                receivable.source == ReceivableSource.CATALOG or receivable.catalog_sale_linked
            ):
                return Return.err(
                    Error(
                        code="EDIT_LOCKED",
                        message="The product of a catalog sale cannot be changed",
                        reason="locked fields: product_id",
                    )
                )

            for field in ("product_name", "total_amount", "due_date", "warranty_period_days"):
                if field in changes and changes[field] is None:
                    return Return.err(
                        Error(
                            code="VALIDATION_ERROR",
                            message=f"{field} cannot be cleared",
                        )
                    )

            for field, value in changes.items():
                setattr(receivable, field, value)

            if "cost_price" in changes or "sale_price" in changes:
                receivable.profit = derive_profit(receivable.cost_price, receivable.sale_price)

            if "total_amount" in changes:
                receivable.total_amount = to_money(receivable.total_amount)
                refresh_balances(receivable)

            receivable.updated_at = datetime.utcnow()
            updated = await self.receivable_repo.update(receivable)
            await self.uow.commit()

            logger.info(f"Receivable {updated.id} updated: {', '.join(sorted(changes))}")

            return Return.ok(receivable_to_dto(updated))

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Failed to update receivable {command.receivable_id}: {e}")
            return Return.err(
                Error(
                    code="UPDATE_RECEIVABLE_FAILED",
                    message="Failed to update receivable",
                    reason=str(e),
                )
            )
