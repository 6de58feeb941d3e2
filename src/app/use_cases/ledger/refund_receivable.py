"""RefundReceivable Use Case

Reverses a sale. Runs as a sequence of independently committed steps:
store credit (optional), catalog restock (optional), soft delete. Every
step is reported so a caller can retry or compensate.
"""

import logging
from decimal import Decimal
from typing import List
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.catalog_service import CatalogService
from src.app.repositories.customer_repository import CustomerRepository
from src.app.repositories.credit_transaction_repository import CreditTransactionRepository
from src.app.repositories.receivable_repository import ReceivableRepository
from .add_credit import AddCredit
from .dtos import (
    AddCreditCommandDTO,
    RefundReceivableCommandDTO,
    RefundResponseDTO,
    RefundStepDTO,
    RefundStepStatus,
)

logger = logging.getLogger(__name__)

CREDIT_STEP = "credit"
RESTOCK_STEP = "restock"
SOFT_DELETE_STEP = "soft_delete"


def refund_idempotency_key(receivable_id: str) -> str:
    return f"refund:{receivable_id}"


class RefundReceivable:
    """
    Use Case: Refund a receivable

    Business Rules:
    1. Receivable must exist and not be deleted
    2. paid_amount > 0 and keep_as_credit: paid_amount becomes store credit
       ("refund: <product_name>"), keyed so a retried refund credits once
    3. Linked catalog item (product_id set, catalog_sale_linked): cancel the
       sale so the item is restocked; failure is logged, never blocking
    4. Soft delete the receivable (payment history kept)

    A credit failure stops the refund before anything else changes.
    A soft delete failure after a committed credit is reported with the
    credit transaction id so the caller can retry the refund safely.
    """

    def __init__(
        self,
        uow: UnitOfWork,
        receivable_repo: ReceivableRepository,
        customer_repo: CustomerRepository,
        transaction_repo: CreditTransactionRepository,
        catalog_service: CatalogService,
    ):
        self.uow = uow
        self.receivable_repo = receivable_repo
        self.catalog_service = catalog_service
        self.add_credit = AddCredit(uow, customer_repo, transaction_repo)

    async def execute(self, command: RefundReceivableCommandDTO) -> Result[RefundResponseDTO]:
        try:
            receivable = await self.receivable_repo.get_by_id(command.receivable_id, for_update=True)
        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Failed to load receivable {command.receivable_id} for refund: {e}")
            return Return.err(
                Error(
                    code="REFUND_FAILED",
                    message="Failed to refund receivable",
                    reason=str(e),
                )
            )

        if not receivable:
            return Return.err(
                Error(
                    code="RECEIVABLE_NOT_FOUND",
                    message=f"Receivable {command.receivable_id} not found",
                )
            )

        receivable_id = receivable.id
        customer_id = receivable.customer_id
        product_id = receivable.product_id
        paid_amount = receivable.paid_amount
        restock = bool(product_id and receivable.catalog_sale_linked)
        steps: List[RefundStepDTO] = []
        credited_amount = Decimal("0")
        credit_transaction_id = None

        # Step 1: store credit
        if paid_amount > 0 and command.keep_as_credit:
            credit_result = await self.add_credit.execute(
                AddCreditCommandDTO(
                    customer_id=customer_id,
                    amount=paid_amount,
                    description=f"refund: {receivable.product_name}"[:255],
                    reference_type="receivable_refund",
                    reference_id=receivable_id,
                    idempotency_key=refund_idempotency_key(receivable_id),
                )
            )
            if credit_result.is_err():
                logger.error(
                    f"Refund of receivable {receivable_id} aborted: credit step failed "
                    f"({credit_result.error.code}: {credit_result.error.message})"
                )
                return Return.err(
                    Error(
                        code=credit_result.error.code,
                        message=f"Refund aborted, store credit was not added: {credit_result.error.message}",
                        reason=credit_result.error.reason,
                    )
                )
            credit_transaction_id = credit_result.value.transaction_id
            if credit_result.value.replayed:
                # Credited by an earlier attempt of this refund
                steps.append(
                    RefundStepDTO(
                        name=CREDIT_STEP,
                        status=RefundStepStatus.SKIPPED,
                        detail=f"already credited by transaction {credit_transaction_id}",
                    )
                )
            else:
                credited_amount = credit_result.value.amount
                steps.append(
                    RefundStepDTO(
                        name=CREDIT_STEP,
                        status=RefundStepStatus.SUCCEEDED,
                        detail=f"transaction {credit_transaction_id}",
                    )
                )
        else:
            steps.append(RefundStepDTO(name=CREDIT_STEP, status=RefundStepStatus.SKIPPED))

        # Step 2: catalog restock
        if restock:
            restocked = await self.catalog_service.cancel_sale(product_id)
            if restocked:
                steps.append(RefundStepDTO(name=RESTOCK_STEP, status=RefundStepStatus.SUCCEEDED))
            else:
                logger.warning(
                    f"Catalog restock failed for product {product_id} (receivable {receivable_id}); "
                    f"continuing with refund"
                )
                steps.append(
                    RefundStepDTO(
                        name=RESTOCK_STEP,
                        status=RefundStepStatus.FAILED,
                        detail=f"cancel_sale failed for product {product_id}",
                    )
                )
        else:
            steps.append(RefundStepDTO(name=RESTOCK_STEP, status=RefundStepStatus.SKIPPED))

        # Step 3: soft delete
        try:
            await self.receivable_repo.soft_delete(receivable_id)
            await self.uow.commit()
        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Soft delete failed while refunding receivable {receivable_id}: {e}")
            completed = ", ".join(
                step.name for step in steps if step.status == RefundStepStatus.SUCCEEDED
            ) or "none"
            return Return.err(
                Error(
                    code="REFUND_FAILED",
                    message="Failed to delete the refunded receivable",
                    reason=f"{e}; committed steps: {completed}",
                )
            )
        steps.append(RefundStepDTO(name=SOFT_DELETE_STEP, status=RefundStepStatus.SUCCEEDED))

        logger.info(
            f"Receivable {receivable_id} refunded: paid={paid_amount}, credited={credited_amount}, "
            f"steps={[f'{s.name}:{s.status.value}' for s in steps]}"
        )

        return Return.ok(
            RefundResponseDTO(
                receivable_id=receivable_id,
                customer_id=customer_id,
                paid_amount=paid_amount,
                credited_amount=credited_amount,
                credit_transaction_id=credit_transaction_id,
                steps=steps,
            )
        )
