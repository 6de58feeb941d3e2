"""AddPayment Use Case

Applies one payment to one receivable and recomputes its state.
"""

import logging
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.receivable_repository import ReceivableRepository
from src.domain.payment import ReceivablePayment
from src.domain.receivable_state import record_payment, to_money
from .dtos import AddPaymentCommandDTO, ReceivableResponseDTO, receivable_to_dto

logger = logging.getLogger(__name__)


class AddPayment:
    """
    Use Case: Record a payment against a receivable

    Business Rules:
    1. Receivable must exist and not be deleted
    2. amount > 0
    3. amount <= remaining_amount at the time of application
    4. Payment appended, paid/remaining/status recomputed, single commit

    Each execution is one independent commit; the payment allocator calls
    it once per allocation.
    """

    def __init__(self, uow: UnitOfWork, receivable_repo: ReceivableRepository):
        self.uow = uow
        self.receivable_repo = receivable_repo

    async def execute(self, command: AddPaymentCommandDTO) -> Result[ReceivableResponseDTO]:
        """
        Execute payment application

        Args:
            command: AddPaymentCommandDTO with receivable_id, amount, method, payment_date

        Returns:
            Result[ReceivableResponseDTO]: Updated receivable or error
        """
        try:
            receivable = await self.receivable_repo.get_by_id(command.receivable_id, for_update=True)
            if not receivable:
                return Return.err(
                    Error(
                        code="RECEIVABLE_NOT_FOUND",
                        message=f"Receivable {command.receivable_id} not found",
                    )
                )

            amount = to_money(command.amount)
            if amount <= 0:
                return Return.err(
                    Error(
                        code="INVALID_AMOUNT",
                        message="Payment amount must be greater than zero",
                        reason=f"amount={command.amount}",
                    )
                )

            if amount > receivable.remaining_amount:
                return Return.err(
                    Error(
                        code="PAYMENT_EXCEEDS_BALANCE",
                        message=(
                            f"Payment of {amount} exceeds the remaining balance "
                            f"of {receivable.remaining_amount}"
                        ),
                        reason=f"amount={amount}, remaining={receivable.remaining_amount}",
                    )
                )

            payment = ReceivablePayment(
                amount=amount,
                method=command.method,
                payment_date=command.payment_date,
                notes=command.notes,
            )
            record_payment(receivable, payment)

            updated = await self.receivable_repo.update(receivable)
            await self.uow.commit()

            logger.info(
                f"Payment {payment.id} of {amount} ({payment.method.value}) recorded on receivable "
                f"{updated.id}: remaining={updated.remaining_amount}, status={updated.status.value}"
            )

            return Return.ok(receivable_to_dto(updated))

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Failed to add payment to receivable {command.receivable_id}: {e}")
            return Return.err(
                Error(
                    code="ADD_PAYMENT_FAILED",
                    message="Failed to add payment",
                    reason=str(e),
                )
            )
