"""RemoveCredit Use Case

Uses or withdraws store credit. The balance never goes below zero.
"""

import logging
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.customer_repository import CustomerRepository
from src.app.repositories.credit_transaction_repository import CreditTransactionRepository
from src.domain.credit_transaction import CreditTransaction, TransactionType
from src.domain.receivable_state import to_money
from .add_credit import to_credit_response_dto
from .dtos import RemoveCreditCommandDTO, CreditTransactionResponseDTO

logger = logging.getLogger(__name__)


class RemoveCredit:
    """
    Use Case: Remove store credit from a customer

    Business Rules:
    1. amount > 0
    2. Sufficient balance: amount <= balance, otherwise nothing changes
    3. Balance and transaction written in one commit
    4. Pessimistic locking: SELECT FOR UPDATE on the customer row
    """

    def __init__(
        self,
        uow: UnitOfWork,
        customer_repo: CustomerRepository,
        transaction_repo: CreditTransactionRepository,
    ):
        self.uow = uow
        self.customer_repo = customer_repo
        self.transaction_repo = transaction_repo

    async def execute(self, command: RemoveCreditCommandDTO) -> Result[CreditTransactionResponseDTO]:
        try:
            amount = to_money(command.amount)
            if amount <= 0:
                return Return.err(
                    Error(
                        code="INVALID_AMOUNT",
                        message="Credit amount must be greater than zero",
                        reason=f"amount={command.amount}",
                    )
                )

            customer = await self.customer_repo.get_by_id(command.customer_id, for_update=True)
            if not customer:
                return Return.err(
                    Error(
                        code="CUSTOMER_NOT_FOUND",
                        message=f"Customer {command.customer_id} not found",
                    )
                )

            balance_before = to_money(customer.credit_balance)
            if amount > balance_before:
                return Return.err(
                    Error(
                        code="INSUFFICIENT_CREDIT",
                        message=f"Insufficient credit. Required: {amount}, Available: {balance_before}",
                        reason=f"balance={balance_before}, required={amount}",
                    )
                )

            balance_after = balance_before - amount

            transaction = CreditTransaction(
                customer_id=customer.id,
                transaction_type=TransactionType.REMOVE,
                amount=amount,
                description=command.description,
                balance_before=balance_before,
                balance_after=balance_after,
                reference_type=command.reference_type,
                reference_id=command.reference_id,
            )
            created_transaction = await self.transaction_repo.create(transaction)

            await self.customer_repo.update_credit_balance(customer.id, balance_after)
            await self.uow.commit()

            logger.info(
                f"Credit of {amount} removed for customer {customer.id}: "
                f"balance {balance_before} -> {balance_after}"
            )

            return Return.ok(to_credit_response_dto(created_transaction))

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Failed to remove credit for customer {command.customer_id}: {e}")
            return Return.err(
                Error(
                    code="REMOVE_CREDIT_FAILED",
                    message="Failed to remove credit",
                    reason=str(e),
                )
            )
