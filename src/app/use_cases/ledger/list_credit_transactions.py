"""
List Credit Transactions Use Case

Retrieves the store-credit history of a customer with pagination.
"""
from libs.result import Result, Return
from src.app.repositories.credit_transaction_repository import CreditTransactionRepository
from .dtos import CreditTransactionDTO, ListCreditTransactionsResponseDTO


class ListCreditTransactions:
    """
    Use case: View credit history

    Transactions are ordered by created_at DESC (most recent first).
    """

    def __init__(self, transaction_repo: CreditTransactionRepository):
        self.transaction_repo = transaction_repo

    async def execute(
        self, customer_id: str, limit: int = 20, offset: int = 0
    ) -> Result[ListCreditTransactionsResponseDTO]:
        transactions, total = await self.transaction_repo.get_by_customer_id(
            customer_id=customer_id,
            limit=limit,
            offset=offset,
        )

        transaction_dtos = [
            CreditTransactionDTO(
                id=txn.id,
                transaction_type=txn.transaction_type.value if hasattr(txn.transaction_type, "value") else txn.transaction_type,
                amount=txn.amount,
                description=txn.description,
                balance_after=txn.balance_after,
                reference_type=txn.reference_type,
                reference_id=txn.reference_id,
                created_at=txn.created_at,
            )
            for txn in transactions
        ]

        return Return.ok(
            ListCreditTransactionsResponseDTO(
                transactions=transaction_dtos,
                total=total,
                limit=limit,
                offset=offset,
            )
        )
