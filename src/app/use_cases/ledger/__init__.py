"""Receivables ledger use cases"""
from .create_receivable import CreateReceivable
from .add_payment import AddPayment
from .allocate_payment import AllocatePayment
from .update_receivable import UpdateReceivable
from .refund_receivable import RefundReceivable
from .archive_receivable import ArchiveReceivable, UnarchiveReceivable
from .recycle_bin import ListDeletedReceivables, RestoreReceivable, PurgeReceivable
from .list_receivables import (
    GetReceivable,
    ListReceivables,
    ListOverdueReceivables,
    GetReceivablesSummary,
)
from .add_credit import AddCredit
from .remove_credit import RemoveCredit
from .get_credit_balance import GetCreditBalance
from .list_credit_transactions import ListCreditTransactions
from .reconcile_ledger import ReconcileLedger
from .dtos import (
    UnappliedPaymentPolicy,
    CreateReceivableCommandDTO,
    AddPaymentCommandDTO,
    AllocatePaymentCommandDTO,
    UpdateReceivableCommandDTO,
    RefundReceivableCommandDTO,
    PaymentDTO,
    ReceivableResponseDTO,
    ReceivableListResponseDTO,
    ReceivablesSummaryDTO,
    AllocationDTO,
    AllocationFailureDTO,
    AllocatePaymentResponseDTO,
    RefundStepStatus,
    RefundStepDTO,
    RefundResponseDTO,
    AddCreditCommandDTO,
    RemoveCreditCommandDTO,
    CreditTransactionResponseDTO,
    CreditBalanceResponseDTO,
    CreditTransactionDTO,
    ListCreditTransactionsResponseDTO,
    ReceivableDiscrepancyDTO,
    CreditDiscrepancyDTO,
    ReconciliationResultDTO,
)

__all__ = [
    "CreateReceivable",
    "AddPayment",
    "AllocatePayment",
    "UpdateReceivable",
    "RefundReceivable",
    "ArchiveReceivable",
    "UnarchiveReceivable",
    "ListDeletedReceivables",
    "RestoreReceivable",
    "PurgeReceivable",
    "GetReceivable",
    "ListReceivables",
    "ListOverdueReceivables",
    "GetReceivablesSummary",
    "AddCredit",
    "RemoveCredit",
    "GetCreditBalance",
    "ListCreditTransactions",
    "ReconcileLedger",
    "UnappliedPaymentPolicy",
    "CreateReceivableCommandDTO",
    "AddPaymentCommandDTO",
    "AllocatePaymentCommandDTO",
    "UpdateReceivableCommandDTO",
    "RefundReceivableCommandDTO",
    "PaymentDTO",
    "ReceivableResponseDTO",
    "ReceivableListResponseDTO",
    "ReceivablesSummaryDTO",
    "AllocationDTO",
    "AllocationFailureDTO",
    "AllocatePaymentResponseDTO",
    "RefundStepStatus",
    "RefundStepDTO",
    "RefundResponseDTO",
    "AddCreditCommandDTO",
    "RemoveCreditCommandDTO",
    "CreditTransactionResponseDTO",
    "CreditBalanceResponseDTO",
    "CreditTransactionDTO",
    "ListCreditTransactionsResponseDTO",
    "ReceivableDiscrepancyDTO",
    "CreditDiscrepancyDTO",
    "ReconciliationResultDTO",
]
