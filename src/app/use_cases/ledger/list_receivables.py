"""List Receivables Use Cases

Read-side queries. Archive visibility is recomputed on every call from the
current clock; nothing is cached between calls.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Callable, List, Optional
from libs.result import Result, Return, Error
from src.app.repositories.receivable_repository import ReceivableRepository
from src.domain.receivable import ReceivableStatus
from src.domain.visibility import ReceivableView, in_view
from .dtos import (
    ReceivableListResponseDTO,
    ReceivableResponseDTO,
    ReceivablesSummaryDTO,
    receivable_to_dto,
)

Clock = Callable[[], datetime]


class GetReceivable:

    def __init__(self, receivable_repo: ReceivableRepository, clock: Clock = datetime.utcnow):
        self.receivable_repo = receivable_repo
        self.clock = clock

    async def execute(self, receivable_id: str) -> Result[ReceivableResponseDTO]:
        receivable = await self.receivable_repo.get_by_id(receivable_id)
        if not receivable:
            return Return.err(
                Error(
                    code="RECEIVABLE_NOT_FOUND",
                    message=f"Receivable {receivable_id} not found",
                )
            )
        return Return.ok(receivable_to_dto(receivable, self.clock()))


class ListReceivables:
    """
    Use Case: List receivables in the active, archived or all view

    Active view: not manually archived and not auto-archivable
    (paid with expired warranty). Archived view: everything else.
    """

    def __init__(self, receivable_repo: ReceivableRepository, clock: Clock = datetime.utcnow):
        self.receivable_repo = receivable_repo
        self.clock = clock

    async def execute(
        self,
        view: ReceivableView = ReceivableView.ACTIVE,
        customer_id: Optional[str] = None,
        status: Optional[ReceivableStatus] = None,
    ) -> Result[ReceivableListResponseDTO]:
        view = ReceivableView(view)
        now = self.clock()
        receivables = await self.receivable_repo.list(customer_id=customer_id)

        items = [
            r for r in receivables
            if in_view(r, view, now) and (status is None or r.status == status)
        ]

        return Return.ok(
            ReceivableListResponseDTO(
                view=view.value,
                customer_id=customer_id,
                items=[receivable_to_dto(r, now) for r in items],
                count=len(items),
                total_remaining=sum((r.remaining_amount for r in items), Decimal("0")),
            )
        )


class ListOverdueReceivables:
    """Unpaid receivables whose due date has passed"""

    def __init__(self, receivable_repo: ReceivableRepository, clock: Clock = datetime.utcnow):
        self.receivable_repo = receivable_repo
        self.clock = clock

    async def execute(self, customer_id: Optional[str] = None) -> Result[List[ReceivableResponseDTO]]:
        now = self.clock()
        receivables = await self.receivable_repo.list_overdue(now.date(), customer_id=customer_id)
        return Return.ok([receivable_to_dto(r, now) for r in receivables])


class GetReceivablesSummary:
    """
    Use Case: Outstanding totals

    total_receivable is the sum of remaining amounts over live receivables,
    archived ones included, since archiving never forgives a debt.
    """

    def __init__(self, receivable_repo: ReceivableRepository, clock: Clock = datetime.utcnow):
        self.receivable_repo = receivable_repo
        self.clock = clock

    async def execute(self, customer_id: Optional[str] = None) -> Result[ReceivablesSummaryDTO]:
        today: date = self.clock().date()
        receivables = await self.receivable_repo.list(customer_id=customer_id)

        counts = {status: 0 for status in ReceivableStatus}
        for r in receivables:
            counts[ReceivableStatus(r.status)] += 1

        overdue = [
            r for r in receivables
            if r.status != ReceivableStatus.PAID and r.due_date is not None and r.due_date < today
        ]

        return Return.ok(
            ReceivablesSummaryDTO(
                customer_id=customer_id,
                total_receivable=sum((r.remaining_amount for r in receivables), Decimal("0")),
                pending_count=counts[ReceivableStatus.PENDING],
                partial_count=counts[ReceivableStatus.PARTIAL],
                paid_count=counts[ReceivableStatus.PAID],
                overdue_count=len(overdue),
                overdue_amount=sum((r.remaining_amount for r in overdue), Decimal("0")),
            )
        )
