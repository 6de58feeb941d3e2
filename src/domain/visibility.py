"""Archive Policy

Decides whether a receivable shows in the active view. Computed on every
read; nothing moves records between views in the background.
"""

from datetime import datetime, timedelta
from enum import Enum
from typing import Optional
from src.domain.receivable import Receivable, ReceivableStatus


class VisibilityState(str, Enum):
    ACTIVE = "active"
    MANUALLY_ARCHIVED = "manually_archived"
    AUTO_ARCHIVED = "auto_archived"


class ReceivableView(str, Enum):
    """Views offered to callers when listing receivables"""
    ACTIVE = "active"
    ARCHIVED = "archived"
    ALL = "all"


def warranty_expires_at(created_at: datetime, warranty_period_days: int) -> datetime:
    return created_at + timedelta(days=warranty_period_days)


def warranty_expired(created_at: datetime, warranty_period_days: int, now: Optional[datetime] = None) -> bool:
    if not warranty_period_days:
        return True
    now = now or datetime.utcnow()
    return now > warranty_expires_at(created_at, warranty_period_days)


def is_archivable(receivable: Receivable, now: Optional[datetime] = None) -> bool:
    return receivable.status == ReceivableStatus.PAID and warranty_expired(
        receivable.created_at, receivable.warranty_period_days, now
    )


def derive_visibility(receivable: Receivable, now: Optional[datetime] = None) -> VisibilityState:
    if receivable.archived:
        return VisibilityState.MANUALLY_ARCHIVED
    if is_archivable(receivable, now):
        return VisibilityState.AUTO_ARCHIVED
    return VisibilityState.ACTIVE


def in_view(receivable: Receivable, view: ReceivableView, now: Optional[datetime] = None) -> bool:
    if view == ReceivableView.ALL:
        return True
    visible = derive_visibility(receivable, now) == VisibilityState.ACTIVE
    return visible if view == ReceivableView.ACTIVE else not visible
