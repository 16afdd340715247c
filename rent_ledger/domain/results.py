"""Computed views returned by the ledger engine."""
from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Sequence

from .models import BillingPeriod, PaymentRecord, SettlementStatus, Tenancy


class OverdueStatus(str, Enum):
    MISSING = "missing"
    PARTIAL = "partial"


@dataclass(frozen=True)
class OverdueEntry:
    """A billing period that is unpaid or only partly paid."""

    period: BillingPeriod
    status: OverdueStatus
    remaining_amount: Decimal | None = None


@dataclass(frozen=True)
class RoomOverdueView:
    tenancy: Tenancy
    overdue: Sequence[OverdueEntry] = field(default_factory=tuple)

    @property
    def is_overdue(self) -> bool:
        return bool(self.overdue)


@dataclass(frozen=True)
class TenancyStatement:
    """Totals over a tenancy's ledger, with records in period order."""

    room_id: str
    tenant_name: str
    total_charged: Decimal
    total_paid: Decimal
    outstanding_balance: Decimal
    latest_status: SettlementStatus | None
    records: Sequence[PaymentRecord] = field(default_factory=tuple)

    @property
    def is_settled(self) -> bool:
        return self.outstanding_balance <= 0
