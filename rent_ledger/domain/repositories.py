"""Repository interfaces anchoring the domain layer."""
from __future__ import annotations

from decimal import Decimal
from typing import Protocol, Sequence

from .activity.entities import ActivityEntry
from .models import BillingPeriod, PaymentRecord, Tenancy


class TenancyRepository(Protocol):
    """Supplies tenancies with their payment history and accepts new records.

    Records are append-only: nothing here updates or deletes history. Only
    the tenancy itself (its end month and pricing) can change.
    """

    def list_tenancies(self) -> Sequence[Tenancy]:
        ...

    def get_tenancy(self, room_id: str) -> Tenancy:
        ...

    def add_tenancy(self, tenancy: Tenancy) -> None:
        ...

    def end_tenancy(self, room_id: str, end_period: BillingPeriod) -> Tenancy:
        ...

    def update_pricing(self, room_id: str, monthly_rent: Decimal, monthly_water: Decimal) -> Tenancy:
        ...

    def append_record(self, room_id: str, record: PaymentRecord) -> Tenancy:
        ...


class ActivityRepository(Protocol):
    """Stores the activity log."""

    def append(self, entry: ActivityEntry) -> None:
        ...

    def list_entries(self, limit: int | None = None) -> Sequence[ActivityEntry]:
        ...
