"""Application-level DTOs for the rent ledger workflows."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from rent_ledger.domain.models import BillingPeriod, PaymentMethod, PaymentRecord, Tenancy


@dataclass(slots=True, frozen=True)
class TenancyRequest:
    room_id: str
    tenant_name: str
    start_period: BillingPeriod
    monthly_rent: Decimal
    monthly_water: Decimal
    received_at: datetime


@dataclass(slots=True, frozen=True)
class PaymentRequest:
    room_id: str
    period: BillingPeriod
    electricity_units: Decimal
    amount_paid: Decimal
    recorded_date: datetime
    method: PaymentMethod = PaymentMethod.CASH
    notes: str | None = None
    recorded_date_bs: str | None = None


@dataclass(slots=True, frozen=True)
class PaymentResponse:
    record: PaymentRecord
    tenancy: Tenancy
    rent_already_billed: bool


@dataclass(slots=True, frozen=True)
class EndTenancyRequest:
    room_id: str
    end_period: BillingPeriod
    received_at: datetime


@dataclass(slots=True, frozen=True)
class PricingRequest:
    """New monthly prices; ``None`` keeps the current value."""

    room_id: str
    received_at: datetime
    monthly_rent: Decimal | None = None
    monthly_water: Decimal | None = None
