"""Application services orchestrating the rent ledger workflows."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Sequence

from rent_ledger.application.dto import (
    EndTenancyRequest,
    PaymentRequest,
    PaymentResponse,
    PricingRequest,
    TenancyRequest,
)
from rent_ledger.domain.activity.entities import (
    ActivityEntry,
    payment_created,
    tenancy_created,
    tenancy_ended,
    tenancy_updated,
)
from rent_ledger.domain.charges import compute_charge
from rent_ledger.domain.errors import InvalidInput
from rent_ledger.domain.models import BillingPeriod, PaymentRecord, Tenancy
from rent_ledger.domain.money import non_negative
from rent_ledger.domain.repositories import ActivityRepository, TenancyRepository
from rent_ledger.domain.results import RoomOverdueView, TenancyStatement
from rent_ledger.domain.services import LedgerEngine

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class LedgerContext:
    tenancies: TenancyRepository
    activity: ActivityRepository
    engine: LedgerEngine
    unit_rate: Decimal


class RegisterTenancyUseCase:
    def __init__(self, context: LedgerContext) -> None:
        self._context = context

    def execute(self, request: TenancyRequest) -> Tenancy:
        tenancy = Tenancy(
            start_period=request.start_period,
            monthly_rent=request.monthly_rent,
            monthly_water=request.monthly_water,
            room_id=request.room_id,
            tenant_name=request.tenant_name,
        )
        self._context.tenancies.add_tenancy(tenancy)
        self._context.activity.append(
            tenancy_created(
                tenancy.room_id,
                f"{tenancy.tenant_name} moved into room {tenancy.room_id} from {tenancy.start_period.label}",
                request.received_at,
                start_period=tenancy.start_period.key,
            )
        )
        logger.info("Registered tenancy for room %s starting %s", tenancy.room_id, tenancy.start_period.key)
        return tenancy


class EndTenancyUseCase:
    """Marks the last month a tenant occupies the room, freeing it for a new tenancy."""

    def __init__(self, context: LedgerContext) -> None:
        self._context = context

    def execute(self, request: EndTenancyRequest) -> Tenancy:
        tenancy = self._context.tenancies.end_tenancy(request.room_id, request.end_period)
        self._context.activity.append(
            tenancy_ended(
                tenancy.room_id,
                f"{tenancy.tenant_name} left room {tenancy.room_id} after {request.end_period.label}",
                request.received_at,
                end_period=request.end_period.key,
            )
        )
        logger.info("Ended tenancy for room %s in %s", tenancy.room_id, request.end_period.key)
        return tenancy


class UpdatePricingUseCase:
    def __init__(self, context: LedgerContext) -> None:
        self._context = context

    def execute(self, request: PricingRequest) -> Tenancy:
        if request.monthly_rent is None and request.monthly_water is None:
            raise InvalidInput("Give a new rent, a new water price or both")
        current = self._context.tenancies.get_tenancy(request.room_id)
        rent = current.monthly_rent if request.monthly_rent is None else non_negative(request.monthly_rent, "monthly_rent")
        water = (
            current.monthly_water if request.monthly_water is None else non_negative(request.monthly_water, "monthly_water")
        )
        updated = self._context.tenancies.update_pricing(request.room_id, rent, water)
        self._context.activity.append(
            tenancy_updated(
                updated.room_id,
                f"Room {updated.room_id} pricing changed to rent {rent}, water {water}",
                request.received_at,
                previous_rent=str(current.monthly_rent),
                previous_water=str(current.monthly_water),
                monthly_rent=str(rent),
                monthly_water=str(water),
            )
        )
        logger.info("Updated pricing for room %s", updated.room_id)
        return updated


class RecordPaymentUseCase:
    """Prices a month, carries the balance forward and appends the entry."""

    def __init__(self, context: LedgerContext) -> None:
        self._context = context

    def preview(self, request: PaymentRequest) -> tuple[PaymentRecord, Tenancy, bool]:
        """Compute the record ``execute`` would store, without storing it."""
        tenancy = self._context.tenancies.get_tenancy(request.room_id)
        engine = self._context.engine
        rent_already_billed = engine.has_partial_record(tenancy, request.period)
        charge = compute_charge(
            request.electricity_units,
            self._context.unit_rate,
            tenancy.monthly_water,
            tenancy.monthly_rent,
            rent_already_billed,
        )
        record = engine.post_payment(
            tenancy,
            request.period,
            charge,
            request.amount_paid,
            request.recorded_date,
            method=request.method,
            notes=request.notes,
            recorded_date_bs=request.recorded_date_bs,
        )
        return record, tenancy, rent_already_billed

    def execute(self, request: PaymentRequest) -> PaymentResponse:
        record, tenancy, rent_already_billed = self.preview(request)
        updated = self._context.tenancies.append_record(request.room_id, record)
        self._context.activity.append(
            payment_created(
                request.room_id,
                record.period.key,
                f"Payment of {record.amount_paid} for {record.period.label} from {tenancy.tenant_name or 'tenant'}"
                f" in room {request.room_id} ({record.status.value})",
                request.recorded_date,
                amount_paid=str(record.amount_paid),
                remaining_balance=str(record.remaining_balance),
                status=record.status.value,
            )
        )
        logger.info(
            "Recorded %s payment for room %s: paid=%s remaining=%s",
            record.status.value,
            request.room_id,
            record.amount_paid,
            record.remaining_balance,
        )
        return PaymentResponse(record=record, tenancy=updated, rent_already_billed=rent_already_billed)


class ImportPaymentsUseCase:
    """Appends externally recorded history after checking each entry balances."""

    def __init__(self, context: LedgerContext) -> None:
        self._context = context

    def execute(self, room_id: str, records: Sequence[PaymentRecord], received_at: datetime) -> Tenancy:
        tenancy = self._context.tenancies.get_tenancy(room_id)
        for record in records:
            self._context.engine.verify_record(record)
        for record in records:
            tenancy = self._context.tenancies.append_record(room_id, record)
        self._context.activity.append(
            ActivityEntry(
                type="payments_imported",
                entity="payment",
                entity_id=room_id,
                message=f"Imported {len(records)} payment(s) for room {room_id}",
                created_at=received_at,
                meta={"count": len(records)},
            )
        )
        logger.info("Imported %d payment(s) for room %s", len(records), room_id)
        return tenancy


class OverdueBoardUseCase:
    def __init__(self, context: LedgerContext) -> None:
        self._context = context

    def execute(self, as_of: BillingPeriod) -> list[RoomOverdueView]:
        tenancies = [t for t in self._context.tenancies.list_tenancies() if t.is_active(as_of)]
        return self._context.engine.rank_overdue_first(tenancies, as_of)


class StatementUseCase:
    def __init__(self, context: LedgerContext) -> None:
        self._context = context

    def execute(self, room_id: str) -> TenancyStatement:
        tenancy = self._context.tenancies.get_tenancy(room_id)
        return self._context.engine.statement(tenancy)
