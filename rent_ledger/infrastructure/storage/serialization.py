"""Conversion between domain objects and JSON-compatible dicts."""
from __future__ import annotations

from typing import Any

from rent_ledger.domain.models import (
    ChargeBreakdown,
    PaymentMethod,
    PaymentRecord,
    SettlementStatus,
    Tenancy,
)
from rent_ledger.domain.money import round2
from rent_ledger.domain.services import classify_settlement
from rent_ledger.infrastructure.parsing.utils import (
    optional_text,
    parse_datetime,
    parse_decimal,
    parse_period,
)


def record_to_dict(record: PaymentRecord) -> dict[str, Any]:
    charge = record.charge
    return {
        "payment_month": record.period.key,
        "payment_month_name": record.period.label,
        "payment_month_name_nepali": record.period.name_nepali,
        "electricity_units": str(charge.electricity_units),
        "electricity_cost": str(charge.electricity_cost),
        "water_cost": str(charge.water_cost),
        "rent_cost": str(charge.rent_cost),
        "total_amount": str(charge.total_charge),
        "previous_balance": str(record.previous_balance),
        "amount_paid": str(record.amount_paid),
        "remaining_balance": str(record.remaining_balance),
        "status": record.status.value,
        "payment_method": record.method.value,
        "payment_date_ad": record.recorded_date.isoformat(),
        "payment_date_bs": record.recorded_date_bs,
        "notes": record.notes,
    }


def record_from_dict(raw: dict[str, Any]) -> PaymentRecord:
    """Rebuild a record; a blank remaining balance or status is derived from the other fields."""
    charge = ChargeBreakdown(
        electricity_units=parse_decimal(raw.get("electricity_units"), "electricity_units"),
        electricity_cost=parse_decimal(raw.get("electricity_cost"), "electricity_cost"),
        water_cost=parse_decimal(raw.get("water_cost"), "water_cost"),
        rent_cost=parse_decimal(raw.get("rent_cost"), "rent_cost"),
        total_charge=parse_decimal(raw.get("total_amount"), "total_amount"),
    )
    previous_balance = parse_decimal(raw.get("previous_balance"), "previous_balance")
    amount_paid = parse_decimal(raw.get("amount_paid"), "amount_paid")
    if optional_text(raw.get("remaining_balance")) is None:
        remaining = round2(charge.total_charge + previous_balance - amount_paid)
    else:
        remaining = parse_decimal(raw.get("remaining_balance"), "remaining_balance")
    status_text = optional_text(raw.get("status"))
    if status_text is None:
        status = classify_settlement(round2(charge.total_charge + previous_balance), amount_paid)
    else:
        status = SettlementStatus(status_text.lower())
    return PaymentRecord(
        period=parse_period(raw["payment_month"]),
        charge=charge,
        previous_balance=previous_balance,
        amount_paid=amount_paid,
        remaining_balance=remaining,
        status=status,
        recorded_date=parse_datetime(raw.get("payment_date_ad")),
        method=PaymentMethod(str(raw.get("payment_method") or "cash").strip().lower()),
        notes=optional_text(raw.get("notes")),
        recorded_date_bs=optional_text(raw.get("payment_date_bs")),
    )


def tenancy_to_dict(tenancy: Tenancy) -> dict[str, Any]:
    return {
        "room_id": tenancy.room_id,
        "tenant_name": tenancy.tenant_name,
        "start_period": tenancy.start_period.key,
        "monthly_rent": str(tenancy.monthly_rent),
        "monthly_water": str(tenancy.monthly_water),
        "end_period": tenancy.end_period.key if tenancy.end_period is not None else None,
        "payments": [record_to_dict(record) for record in tenancy.records],
    }


def tenancy_from_dict(raw: dict[str, Any]) -> Tenancy:
    return Tenancy(
        start_period=parse_period(raw["start_period"]),
        monthly_rent=parse_decimal(raw.get("monthly_rent"), "monthly_rent"),
        monthly_water=parse_decimal(raw.get("monthly_water"), "monthly_water"),
        records=tuple(record_from_dict(item) for item in raw.get("payments", [])),
        room_id=str(raw.get("room_id", "")),
        tenant_name=str(raw.get("tenant_name", "")),
        end_period=parse_period(raw["end_period"]) if raw.get("end_period") else None,
    )
