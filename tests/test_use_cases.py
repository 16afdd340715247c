from datetime import datetime
from decimal import Decimal

import pytest

from rent_ledger.application.dto import EndTenancyRequest, PaymentRequest, PricingRequest, TenancyRequest
from rent_ledger.application.use_cases import (
    EndTenancyUseCase,
    ImportPaymentsUseCase,
    LedgerContext,
    OverdueBoardUseCase,
    RecordPaymentUseCase,
    RegisterTenancyUseCase,
    StatementUseCase,
    UpdatePricingUseCase,
)
from rent_ledger.domain.charges import compute_charge
from rent_ledger.domain.errors import InconsistentHistory, InvalidInput, TenancyNotFound
from rent_ledger.domain.models import BillingPeriod, PaymentRecord, SettlementStatus
from rent_ledger.domain.results import OverdueStatus
from rent_ledger.infrastructure.parsing.workbook import read_payment_history


def register(context: LedgerContext, room_id: str, now: datetime, start: str = "2081-01") -> None:
    RegisterTenancyUseCase(context).execute(
        TenancyRequest(
            room_id=room_id,
            tenant_name=f"Tenant {room_id}",
            start_period=BillingPeriod.parse(start),
            monthly_rent=Decimal("12000"),
            monthly_water=Decimal("500"),
            received_at=now,
        )
    )


def pay(context: LedgerContext, room_id: str, period: str, units: str, paid: str, when: datetime):
    return RecordPaymentUseCase(context).execute(
        PaymentRequest(
            room_id=room_id,
            period=BillingPeriod.parse(period),
            electricity_units=Decimal(units),
            amount_paid=Decimal(paid),
            recorded_date=when,
        )
    )


def test_record_payment_prices_and_stores(context, now):
    register(context, "101", now)

    response = pay(context, "101", "2081-01", "40", "13020", now)

    assert response.record.charge.total_charge == Decimal("13020")
    assert response.record.status is SettlementStatus.COMPLETED
    assert not response.rent_already_billed
    assert len(context.tenancies.get_tenancy("101").records) == 1


def test_completing_partial_month_skips_rent(context, now):
    register(context, "101", now)
    first = pay(context, "101", "2081-02", "40", "10000", datetime(2025, 5, 1))
    assert first.record.status is SettlementStatus.PARTIAL

    second = pay(context, "101", "2081-02", "10", "630", datetime(2025, 5, 10))

    assert second.rent_already_billed
    assert second.record.charge.rent_cost == Decimal("0")
    assert second.record.charge.total_charge == Decimal("630")
    assert second.record.status is SettlementStatus.COMPLETED


def test_preview_does_not_store(context, now):
    register(context, "101", now)
    use_case = RecordPaymentUseCase(context)
    request = PaymentRequest(
        room_id="101",
        period=BillingPeriod(2081, 1),
        electricity_units=Decimal("40"),
        amount_paid=Decimal("0"),
        recorded_date=now,
    )

    record, _, _ = use_case.preview(request)

    assert record.status is SettlementStatus.PENDING
    assert context.tenancies.get_tenancy("101").records == ()


def test_activity_logged_for_writes(context, now):
    register(context, "101", now)
    pay(context, "101", "2081-01", "40", "13020", now)

    entries = context.activity.list_entries()
    assert [e.type for e in entries] == ["payment_created", "tenancy_created"]
    assert entries[0].entity_id == "101:2081-01"
    assert entries[0].meta["status"] == "completed"


def test_overdue_board_ranks_rooms(context, now):
    register(context, "101", now)
    register(context, "102", now)
    pay(context, "101", "2081-01", "40", "13020", now)
    pay(context, "101", "2081-02", "40", "10000", now)
    pay(context, "102", "2081-01", "40", "13020", now)
    pay(context, "102", "2081-02", "40", "13020", now)

    views = OverdueBoardUseCase(context).execute(BillingPeriod(2081, 2))

    assert [v.tenancy.room_id for v in views] == ["101", "102"]
    assert views[0].overdue[0].status is OverdueStatus.PARTIAL
    assert views[0].overdue[0].remaining_amount == Decimal("3020")
    assert not views[1].is_overdue


def test_statement_for_room(context, now):
    register(context, "101", now)
    pay(context, "101", "2081-01", "40", "10000", now)

    statement = StatementUseCase(context).execute("101")
    assert statement.outstanding_balance == Decimal("3020")
    assert not statement.is_settled


def test_unknown_room_raises(context, now):
    with pytest.raises(TenancyNotFound):
        pay(context, "404", "2081-01", "0", "0", now)


def test_import_rejects_unbalanced_history(context, now):
    register(context, "101", now)
    bad = PaymentRecord(
        period=BillingPeriod(2081, 1),
        charge=compute_charge(Decimal("40"), Decimal("13"), Decimal("500"), Decimal("12000")),
        previous_balance=Decimal("0"),
        amount_paid=Decimal("100"),
        remaining_balance=Decimal("0"),
        status=SettlementStatus.COMPLETED,
        recorded_date=now,
    )

    with pytest.raises(InconsistentHistory):
        ImportPaymentsUseCase(context).execute("101", [bad], now)
    assert context.tenancies.get_tenancy("101").records == ()


HISTORY_HEADER = (
    "Payment Month,Electricity Units,Electricity Cost,Water Cost,Rent Cost,Total Amount,"
    "Amount Paid,Previous Balance,Remaining Balance,Status,Payment Date AD\n"
)


def test_payment_after_importing_utc_stamped_history(context, now):
    register(context, "101", now)
    pay(context, "101", "2081-01", "40", "10000", datetime(2024, 4, 20))
    history = (
        HISTORY_HEADER + "2081-01,40,520,500,12000,13020,13020,0,0,completed,2024-04-25T10:00:00.000Z\n"
    ).encode("utf-8")
    ImportPaymentsUseCase(context).execute("101", read_payment_history(history, filename="history.csv"), now)

    response = pay(context, "101", "2081-02", "40", "13020", now)

    assert response.record.previous_balance == Decimal("0")
    assert response.record.status is SettlementStatus.COMPLETED
    assert all(r.recorded_date.tzinfo is None for r in context.tenancies.get_tenancy("101").records)


def test_imported_row_without_status_shows_as_partial(context, now):
    register(context, "101", now)
    history = (
        HISTORY_HEADER
        + "2081-01,40,520,500,12000,13020,13020,0,0,completed,2024-04-20\n"
        + "2081-02,40,520,500,12000,13020,10000,0,3020,,2024-05-20\n"
    ).encode("utf-8")
    ImportPaymentsUseCase(context).execute("101", read_payment_history(history, filename="history.csv"), now)

    tenancy = context.tenancies.get_tenancy("101")
    overdue = context.engine.overdue_periods(tenancy, BillingPeriod(2081, 2))

    assert [(e.period.key, e.status, e.remaining_amount) for e in overdue] == [
        ("2081-02", OverdueStatus.PARTIAL, Decimal("3020"))
    ]


def test_import_rejects_status_contradicting_amounts(context, now):
    register(context, "101", now)
    history = (HISTORY_HEADER + "2081-02,40,520,500,12000,13020,10000,0,3020,completed,2024-05-20\n").encode("utf-8")

    with pytest.raises(InconsistentHistory, match="marked completed"):
        ImportPaymentsUseCase(context).execute("101", read_payment_history(history, filename="history.csv"), now)
    assert context.tenancies.get_tenancy("101").records == ()


def test_ended_tenancy_leaves_board_and_logs_activity(context, now):
    register(context, "101", now)
    register(context, "102", now)

    ended = EndTenancyUseCase(context).execute(
        EndTenancyRequest(room_id="101", end_period=BillingPeriod(2081, 2), received_at=now)
    )

    assert ended.end_period == BillingPeriod(2081, 2)
    views = OverdueBoardUseCase(context).execute(BillingPeriod(2081, 4))
    assert [v.tenancy.room_id for v in views] == ["102"]
    entry = context.activity.list_entries(limit=1)[0]
    assert entry.type == "tenancy_ended"
    assert entry.meta["end_period"] == "2081-02"

    register(context, "101", now, start="2081-05")
    assert context.tenancies.get_tenancy("101").start_period == BillingPeriod(2081, 5)


def test_pricing_change_applies_to_new_payments(context, now):
    register(context, "101", now)
    pay(context, "101", "2081-01", "40", "13020", now)

    updated = UpdatePricingUseCase(context).execute(
        PricingRequest(room_id="101", received_at=now, monthly_rent=Decimal("14000"))
    )

    assert updated.monthly_rent == Decimal("14000")
    assert updated.monthly_water == Decimal("500")
    entry = context.activity.list_entries(limit=1)[0]
    assert entry.type == "tenancy_updated"
    assert entry.meta["previous_rent"] == "12000"
    assert entry.meta["monthly_rent"] == "14000"

    response = pay(context, "101", "2081-02", "40", "15020", now)
    assert response.record.charge.rent_cost == Decimal("14000")
    assert response.record.status is SettlementStatus.COMPLETED


def test_pricing_change_needs_a_value(context, now):
    register(context, "101", now)
    with pytest.raises(InvalidInput):
        UpdatePricingUseCase(context).execute(PricingRequest(room_id="101", received_at=now))
