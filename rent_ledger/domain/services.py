"""Domain services implementing the rent ledger rules."""
from __future__ import annotations

import logging
from datetime import datetime
from decimal import Decimal
from typing import Iterable, Sequence

from .calendar import iter_periods, next_period
from .errors import InconsistentHistory, InvalidInput
from .models import (
    BillingPeriod,
    ChargeBreakdown,
    PaymentMethod,
    PaymentRecord,
    SettlementStatus,
    Tenancy,
)
from .money import ZERO, non_negative, round2, to_decimal
from .results import OverdueEntry, OverdueStatus, RoomOverdueView, TenancyStatement

logger = logging.getLogger(__name__)

DEFAULT_TOLERANCE = Decimal("0.01")
SETTLED_STATUSES = frozenset({SettlementStatus.COMPLETED, SettlementStatus.OVERPAID})
CLASSIFIED_STATUSES = frozenset(
    {
        SettlementStatus.PENDING,
        SettlementStatus.COMPLETED,
        SettlementStatus.PARTIAL,
        SettlementStatus.OVERPAID,
    }
)


def classify_settlement(
    total_due: Decimal, amount_paid: Decimal, tolerance: Decimal = DEFAULT_TOLERANCE
) -> SettlementStatus:
    paid = non_negative(amount_paid, "amount_paid")
    if paid == ZERO:
        return SettlementStatus.PENDING
    remaining = round2(to_decimal(total_due, "total_due") - paid)
    if remaining > tolerance:
        return SettlementStatus.PARTIAL
    if remaining < -tolerance:
        return SettlementStatus.OVERPAID
    return SettlementStatus.COMPLETED


class LedgerEngine:
    """Carries balances forward, classifies payments and finds overdue months.

    The engine is pure: it reads the tenancy handed to it, never mutates it and
    never looks at a clock. The reference period for overdue checks is always
    passed in by the caller.
    """

    def __init__(self, tolerance: Decimal | None = None) -> None:
        if tolerance is None:
            tolerance = DEFAULT_TOLERANCE
        self._tolerance = non_negative(tolerance, "tolerance")

    @property
    def tolerance(self) -> Decimal:
        return self._tolerance

    def classify(self, total_due: Decimal, amount_paid: Decimal) -> SettlementStatus:
        return classify_settlement(total_due, amount_paid, self._tolerance)

    def post_payment(
        self,
        tenancy: Tenancy,
        period: BillingPeriod,
        charge: ChargeBreakdown,
        amount_paid: Decimal,
        recorded_date: datetime,
        *,
        method: PaymentMethod = PaymentMethod.CASH,
        notes: str | None = None,
        recorded_date_bs: str | None = None,
    ) -> PaymentRecord:
        """Build the next ledger entry for ``period``.

        The previous balance comes from the most recently recorded entry whose
        period strictly precedes ``period``. The tenancy is left untouched;
        appending the returned record is the caller's job.
        """
        if not isinstance(period, BillingPeriod):
            raise InvalidInput(f"period must be a BillingPeriod, got {period!r}")
        paid = non_negative(amount_paid, "amount_paid")

        previous = self.previous_record(tenancy, period)
        previous_balance = previous.remaining_balance if previous is not None else ZERO
        total_due = round2(charge.total_charge + previous_balance)
        remaining = round2(total_due - paid)
        status = self.classify(total_due, paid)
        logger.debug(
            "Posting %s for room %s: due=%s paid=%s remaining=%s status=%s",
            period.key,
            tenancy.room_id,
            total_due,
            paid,
            remaining,
            status.value,
        )
        return PaymentRecord(
            period=period,
            charge=charge,
            previous_balance=previous_balance,
            amount_paid=paid,
            remaining_balance=remaining,
            status=status,
            recorded_date=recorded_date,
            method=method,
            notes=notes,
            recorded_date_bs=recorded_date_bs,
        )

    def previous_record(self, tenancy: Tenancy, period: BillingPeriod) -> PaymentRecord | None:
        candidates = [(index, record) for index, record in enumerate(tenancy.records) if record.period < period]
        record = self._most_recent(candidates)
        if record is not None:
            self.verify_record(record)
        return record

    def verify_record(self, record: PaymentRecord) -> None:
        expected = record.expected_remaining()
        if abs(record.remaining_balance - expected) > self._tolerance:
            raise InconsistentHistory(
                f"Record for {record.period.key} has remaining balance {record.remaining_balance}, "
                f"expected {expected} from charge {record.charge.total_charge}, "
                f"previous balance {record.previous_balance} and payment {record.amount_paid}",
                period_key=record.period.key,
            )
        if record.status in CLASSIFIED_STATUSES:
            expected_status = self.classify(record.total_due, record.amount_paid)
            if record.status is not expected_status:
                raise InconsistentHistory(
                    f"Record for {record.period.key} is marked {record.status.value} but a payment of "
                    f"{record.amount_paid} against {record.total_due} due is {expected_status.value}",
                    period_key=record.period.key,
                )

    def latest_record(self, tenancy: Tenancy, period: BillingPeriod) -> PaymentRecord | None:
        candidates = [(index, record) for index, record in enumerate(tenancy.records) if record.period == period]
        return self._most_recent(candidates)

    def has_partial_record(self, tenancy: Tenancy, period: BillingPeriod) -> bool:
        """Whether rent for ``period`` was already billed by a partial entry."""
        return any(record.status is SettlementStatus.PARTIAL for record in tenancy.records_for(period))

    def overdue_periods(self, tenancy: Tenancy, as_of: BillingPeriod) -> tuple[OverdueEntry, ...]:
        start = tenancy.start_period
        if as_of == start or as_of < start:
            return tuple()
        if tenancy.end_period is not None and tenancy.end_period < as_of:
            # Months after the tenant left are never owed.
            as_of = tenancy.end_period
            if as_of == start:
                return tuple()

        # Only the reference year is examined.
        if start.year == as_of.year:
            first = start
        else:
            first = BillingPeriod(as_of.year, 1)

        overdue: list[OverdueEntry] = []
        for period in iter_periods(first, as_of):
            record = self.latest_record(tenancy, period)
            if record is None:
                overdue.append(OverdueEntry(period=period, status=OverdueStatus.MISSING))
            elif record.status is SettlementStatus.PARTIAL:
                overdue.append(
                    OverdueEntry(
                        period=period,
                        status=OverdueStatus.PARTIAL,
                        remaining_amount=record.remaining_balance,
                    )
                )
        return tuple(overdue)

    def is_overdue(self, tenancy: Tenancy, as_of: BillingPeriod) -> bool:
        return len(self.overdue_periods(tenancy, as_of)) > 0

    def rank_overdue_first(self, tenancies: Iterable[Tenancy], as_of: BillingPeriod) -> list[RoomOverdueView]:
        views = [RoomOverdueView(tenancy=t, overdue=self.overdue_periods(t, as_of)) for t in tenancies]
        return sorted(views, key=lambda view: (not view.is_overdue, _room_sort_key(view.tenancy.room_id)))

    def suggest_next_period(self, tenancy: Tenancy) -> BillingPeriod:
        """Month after the latest settled one, or the start month when none is settled."""
        settled = [record.period for record in tenancy.records if record.status in SETTLED_STATUSES]
        if not settled:
            return tenancy.start_period
        return next_period(max(settled))

    def statement(self, tenancy: Tenancy) -> TenancyStatement:
        indexed = list(enumerate(tenancy.records))
        ordered = sorted(indexed, key=lambda item: (item[1].period, item[1].recorded_date, item[0]))
        records = tuple(record for _, record in ordered)
        total_charged = sum((record.charge.total_charge for record in records), ZERO)
        total_paid = sum((record.amount_paid for record in records), ZERO)
        latest = records[-1] if records else None
        if latest is not None:
            self.verify_record(latest)
        return TenancyStatement(
            room_id=tenancy.room_id,
            tenant_name=tenancy.tenant_name,
            total_charged=round2(total_charged),
            total_paid=round2(total_paid),
            outstanding_balance=latest.remaining_balance if latest is not None else ZERO,
            latest_status=latest.status if latest is not None else None,
            records=records,
        )

    @staticmethod
    def _most_recent(candidates: Sequence[tuple[int, PaymentRecord]]) -> PaymentRecord | None:
        if not candidates:
            return None
        _, record = max(candidates, key=lambda item: (item[1].recorded_date, item[0]))
        return record


def _room_sort_key(room_id: str) -> tuple[int, int, str]:
    if room_id.isdigit():
        return (0, int(room_id), room_id)
    return (1, 0, room_id)
