"""Domain models for the rent ledger.

Every value type is immutable and validated on construction so malformed data
is rejected at the boundary instead of deep inside the balance arithmetic.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from decimal import Decimal
from enum import Enum
from functools import total_ordering

from .errors import InvalidInput
from .money import non_negative, round2, to_decimal

BS_MONTH_NAMES = (
    "Baisakh",
    "Jestha",
    "Ashadh",
    "Shrawan",
    "Bhadra",
    "Ashwin",
    "Kartik",
    "Mangsir",
    "Poush",
    "Magh",
    "Falgun",
    "Chaitra",
)

BS_MONTH_NAMES_NEPALI = (
    "बैशाख",
    "जेष्ठ",
    "आषाढ",
    "श्रावण",
    "भाद्र",
    "आश्विन",
    "कार्तिक",
    "मंसिर",
    "पौष",
    "माघ",
    "फाल्गुन",
    "चैत्र",
)


@total_ordering
@dataclass(frozen=True)
class BillingPeriod:
    """One Bikram Sambat calendar month."""

    year: int
    month: int

    def __post_init__(self) -> None:
        for name in ("year", "month"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise InvalidInput(f"{name} must be an integer, got {value!r}")
        if self.year < 1:
            raise InvalidInput(f"year must be positive, got {self.year}")
        if not 1 <= self.month <= 12:
            raise InvalidInput(f"month must be within 1..12, got {self.month}")

    @classmethod
    def parse(cls, text: str) -> BillingPeriod:
        """Parse ``YYYY-MM`` (a trailing ``-DD`` is ignored)."""
        parts = str(text).strip().split("-")
        if len(parts) not in (2, 3):
            raise InvalidInput(f"Expected a YYYY-MM period, got {text!r}")
        try:
            year, month = int(parts[0]), int(parts[1])
        except ValueError as exc:
            raise InvalidInput(f"Expected a YYYY-MM period, got {text!r}") from exc
        return cls(year=year, month=month)

    @property
    def key(self) -> str:
        return f"{self.year}-{self.month:02d}"

    @property
    def name(self) -> str:
        return BS_MONTH_NAMES[self.month - 1]

    @property
    def name_nepali(self) -> str:
        return BS_MONTH_NAMES_NEPALI[self.month - 1]

    @property
    def label(self) -> str:
        return f"{self.name} {self.year}"

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, BillingPeriod):
            return NotImplemented
        return (self.year, self.month) < (other.year, other.month)

    def __str__(self) -> str:
        return self.key


@dataclass(frozen=True)
class ChargeBreakdown:
    """Charges billed for one period, excluding any carried balance."""

    electricity_units: Decimal
    electricity_cost: Decimal
    water_cost: Decimal
    rent_cost: Decimal
    total_charge: Decimal

    def __post_init__(self) -> None:
        for name in ("electricity_units", "electricity_cost", "water_cost", "rent_cost", "total_charge"):
            object.__setattr__(self, name, non_negative(getattr(self, name), name))
        expected = round2(self.electricity_cost + self.water_cost + self.rent_cost)
        if round2(self.total_charge) != expected:
            raise InvalidInput(
                f"total_charge {self.total_charge} does not match components (expected {expected})"
            )


class SettlementStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    PARTIAL = "partial"
    OVERPAID = "overpaid"
    # Administrative states; never produced by the engine.
    FAILED = "failed"
    REFUNDED = "refunded"


class PaymentMethod(str, Enum):
    CASH = "cash"
    ONLINE = "online"


@dataclass(frozen=True)
class PaymentRecord:
    """One ledger entry for a tenancy and billing period.

    The balance invariant is not checked here; ``LedgerEngine`` verifies
    stored history when it reads it.
    """

    period: BillingPeriod
    charge: ChargeBreakdown
    previous_balance: Decimal
    amount_paid: Decimal
    remaining_balance: Decimal
    status: SettlementStatus
    recorded_date: datetime
    method: PaymentMethod = PaymentMethod.CASH
    notes: str | None = None
    recorded_date_bs: str | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.period, BillingPeriod):
            raise InvalidInput(f"period must be a BillingPeriod, got {self.period!r}")
        if not isinstance(self.charge, ChargeBreakdown):
            raise InvalidInput(f"charge must be a ChargeBreakdown, got {self.charge!r}")
        if not isinstance(self.recorded_date, datetime):
            raise InvalidInput(f"recorded_date must be a datetime, got {self.recorded_date!r}")
        if self.recorded_date.tzinfo is not None:
            # Ledger stamps are naive local time.
            object.__setattr__(self, "recorded_date", self.recorded_date.astimezone().replace(tzinfo=None))
        object.__setattr__(self, "previous_balance", to_decimal(self.previous_balance, "previous_balance"))
        object.__setattr__(self, "amount_paid", non_negative(self.amount_paid, "amount_paid"))
        object.__setattr__(self, "remaining_balance", to_decimal(self.remaining_balance, "remaining_balance"))
        object.__setattr__(self, "status", SettlementStatus(self.status))
        object.__setattr__(self, "method", PaymentMethod(self.method))

    @property
    def total_due(self) -> Decimal:
        return round2(self.charge.total_charge + self.previous_balance)

    def expected_remaining(self) -> Decimal:
        return round2(self.total_due - self.amount_paid)


@dataclass(frozen=True)
class Tenancy:
    """A tenant's occupation of a room and its payment history."""

    start_period: BillingPeriod
    monthly_rent: Decimal
    monthly_water: Decimal
    records: tuple[PaymentRecord, ...] = field(default_factory=tuple)
    room_id: str = ""
    tenant_name: str = ""
    end_period: BillingPeriod | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.start_period, BillingPeriod):
            raise InvalidInput(f"start_period must be a BillingPeriod, got {self.start_period!r}")
        if self.end_period is not None and self.end_period < self.start_period:
            raise InvalidInput(f"end_period {self.end_period} precedes start_period {self.start_period}")
        object.__setattr__(self, "monthly_rent", non_negative(self.monthly_rent, "monthly_rent"))
        object.__setattr__(self, "monthly_water", non_negative(self.monthly_water, "monthly_water"))
        object.__setattr__(self, "records", tuple(self.records))

    def with_record(self, record: PaymentRecord) -> Tenancy:
        return replace(self, records=self.records + (record,))

    def is_active(self, as_of: BillingPeriod) -> bool:
        """Whether the tenant still occupies the room in ``as_of``."""
        return self.end_period is None or as_of <= self.end_period

    def records_for(self, period: BillingPeriod) -> tuple[PaymentRecord, ...]:
        return tuple(record for record in self.records if record.period == period)
