"""Rent, utilities and balance tracking on Bikram Sambat billing months."""
from rent_ledger.application.use_cases import (
    LedgerContext,
    OverdueBoardUseCase,
    RecordPaymentUseCase,
    StatementUseCase,
)
from rent_ledger.domain.charges import compute_charge
from rent_ledger.domain.models import BillingPeriod, PaymentRecord, SettlementStatus, Tenancy
from rent_ledger.domain.services import LedgerEngine
from rent_ledger.infrastructure.storage.json_store import JsonTenancyRepository

__all__ = [
    "BillingPeriod",
    "JsonTenancyRepository",
    "LedgerContext",
    "LedgerEngine",
    "OverdueBoardUseCase",
    "PaymentRecord",
    "RecordPaymentUseCase",
    "SettlementStatus",
    "StatementUseCase",
    "Tenancy",
    "compute_charge",
]
