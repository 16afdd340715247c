from datetime import datetime
from decimal import Decimal
from pathlib import Path

import pytest

from rent_ledger.application.use_cases import LedgerContext
from rent_ledger.domain.services import LedgerEngine
from rent_ledger.infrastructure.storage.activity_store import JsonLinesActivityRepository
from rent_ledger.infrastructure.storage.json_store import JsonTenancyRepository


@pytest.fixture
def context(tmp_path: Path) -> LedgerContext:
    return LedgerContext(
        tenancies=JsonTenancyRepository(tmp_path / "ledger.json"),
        activity=JsonLinesActivityRepository(tmp_path / "activity.jsonl"),
        engine=LedgerEngine(),
        unit_rate=Decimal("13"),
    )


@pytest.fixture
def now() -> datetime:
    return datetime(2025, 9, 30, 10, 15)
