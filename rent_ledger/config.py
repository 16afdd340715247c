"""Central configuration for the rent ledger package."""
from __future__ import annotations

import os
from dataclasses import dataclass
from decimal import Decimal
from pathlib import Path

from rent_ledger.domain.models import BillingPeriod

# Electricity price per unit, in rupees.
UNIT_RATE = Decimal("13")
TOLERANCE = Decimal("0.01")

BASE_DIR = Path(__file__).resolve().parent.parent
DATA_DIR = Path(os.getenv("RENT_LEDGER_DATA_DIR", BASE_DIR / "data"))


@dataclass(slots=True, frozen=True)
class Settings:
    unit_rate: Decimal
    tolerance: Decimal
    data_dir: Path
    ledger_path: Path
    activity_path: Path
    current_period: BillingPeriod | None


def _current_period_from_env() -> BillingPeriod | None:
    raw = os.getenv("RENT_LEDGER_CURRENT_PERIOD", "").strip()
    return BillingPeriod.parse(raw) if raw else None


def load_settings(data_dir: Path | None = None) -> Settings:
    root = Path(data_dir) if data_dir is not None else DATA_DIR
    return Settings(
        unit_rate=Decimal(os.getenv("RENT_LEDGER_UNIT_RATE", str(UNIT_RATE))),
        tolerance=TOLERANCE,
        data_dir=root,
        ledger_path=root / "ledger.json",
        activity_path=root / "activity.jsonl",
        current_period=_current_period_from_env(),
    )


SETTINGS = load_settings()
