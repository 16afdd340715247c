"""Payment history import from CSV or Excel exports."""
from __future__ import annotations

from io import BytesIO
from pathlib import Path
from typing import Sequence

import pandas as pd

from rent_ledger.domain.errors import InvalidInput
from rent_ledger.domain.models import PaymentRecord
from rent_ledger.infrastructure.parsing.utils import ensure_bytes
from rent_ledger.infrastructure.storage.serialization import record_from_dict

REQUIRED_COLUMNS = (
    "payment_month",
    "electricity_units",
    "electricity_cost",
    "water_cost",
    "rent_cost",
    "total_amount",
    "amount_paid",
    "payment_date_ad",
)


def read_payment_frame(source: BytesIO | Path | bytes, filename: str | None = None) -> pd.DataFrame:
    name = filename or (source.name if isinstance(source, Path) else "")
    data = BytesIO(ensure_bytes(source))
    if name.lower().endswith(".csv"):
        df = pd.read_csv(data, dtype=str, keep_default_na=False)
    else:
        df = pd.read_excel(data, engine="openpyxl", dtype=str, keep_default_na=False)
    df.columns = [str(column).strip().lower().replace(" ", "_") for column in df.columns]
    return df


def payment_frame_to_records(df: pd.DataFrame) -> Sequence[PaymentRecord]:
    missing = [column for column in REQUIRED_COLUMNS if column not in df.columns]
    if missing:
        raise InvalidInput(f"Payment sheet is missing columns: {', '.join(missing)}")

    records: list[PaymentRecord] = []
    for row_number, row in enumerate(df.to_dict(orient="records"), start=2):
        if not str(row.get("payment_month", "")).strip():
            continue
        try:
            records.append(record_from_dict(row))
        except (InvalidInput, ValueError) as exc:
            raise InvalidInput(f"Row {row_number}: {exc}") from exc
    return records


def read_payment_history(source: BytesIO | Path | bytes, filename: str | None = None) -> Sequence[PaymentRecord]:
    return payment_frame_to_records(read_payment_frame(source, filename))
