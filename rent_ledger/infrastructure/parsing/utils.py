"""Shared parsing utilities for stored and imported ledger data."""
from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from io import BytesIO
from pathlib import Path

import pandas as pd

from rent_ledger.domain.errors import InvalidInput
from rent_ledger.domain.models import BillingPeriod


def ensure_bytes(source: BytesIO | Path | bytes) -> bytes:
    if isinstance(source, bytes):
        return source
    if isinstance(source, BytesIO):
        return source.getvalue()
    if isinstance(source, Path):
        return source.read_bytes()
    raise TypeError(f"Unsupported source type: {type(source)!r}")


def parse_decimal(value: object, field_name: str = "amount") -> Decimal:
    """Parse a spreadsheet or JSON cell into a Decimal.

    Blank and NaN cells read as zero; thousands separators and the रु / Rs
    currency prefixes are stripped. Anything else that is not a number raises
    ``InvalidInput``.
    """
    if value is None:
        return Decimal("0")
    s = str(value).strip()
    if not s or s.upper() == "NAN":
        return Decimal("0")
    negative = False
    if s.startswith("(") and s.endswith(")"):
        negative = True
        s = s[1:-1]
    for token in [",", "रु", "Rs.", "Rs", " "]:
        s = s.replace(token, "")
    try:
        result = Decimal(s)
    except InvalidOperation as exc:
        raise InvalidInput(f"{field_name} is not a number: {value!r}") from exc
    if negative:
        result = -result
    return result


def parse_period(value: object) -> BillingPeriod:
    if isinstance(value, BillingPeriod):
        return value
    return BillingPeriod.parse(str(value))


def parse_datetime(value: object) -> datetime:
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    text = str(value).strip() if value is not None else ""
    if not text:
        raise InvalidInput("recorded date is missing")
    parsed = pd.to_datetime(text, errors="coerce")
    if pd.isna(parsed):
        raise InvalidInput(f"Unrecognised date: {value!r}")
    return parsed.to_pydatetime()


def optional_text(value: object) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    if not text or text.upper() == "NAN":
        return None
    return text
