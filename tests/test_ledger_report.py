import io
from datetime import datetime
from decimal import Decimal

import pandas as pd

from rent_ledger.domain.charges import compute_charge
from rent_ledger.domain.models import BillingPeriod, Tenancy
from rent_ledger.domain.services import LedgerEngine
from rent_ledger.presentation.ledger_report import (
    overdue_to_rows,
    records_to_rows,
    render_csv,
    render_excel,
    render_html,
)


def make_tenancy() -> Tenancy:
    engine = LedgerEngine()
    tenancy = Tenancy(BillingPeriod(2081, 1), Decimal("12000"), Decimal("500"), room_id="101", tenant_name="Rohit <Thapa>")
    charge = compute_charge(Decimal("40"), Decimal("13"), Decimal("500"), Decimal("12000"))
    record = engine.post_payment(tenancy, BillingPeriod(2081, 1), charge, Decimal("10000"), datetime(2024, 4, 20, 9, 30))
    return tenancy.with_record(record)


def test_record_rows():
    rows = records_to_rows(make_tenancy().records)

    assert rows[0]["month"] == "2081-01"
    assert rows[0]["month_name"] == "Baisakh 2081"
    assert rows[0]["remaining_balance"] == "3020.00"
    assert rows[0]["status"] == "partial"
    assert rows[0]["recorded"] == "2024-04-20 09:30"


def test_overdue_rows_include_up_to_date_rooms():
    engine = LedgerEngine()
    views = engine.rank_overdue_first([make_tenancy()], BillingPeriod(2081, 2))
    rows = overdue_to_rows(views)
    assert [(r["month"], r["status"], r["remaining_amount"]) for r in rows] == [
        ("2081-01", "partial", "3020.00"),
        ("2081-02", "missing", ""),
    ]

    views = engine.rank_overdue_first([make_tenancy()], BillingPeriod(2081, 1))
    assert overdue_to_rows(views)[0]["status"] == "up_to_date"


def test_render_csv_and_html():
    rows = overdue_to_rows(LedgerEngine().rank_overdue_first([make_tenancy()], BillingPeriod(2081, 2)))

    csv_text = render_csv(rows).decode("utf-8")
    assert csv_text.splitlines()[0] == "room,tenant,month,month_name,status,remaining_amount"

    html_text = render_html(rows)
    assert "Rohit &lt;Thapa&gt;" in html_text
    assert render_html([]) == "<p>No payments recorded.</p>"
    assert render_csv([]) == b""


def test_render_excel_round_trips_through_pandas():
    rows = records_to_rows(make_tenancy().records)
    data = render_excel(rows, sheet_name="room_101")

    frame = pd.read_excel(io.BytesIO(data), sheet_name="room_101", dtype=str, engine="openpyxl")
    assert list(frame["month"]) == ["2081-01"]
