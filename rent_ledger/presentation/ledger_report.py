"""Report generators for ledger statements and the overdue board."""
from __future__ import annotations

import csv
import html
import io
from typing import Sequence

import pandas as pd

from rent_ledger.domain.activity.entities import ActivityEntry
from rent_ledger.domain.models import PaymentRecord
from rent_ledger.domain.results import RoomOverdueView, TenancyStatement


def records_to_rows(records: Sequence[PaymentRecord]) -> list[dict[str, str]]:
    rows: list[dict[str, str]] = []
    for record in records:
        charge = record.charge
        rows.append(
            {
                "month": record.period.key,
                "month_name": record.period.label,
                "electricity_units": str(charge.electricity_units),
                "electricity_cost": str(charge.electricity_cost),
                "water_cost": str(charge.water_cost),
                "rent_cost": str(charge.rent_cost),
                "total_charge": str(charge.total_charge),
                "previous_balance": str(record.previous_balance),
                "amount_paid": str(record.amount_paid),
                "remaining_balance": str(record.remaining_balance),
                "status": record.status.value,
                "method": record.method.value,
                "recorded": record.recorded_date.isoformat(sep=" ", timespec="minutes"),
            }
        )
    return rows


def statement_to_rows(statement: TenancyStatement) -> list[dict[str, str]]:
    return records_to_rows(statement.records)


def overdue_to_rows(views: Sequence[RoomOverdueView]) -> list[dict[str, str]]:
    rows: list[dict[str, str]] = []
    for view in views:
        tenancy = view.tenancy
        if not view.overdue:
            rows.append(
                {
                    "room": tenancy.room_id,
                    "tenant": tenancy.tenant_name,
                    "month": "",
                    "month_name": "",
                    "status": "up_to_date",
                    "remaining_amount": "",
                }
            )
            continue
        for entry in view.overdue:
            rows.append(
                {
                    "room": tenancy.room_id,
                    "tenant": tenancy.tenant_name,
                    "month": entry.period.key,
                    "month_name": entry.period.label,
                    "status": entry.status.value,
                    "remaining_amount": "" if entry.remaining_amount is None else str(entry.remaining_amount),
                }
            )
    return rows


def activity_to_rows(entries: Sequence[ActivityEntry]) -> list[dict[str, str]]:
    return [
        {
            "created_at": entry.created_at.isoformat(sep=" ", timespec="seconds"),
            "type": entry.type,
            "entity": entry.entity,
            "entity_id": entry.entity_id or "",
            "message": entry.message,
        }
        for entry in entries
    ]


def render_csv(rows: Sequence[dict[str, str]]) -> bytes:
    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=list(rows[0].keys()) if rows else [])
    if rows:
        writer.writeheader()
        writer.writerows(rows)
    return buffer.getvalue().encode("utf-8")


def render_html(rows: Sequence[dict[str, str]], empty_message: str = "No payments recorded.") -> str:
    if not rows:
        return f"<p>{html.escape(empty_message)}</p>"
    header = "".join(f"<th>{html.escape(col)}</th>" for col in rows[0].keys())
    body_parts = []
    for row in rows:
        body_parts.append("<tr>" + "".join(f"<td>{html.escape(value)}</td>" for value in row.values()) + "</tr>")
    body_html = "".join(body_parts)
    return f"<table><thead><tr>{header}</tr></thead><tbody>{body_html}</tbody></table>"


def render_excel(rows: Sequence[dict[str, str]], sheet_name: str = "ledger") -> bytes:
    buf = io.BytesIO()
    with pd.ExcelWriter(buf, engine="xlsxwriter") as writer:
        pd.DataFrame(list(rows)).to_excel(writer, sheet_name=sheet_name, index=False)
    return buf.getvalue()
