"""Streamlit front-end for the rent ledger."""
from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Sequence

import pandas as pd
import streamlit as st

from rent_ledger import BillingPeriod, LedgerEngine, OverdueBoardUseCase, RecordPaymentUseCase, StatementUseCase
from rent_ledger.application.activity.use_cases import ListActivityUseCase
from rent_ledger.application.dto import PaymentRequest
from rent_ledger.application.use_cases import LedgerContext
from rent_ledger.config import SETTINGS
from rent_ledger.domain.calendar import month_window
from rent_ledger.domain.errors import LedgerError
from rent_ledger.domain.models import PaymentMethod, Tenancy
from rent_ledger.domain.results import RoomOverdueView
from rent_ledger.infrastructure.storage.activity_store import JsonLinesActivityRepository
from rent_ledger.infrastructure.storage.json_store import JsonTenancyRepository
from rent_ledger.logging_config import setup_logging
from rent_ledger.presentation.ledger_report import (
    activity_to_rows,
    overdue_to_rows,
    render_csv,
    render_excel,
    render_html,
    statement_to_rows,
)


st.set_page_config(page_title="Rent Ledger", layout="wide")
st.title("Payment Management")
st.caption("Rent, water and electricity per room, billed by Bikram Sambat month")


@st.cache_resource
def get_context() -> LedgerContext:
    setup_logging()
    return LedgerContext(
        tenancies=JsonTenancyRepository(SETTINGS.ledger_path),
        activity=JsonLinesActivityRepository(SETTINGS.activity_path),
        engine=LedgerEngine(SETTINGS.tolerance),
        unit_rate=SETTINGS.unit_rate,
    )


def overdue_message(view: RoomOverdueView) -> list[str]:
    messages = []
    for entry in view.overdue:
        if entry.remaining_amount is None:
            messages.append(f"No payment for {entry.period.label}")
        else:
            messages.append(f"Partial payment for {entry.period.label} - रु {entry.remaining_amount} remaining")
    return messages


def tenancy_label(tenancy: Tenancy) -> str:
    return f"Room #{tenancy.room_id} - {tenancy.tenant_name}"


context = get_context()

anchor_default = SETTINGS.current_period.key if SETTINGS.current_period else ""
anchor_text = st.sidebar.text_input("Current BS month (YYYY-MM)", value=anchor_default)
try:
    as_of = BillingPeriod.parse(anchor_text) if anchor_text else None
except LedgerError as exc:
    st.sidebar.error(exc.message)
    as_of = None

if as_of is None:
    st.info("Enter the current Bikram Sambat month in the sidebar to see the payment board.")
    st.stop()

views = OverdueBoardUseCase(context).execute(as_of)
tabs = st.tabs(["Rooms", "Record payment", "Statement", "Activity"])

with tabs[0]:
    if not views:
        st.write("No occupied rooms found.")
    for view in views:
        tenancy = view.tenancy
        header = tenancy_label(tenancy) + ("  ·  OVERDUE" if view.is_overdue else "")
        with st.container(border=True):
            st.markdown(f"**{header}**")
            st.caption(f"Rent रु {tenancy.monthly_rent} · Water रु {tenancy.monthly_water} · since {tenancy.start_period.label}")
            if tenancy.start_period == as_of:
                st.caption("New tenant")
            for message in overdue_message(view):
                st.warning(message)
    board_rows = overdue_to_rows(views)
    st.download_button(
        "Download overdue CSV",
        data=render_csv(board_rows),
        file_name=f"overdue_{as_of.key}.csv",
        mime="text/csv",
    )

with tabs[1]:
    tenancies: Sequence[Tenancy] = [view.tenancy for view in views]
    if not tenancies:
        st.write("Register a tenancy with the rent-ledger CLI first.")
    else:
        selected = st.selectbox("Room", tenancies, format_func=tenancy_label)
        options = month_window(as_of)
        suggested = context.engine.suggest_next_period(selected)
        index = options.index(suggested) if suggested in options else len(options) // 2
        period = st.selectbox("Billing month", options, index=index, format_func=lambda p: f"{p.name_nepali} {p.year} ({p.label})")
        units = st.number_input("Electricity units", min_value=0.0, step=1.0)
        paid = st.number_input("Amount paid", min_value=0.0, step=100.0)
        method = st.radio("Method", [m.value for m in PaymentMethod], horizontal=True)

        request = PaymentRequest(
            room_id=selected.room_id,
            period=period,
            electricity_units=Decimal(str(units)),
            amount_paid=Decimal(str(paid)),
            recorded_date=datetime.now(),
            method=PaymentMethod(method),
            notes=f"Payment for {period.label} (BS) - Room #{selected.room_id} - {selected.tenant_name}",
        )
        use_case = RecordPaymentUseCase(context)
        preview, _, rent_already_billed = use_case.preview(request)
        charge = preview.charge
        if rent_already_billed:
            st.info(f"Completing partial payment for {period.label}; rent already charged")
        cols = st.columns(4)
        cols[0].metric("Electricity", f"रु {charge.electricity_cost}")
        cols[1].metric("Water", f"रु {charge.water_cost}")
        cols[2].metric("Rent", f"रु {charge.rent_cost}")
        cols[3].metric("Previous balance", f"रु {preview.previous_balance}")
        st.metric("Total due", f"रु {preview.total_due}")
        st.write(f"Remaining after payment: रु {preview.remaining_balance} ({preview.status.value})")

        if st.button("Process payment"):
            try:
                response = use_case.execute(request)
            except LedgerError as exc:
                st.error(exc.message)
            else:
                st.success(f"Payment of रु {response.record.amount_paid} recorded ({response.record.status.value})")
                st.rerun()

with tabs[2]:
    room_ids = [view.tenancy.room_id for view in views]
    if room_ids:
        room_id = st.selectbox("Statement for room", room_ids, key="statement_room")
        try:
            statement = StatementUseCase(context).execute(room_id)
        except LedgerError as exc:
            st.error(exc.message)
        else:
            cols = st.columns(3)
            cols[0].metric("Charged", f"रु {statement.total_charged}")
            cols[1].metric("Paid", f"रु {statement.total_paid}")
            cols[2].metric("Outstanding", f"रु {statement.outstanding_balance}")
            rows = statement_to_rows(statement)
            st.dataframe(pd.DataFrame(rows))
            st.download_button("Download CSV", data=render_csv(rows), file_name=f"room_{room_id}.csv", mime="text/csv")
            st.download_button(
                "Download HTML",
                data=render_html(rows).encode("utf-8"),
                file_name=f"room_{room_id}.html",
                mime="text/html",
            )
            st.download_button(
                "Download Excel",
                data=render_excel(rows, sheet_name=f"room_{room_id}"),
                file_name=f"room_{room_id}.xlsx",
                mime="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
            )

with tabs[3]:
    entries = ListActivityUseCase(context.activity).execute(limit=100)
    st.dataframe(pd.DataFrame(activity_to_rows(entries)))
