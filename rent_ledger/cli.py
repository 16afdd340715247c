"""Command-line entrypoint for the rent ledger."""
from __future__ import annotations

import argparse
import logging
import sys
from datetime import datetime
from decimal import Decimal
from pathlib import Path

from rent_ledger.application.activity.use_cases import ListActivityUseCase
from rent_ledger.application.dto import EndTenancyRequest, PaymentRequest, PricingRequest, TenancyRequest
from rent_ledger.application.use_cases import (
    EndTenancyUseCase,
    ImportPaymentsUseCase,
    LedgerContext,
    OverdueBoardUseCase,
    RecordPaymentUseCase,
    RegisterTenancyUseCase,
    StatementUseCase,
    UpdatePricingUseCase,
)
from rent_ledger.config import Settings, load_settings
from rent_ledger.domain.errors import InvalidInput, LedgerError
from rent_ledger.domain.models import BillingPeriod, PaymentMethod
from rent_ledger.domain.services import LedgerEngine
from rent_ledger.infrastructure.parsing.utils import parse_decimal
from rent_ledger.infrastructure.parsing.workbook import read_payment_history
from rent_ledger.infrastructure.storage.activity_store import JsonLinesActivityRepository
from rent_ledger.infrastructure.storage.json_store import JsonTenancyRepository
from rent_ledger.logging_config import setup_logging
from rent_ledger.presentation.ledger_report import (
    render_csv,
    render_excel,
    render_html,
    statement_to_rows,
)

logger = logging.getLogger(__name__)


def build_context(settings: Settings) -> LedgerContext:
    return LedgerContext(
        tenancies=JsonTenancyRepository(settings.ledger_path),
        activity=JsonLinesActivityRepository(settings.activity_path),
        engine=LedgerEngine(settings.tolerance),
        unit_rate=settings.unit_rate,
    )


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Track rent, utilities and balances per room (Bikram Sambat months)")
    parser.add_argument("--data-dir", type=Path, help="Directory holding ledger.json and activity.jsonl")
    sub = parser.add_subparsers(dest="command", required=True)

    tenancy = sub.add_parser("add-tenancy", help="Register a tenant in a room")
    tenancy.add_argument("room", type=str)
    tenancy.add_argument("--tenant", required=True, help="Tenant name")
    tenancy.add_argument("--start", required=True, type=BillingPeriod.parse, help="First billing month (YYYY-MM, BS)")
    tenancy.add_argument("--rent", required=True, type=parse_decimal)
    tenancy.add_argument("--water", default=Decimal("0"), type=parse_decimal)

    end = sub.add_parser("end-tenancy", help="Record the last month a tenant occupies a room")
    end.add_argument("room", type=str)
    end.add_argument("--end", required=True, type=BillingPeriod.parse, help="Last billed month (YYYY-MM, BS)")

    price = sub.add_parser("set-price", help="Change a room's monthly rent or water charge")
    price.add_argument("room", type=str)
    price.add_argument("--rent", type=parse_decimal)
    price.add_argument("--water", type=parse_decimal)

    pay = sub.add_parser("pay", help="Record a payment for a room")
    pay.add_argument("room", type=str)
    pay.add_argument("--month", type=BillingPeriod.parse, help="Billing month (YYYY-MM, BS); defaults to the next unpaid one")
    pay.add_argument("--units", required=True, type=parse_decimal, help="Electricity units consumed")
    pay.add_argument("--paid", required=True, type=parse_decimal, help="Amount received")
    pay.add_argument("--method", choices=[m.value for m in PaymentMethod], default=PaymentMethod.CASH.value)
    pay.add_argument("--notes", type=str)
    pay.add_argument("--date-bs", type=str, help="Payment date in BS (YYYY-MM-DD)")

    overdue = sub.add_parser("overdue", help="List overdue months per room")
    overdue.add_argument("--as-of", type=BillingPeriod.parse, help="Reference month (YYYY-MM, BS)")

    statement = sub.add_parser("statement", help="Show a room's ledger")
    statement.add_argument("room", type=str)
    statement.add_argument("--csv", type=Path)
    statement.add_argument("--html", type=Path)
    statement.add_argument("--xlsx", type=Path)

    importer = sub.add_parser("import", help="Append payment history from a CSV or Excel file")
    importer.add_argument("room", type=str)
    importer.add_argument("file", type=Path)

    activity = sub.add_parser("activity", help="Show the activity log")
    activity.add_argument("--limit", type=int, default=20)
    return parser.parse_args(argv)


def _cmd_add_tenancy(args: argparse.Namespace, context: LedgerContext) -> int:
    request = TenancyRequest(
        room_id=args.room,
        tenant_name=args.tenant,
        start_period=args.start,
        monthly_rent=args.rent,
        monthly_water=args.water,
        received_at=datetime.now(),
    )
    tenancy = RegisterTenancyUseCase(context).execute(request)
    print(f"Room {tenancy.room_id}: {tenancy.tenant_name} from {tenancy.start_period.label}")
    return 0


def _cmd_end_tenancy(args: argparse.Namespace, context: LedgerContext) -> int:
    request = EndTenancyRequest(room_id=args.room, end_period=args.end, received_at=datetime.now())
    tenancy = EndTenancyUseCase(context).execute(request)
    print(f"Room {tenancy.room_id}: {tenancy.tenant_name} until {args.end.label}")
    return 0


def _cmd_set_price(args: argparse.Namespace, context: LedgerContext) -> int:
    request = PricingRequest(
        room_id=args.room,
        received_at=datetime.now(),
        monthly_rent=args.rent,
        monthly_water=args.water,
    )
    tenancy = UpdatePricingUseCase(context).execute(request)
    print(f"Room {tenancy.room_id}: rent {tenancy.monthly_rent}, water {tenancy.monthly_water}")
    return 0


def _cmd_pay(args: argparse.Namespace, context: LedgerContext) -> int:
    period = args.month
    if period is None:
        period = context.engine.suggest_next_period(context.tenancies.get_tenancy(args.room))
    request = PaymentRequest(
        room_id=args.room,
        period=period,
        electricity_units=args.units,
        amount_paid=args.paid,
        recorded_date=datetime.now(),
        method=PaymentMethod(args.method),
        notes=args.notes,
        recorded_date_bs=args.date_bs,
    )
    response = RecordPaymentUseCase(context).execute(request)
    record = response.record
    charge = record.charge
    print(f"Payment for {record.period.label} ({record.period.name_nepali})")
    print(f"Electricity: {charge.electricity_units} units = {charge.electricity_cost}")
    print(f"Water: {charge.water_cost}")
    rent_note = " (already charged)" if response.rent_already_billed else ""
    print(f"Rent: {charge.rent_cost}{rent_note}")
    print(f"Previous balance: {record.previous_balance}")
    print(f"Total due: {record.total_due}")
    print(f"Paid: {record.amount_paid}")
    print(f"Remaining: {record.remaining_balance}")
    print(f"Status: {record.status.value}")
    return 0


def _cmd_overdue(args: argparse.Namespace, context: LedgerContext, settings: Settings) -> int:
    as_of = args.as_of or settings.current_period
    if as_of is None:
        raise InvalidInput("Pass --as-of or set RENT_LEDGER_CURRENT_PERIOD")
    views = OverdueBoardUseCase(context).execute(as_of)
    print(f"Overdue as of {as_of.label}")
    print("=" * 30)
    for view in views:
        tenancy = view.tenancy
        if not view.is_overdue:
            print(f"Room {tenancy.room_id} ({tenancy.tenant_name}): up to date")
            continue
        print(f"Room {tenancy.room_id} ({tenancy.tenant_name}): OVERDUE")
        for entry in view.overdue:
            if entry.remaining_amount is None:
                print(f"- {entry.period.label}: no payment")
            else:
                print(f"- {entry.period.label}: partial, {entry.remaining_amount} remaining")
    return 0


def _cmd_statement(args: argparse.Namespace, context: LedgerContext) -> int:
    statement = StatementUseCase(context).execute(args.room)
    print(f"Room {statement.room_id} ({statement.tenant_name})")
    print(f"Charged: {statement.total_charged}")
    print(f"Paid: {statement.total_paid}")
    print(f"Outstanding: {statement.outstanding_balance}")
    for record in statement.records:
        print(
            f"- {record.period.key} {record.period.label}: due {record.total_due}, "
            f"paid {record.amount_paid}, remaining {record.remaining_balance} [{record.status.value}]"
        )

    rows = statement_to_rows(statement)
    if args.csv:
        args.csv.write_bytes(render_csv(rows))
    if args.html:
        args.html.write_text(render_html(rows), encoding="utf-8")
    if args.xlsx:
        args.xlsx.write_bytes(render_excel(rows, sheet_name=f"room_{statement.room_id}"))
    return 0


def _cmd_import(args: argparse.Namespace, context: LedgerContext) -> int:
    records = read_payment_history(args.file)
    tenancy = ImportPaymentsUseCase(context).execute(args.room, records, datetime.now())
    print(f"Imported {len(records)} payment(s); room {tenancy.room_id} now has {len(tenancy.records)}")
    return 0


def _cmd_activity(args: argparse.Namespace, context: LedgerContext) -> int:
    for entry in ListActivityUseCase(context.activity).execute(limit=args.limit):
        print(f"{entry.created_at:%Y-%m-%d %H:%M} [{entry.type}] {entry.message}")
    return 0


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv if argv is not None else sys.argv[1:])
    setup_logging()
    settings = load_settings(args.data_dir)
    context = build_context(settings)

    try:
        if args.command == "add-tenancy":
            return _cmd_add_tenancy(args, context)
        if args.command == "end-tenancy":
            return _cmd_end_tenancy(args, context)
        if args.command == "set-price":
            return _cmd_set_price(args, context)
        if args.command == "pay":
            return _cmd_pay(args, context)
        if args.command == "overdue":
            return _cmd_overdue(args, context, settings)
        if args.command == "statement":
            return _cmd_statement(args, context)
        if args.command == "import":
            return _cmd_import(args, context)
        return _cmd_activity(args, context)
    except LedgerError as exc:
        logger.debug("Command %s failed with %s", args.command, exc.code)
        print(f"Error: {exc.message}", file=sys.stderr)
        return 2


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
