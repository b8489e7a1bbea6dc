"""Entrypoint for listing pending balances and composing WhatsApp reminders."""
from __future__ import annotations

import argparse
import json
import logging
import os
import webbrowser
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Dict, List, Sequence, Tuple

from water_ledger.models import Customer, SaleRecord
from water_ledger.pending import customers_with_pending_balance
from water_ledger.reconciliation import build_reminder
from water_ledger.sheets_client import (
    CUSTOMER_HEADERS,
    SALE_HEADERS,
    SheetsClient,
    load_csv_rows,
    rows_to_customers,
    rows_to_sales,
)
from water_ledger.whatsapp import format_money, generate_whatsapp_reminder_url

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
LOGGER = logging.getLogger(__name__)

# Get project root (2 levels up from this file: src/water_ledger/main.py -> root)
PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent


def load_config(path: str | Path) -> Dict:
    with open(path, "r", encoding="utf-8") as config_file:
        return json.load(config_file)


def _config_path() -> Path:
    config_env = os.environ.get("WATER_LEDGER_CONFIG")
    return Path(config_env) if config_env else PROJECT_ROOT / "config" / "config.json"


def _parse_date(raw: str) -> date:
    try:
        return date.fromisoformat(raw)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid date (expected YYYY-MM-DD): {raw!r}") from None


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--date",
        type=_parse_date,
        default=None,
        help="Treat this day (YYYY-MM-DD) as today instead of the current UTC date",
    )
    group = parser.add_mutually_exclusive_group()
    group.add_argument(
        "--remind",
        metavar="CUSTOMER_ID",
        help="Compose a reminder link for a single customer",
    )
    group.add_argument(
        "--remind-all",
        action="store_true",
        help="Compose reminder links for every customer with a pending balance",
    )
    parser.add_argument(
        "--open",
        action="store_true",
        help="Open the generated reminder link(s) in the web browser",
    )
    parser.add_argument(
        "--csv-dir",
        type=str,
        metavar="DIR",
        help="Read customers.csv and sales.csv from this directory instead of Google Sheets",
    )
    return parser.parse_args(argv)


def load_records(config: Dict, csv_dir: str | None = None) -> Tuple[List[Customer], List[SaleRecord]]:
    """Return snapshots of the customer and sale collections."""

    if csv_dir:
        directory = Path(csv_dir)
        customers = rows_to_customers(load_csv_rows(directory / "customers.csv", CUSTOMER_HEADERS))
        sales = rows_to_sales(load_csv_rows(directory / "sales.csv", SALE_HEADERS))
        return customers, sales

    credentials_path = os.environ.get("GOOGLE_APPLICATION_CREDENTIALS") or config.get("google_service_file")
    if not credentials_path:
        raise RuntimeError("Either GOOGLE_APPLICATION_CREDENTIALS environment variable or 'google_service_file' in config must be set")
    if not config.get("spreadsheet_id"):
        raise RuntimeError("'spreadsheet_id' must be set in config")

    sheets_client = SheetsClient(
        spreadsheet_id=config["spreadsheet_id"],
        credentials_path=credentials_path,
        customers_tab=config.get("customers_tab", "Customers"),
        sales_tab=config.get("sales_tab", "Sales"),
    )
    return sheets_client.fetch_customers(), sheets_client.fetch_sales()


def compose_reminders(
    targets: Sequence[Customer],
    sales: Sequence[SaleRecord],
    today: date,
    config: Dict,
) -> List[Tuple[Customer, str]]:
    reminders: List[Tuple[Customer, str]] = []
    for customer in targets:
        result = build_reminder(customer, sales, today)
        url = generate_whatsapp_reminder_url(
            customer,
            result,
            currency=config.get("currency", "PKR"),
            business_name=config.get("business_name", ""),
            default_country_code=str(config.get("default_country_code", "92")),
        )
        reminders.append((customer, url))
    return reminders


def main(argv: Sequence[str] | None = None) -> None:
    args = parse_args(argv)
    config_path = _config_path()
    if config_path.exists():
        config = load_config(config_path)
    elif args.csv_dir:
        config = {}
    else:
        raise FileNotFoundError(f"Config file not found: {config_path}")

    today = args.date or datetime.now(timezone.utc).date()
    customers, sales = load_records(config, args.csv_dir)
    pending = customers_with_pending_balance(customers)
    currency = config.get("currency", "PKR")

    if args.remind:
        matches = [customer for customer in customers if customer.id == args.remind]
        if not matches:
            raise SystemExit(f"Unknown customer id: {args.remind}")
        targets = matches[:1]
    elif args.remind_all:
        targets = pending
    else:
        for line in _format_pending_summary(pending, currency):
            LOGGER.info(line)
        return

    for customer, url in compose_reminders(targets, sales, today, config):
        LOGGER.info("Reminder for %s (%s): %s", customer.name, customer.id, url)
        if args.open:
            webbrowser.open(url, new=2)


def _format_pending_summary(pending: Sequence[Customer], currency: str) -> List[str]:
    """Return human-friendly lines describing customers who owe money."""

    if not pending:
        return ["No customers have a pending balance right now"]
    summary = [f"{len(pending)} customer(s) with pending balances:"]
    for customer in pending:
        summary.append(f"{customer.name} ({customer.id}): {format_money(customer.total_balance, currency)}")
    return summary


if __name__ == "__main__":
    main()
