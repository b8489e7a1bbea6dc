"""Google Sheets helper utilities."""
from __future__ import annotations

import csv
import logging
from pathlib import Path
from typing import Dict, List, Sequence

from googleapiclient.discovery import build
from googleapiclient.errors import HttpError
from google.oauth2.service_account import Credentials

from water_ledger.models import Customer, SaleRecord

LOGGER = logging.getLogger(__name__)

CUSTOMER_HEADERS = [
    "id",
    "name",
    "phone",
    "total_balance",
    "empty_bottles_on_hand",
    "last_known_rate",
]

SALE_HEADERS = [
    "customer_id",
    "date",
    "bottles_sold",
    "amount_received",
    "unit_price",
]


class SheetsClient:
    """Read-only access to the Customers and Sales tabs of a spreadsheet."""

    def __init__(
        self,
        *,
        spreadsheet_id: str,
        credentials_path: str,
        customers_tab: str = "Customers",
        sales_tab: str = "Sales",
    ) -> None:
        self._spreadsheet_id = spreadsheet_id
        self._customers_tab = customers_tab
        self._sales_tab = sales_tab
        credentials = Credentials.from_service_account_file(
            credentials_path, scopes=["https://www.googleapis.com/auth/spreadsheets.readonly"]
        )
        self._service = build("sheets", "v4", credentials=credentials, cache_discovery=False)

    def _fetch_rows(self, range_name: str, headers: Sequence[str]) -> List[Dict[str, str]]:
        try:
            response = self._service.spreadsheets().values().get(
                spreadsheetId=self._spreadsheet_id, range=range_name
            ).execute()
        except HttpError:
            LOGGER.exception("Failed reading %s", range_name)
            raise
        rows = []
        for row in response.get("values", []):
            padded = row + [""] * (len(headers) - len(row))
            rows.append(dict(zip(headers, padded)))
        return rows

    def fetch_customers(self) -> List[Customer]:
        rows = self._fetch_rows(f"{self._customers_tab}!A2:F", CUSTOMER_HEADERS)
        customers = rows_to_customers(rows)
        LOGGER.info("Loaded %d customers", len(customers))
        return customers

    def fetch_sales(self) -> List[SaleRecord]:
        rows = self._fetch_rows(f"{self._sales_tab}!A2:E", SALE_HEADERS)
        sales = rows_to_sales(rows)
        LOGGER.info("Loaded %d sale records", len(sales))
        return sales


def load_csv_rows(path: str | Path, headers: Sequence[str]) -> List[Dict[str, str]]:
    """Read a CSV export with a header row into dicts keyed by ``headers``.

    Columns are matched by header name; columns missing from the file come
    back as empty strings.
    """

    csv_path = Path(path)
    if not csv_path.exists():
        raise FileNotFoundError(f"CSV file not found: {csv_path}")
    with open(csv_path, "r", encoding="utf-8", newline="") as f:
        reader = csv.DictReader(f)
        rows = [{header: (raw.get(header) or "") for header in headers} for raw in reader]
    LOGGER.info("Read %d rows from %s", len(rows), csv_path)
    return rows


def rows_to_customers(rows: Sequence[Dict[str, str]]) -> List[Customer]:
    customers: List[Customer] = []
    for row in rows:
        customer = Customer.from_row(row)
        if not customer.id:
            continue
        customers.append(customer)
    return customers


def rows_to_sales(rows: Sequence[Dict[str, str]]) -> List[SaleRecord]:
    sales: List[SaleRecord] = []
    for row in rows:
        if not str(row.get("customer_id", "")).strip():
            LOGGER.warning("Skipping sale row without customer id: %s", row)
            continue
        try:
            sales.append(SaleRecord.from_row(row))
        except ValueError:
            LOGGER.warning("Skipping sale row with invalid date: %s", row)
    return sales
