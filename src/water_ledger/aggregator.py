"""Per-customer figures derived from the full sales history."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Iterable, Optional, Tuple

from water_ledger.models import SaleRecord


@dataclass(frozen=True)
class SalesSummary:
    todays_receipts: float
    customer_sales: Tuple[SaleRecord, ...]
    total_bottles: int
    paid_amount: float
    last_sale: Optional[SaleRecord]


def aggregate_sales(customer_id: str, today: date, sales: Iterable[SaleRecord]) -> SalesSummary:
    """Filter ``sales`` down to one customer and total them up.

    The most recent sale is picked with a strict ``>`` on the date, so when
    several sales share the latest date the first one in input order wins.
    """

    customer_sales = tuple(sale for sale in sales if sale.customer_id == customer_id)

    todays_receipts = sum(
        (sale.amount_received or 0) for sale in customer_sales if sale.date == today
    )
    total_bottles = sum((sale.bottles_sold or 0) for sale in customer_sales)
    paid_amount = sum((sale.amount_received or 0) for sale in customer_sales)

    return SalesSummary(
        todays_receipts=todays_receipts,
        customer_sales=customer_sales,
        total_bottles=total_bottles,
        paid_amount=paid_amount,
        last_sale=_latest_sale(customer_sales),
    )


def _latest_sale(sales: Tuple[SaleRecord, ...]) -> Optional[SaleRecord]:
    if not sales:
        return None
    latest = sales[0]
    for sale in sales[1:]:
        if sale.date > latest.date:
            latest = sale
    return latest
