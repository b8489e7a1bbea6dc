"""Balance and bottle reconciliation for a single customer."""
from __future__ import annotations

import logging
import math
from dataclasses import asdict, dataclass
from datetime import date
from typing import Dict, Iterable, Optional

from water_ledger.aggregator import SalesSummary, aggregate_sales
from water_ledger.models import Customer, SaleRecord

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReconciliationResult:
    date: date
    multiplier: Optional[float]
    previous_balance: float
    daily_sale: float
    total_bottles: int
    paid_bottles: int
    unpaid_bottles: int
    total_amount: float
    paid_amount: float
    unpaid_amount: float
    empty_bottles: int

    @property
    def has_rate(self) -> bool:
        return self.multiplier is not None

    def to_dict(self) -> Dict[str, object]:
        payload = asdict(self)
        payload["date"] = self.date.isoformat()
        return payload


def derive_multiplier(last_sale: Optional[SaleRecord], customer: Customer) -> Optional[float]:
    """Return the per-bottle price to apply, or ``None`` when nothing is known.

    Order: the last sale's own unit price, then the price implied by what was
    received for it, then the customer's last known rate.
    """

    if last_sale is not None:
        if last_sale.unit_price is not None and last_sale.unit_price > 0:
            return last_sale.unit_price
        if last_sale.bottles_sold > 0 and last_sale.amount_received:
            return last_sale.amount_received / last_sale.bottles_sold
    if customer.last_known_rate is not None and customer.last_known_rate > 0:
        return customer.last_known_rate
    return None


def reconcile(customer: Customer, summary: SalesSummary, today: date) -> ReconciliationResult:
    previous_balance = customer.total_balance - summary.todays_receipts
    multiplier = derive_multiplier(summary.last_sale, customer)

    paid_amount = summary.paid_amount
    total_bottles = summary.total_bottles
    paid_bottles = math.floor(paid_amount / multiplier) if multiplier else 0
    unpaid_bottles = max(0, total_bottles - paid_bottles)
    # Without a known price, treat what was paid as what was owed.
    total_amount = total_bottles * multiplier if multiplier else paid_amount

    result = ReconciliationResult(
        date=today,
        multiplier=multiplier,
        previous_balance=previous_balance,
        daily_sale=summary.todays_receipts,
        total_bottles=total_bottles,
        paid_bottles=paid_bottles,
        unpaid_bottles=unpaid_bottles,
        total_amount=total_amount,
        paid_amount=paid_amount,
        unpaid_amount=total_amount - paid_amount,
        empty_bottles=customer.empty_bottles_on_hand or 0,
    )
    LOGGER.debug("Reconciled %s: %s", customer.id, result.to_dict())
    return result


def build_reminder(customer: Customer, sales: Iterable[SaleRecord], today: date) -> ReconciliationResult:
    """Aggregate ``customer``'s history and reconcile it against their balance."""

    summary = aggregate_sales(customer.id, today, sales)
    if summary.last_sale is None:
        LOGGER.debug("No sales history for %s", customer.id)
    return reconcile(customer, summary, today)
