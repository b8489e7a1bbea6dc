"""Selection of customers who still owe money."""
from __future__ import annotations

from typing import Iterable, List

from water_ledger.models import Customer


def customers_with_pending_balance(customers: Iterable[Customer]) -> List[Customer]:
    """Return customers with a positive balance, largest balance first.

    ``sorted`` is stable, so customers with equal balances keep their
    original relative order.
    """

    pending = [customer for customer in customers if customer.total_balance > 0]
    return sorted(pending, key=lambda customer: customer.total_balance, reverse=True)
