"""Customer and sale records as read from the storage layer."""
from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, datetime
from typing import Mapping, Optional


@dataclass(frozen=True)
class Customer:
    """A delivery customer and their running balance."""

    id: str
    name: str
    total_balance: float = 0.0
    empty_bottles_on_hand: int = 0
    last_known_rate: Optional[float] = None
    phone: str = ""

    @classmethod
    def from_row(cls, row: Mapping[str, str]) -> "Customer":
        """Create a :class:`Customer` from a spreadsheet/CSV row keyed by header."""

        rate = _safe_float(row.get("last_known_rate"))
        return cls(
            id=str(row.get("id", "")).strip(),
            name=str(row.get("name", "")).strip(),
            phone=str(row.get("phone", "")).strip(),
            total_balance=_safe_float(row.get("total_balance")) or 0.0,
            empty_bottles_on_hand=max(0, _safe_int(row.get("empty_bottles_on_hand")) or 0),
            last_known_rate=rate if rate is not None and rate > 0 else None,
        )


@dataclass(frozen=True)
class SaleRecord:
    """A single delivery transaction for a customer."""

    customer_id: str
    date: date
    bottles_sold: int = 0
    amount_received: float = 0.0
    unit_price: Optional[float] = None

    @classmethod
    def from_row(cls, row: Mapping[str, str]) -> "SaleRecord":
        """Create a :class:`SaleRecord` from a spreadsheet/CSV row.

        Raises ``ValueError`` when the date cannot be parsed; the caller
        decides whether to skip the row.
        """

        return cls(
            customer_id=str(row.get("customer_id", "")).strip(),
            date=parse_iso_date(row.get("date")),
            bottles_sold=max(0, _safe_int(row.get("bottles_sold")) or 0),
            amount_received=max(0.0, _safe_float(row.get("amount_received")) or 0.0),
            unit_price=_safe_float(row.get("unit_price")),
        )


def parse_iso_date(raw: object) -> date:
    if isinstance(raw, datetime):
        return raw.date()
    if isinstance(raw, date):
        return raw
    text = str(raw or "").strip()
    if not text:
        raise ValueError("Missing date")
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    if len(text) == 10:
        return date.fromisoformat(text)
    return datetime.fromisoformat(text).date()


def _safe_float(value: object) -> Optional[float]:
    if value is None or value == "":
        return None
    try:
        number = float(str(value).replace(",", ""))
    except (ValueError, TypeError):
        return None
    return number if math.isfinite(number) else None


def _safe_int(value: object) -> Optional[int]:
    number = _safe_float(value)
    if number is None:
        return None
    return int(number)
