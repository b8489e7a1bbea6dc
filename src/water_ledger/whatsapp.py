"""Build WhatsApp reminder links from reconciliation results."""
from __future__ import annotations

import logging
import re

from requests.models import PreparedRequest

from water_ledger.models import Customer
from water_ledger.reconciliation import ReconciliationResult

LOGGER = logging.getLogger(__name__)

WHATSAPP_BASE_URL = "https://wa.me/"


def normalise_phone(raw: str, default_country_code: str = "92") -> str:
    """Return the digits-only international form expected by wa.me.

    Examples:
        >>> normalise_phone("0300-1234567")
        '923001234567'
        >>> normalise_phone("+92 300 1234567")
        '923001234567'
    """
    value = (raw or "").strip()
    digits = re.sub(r"[^\d]", "", value)
    if not digits:
        return ""
    if value.startswith("+"):
        return digits
    if digits.startswith("00"):
        return digits[2:]
    if digits.startswith("0"):
        return default_country_code + digits[1:]
    return digits


def format_money(amount: float, currency: str = "PKR") -> str:
    if float(amount).is_integer():
        return f"{currency} {amount:,.0f}"
    return f"{currency} {amount:,.2f}"


def format_reminder_message(
    customer: Customer,
    result: ReconciliationResult,
    *,
    currency: str = "PKR",
    business_name: str = "",
) -> str:
    lines = [
        f"Dear {customer.name},",
        f"Account summary as of {result.date.isoformat()}:",
        f"Previous balance: {format_money(result.previous_balance, currency)}",
        f"Received today: {format_money(result.daily_sale, currency)}",
        f"Bottles delivered: {result.total_bottles} (paid {result.paid_bottles}, unpaid {result.unpaid_bottles})",
    ]
    if result.has_rate:
        lines.append(f"Rate per bottle: {format_money(result.multiplier, currency)}")
    lines.extend(
        [
            f"Total amount: {format_money(result.total_amount, currency)}",
            f"Paid amount: {format_money(result.paid_amount, currency)}",
            f"Unpaid amount: {format_money(result.unpaid_amount, currency)}",
            f"Empty bottles with you: {result.empty_bottles}",
            "Kindly clear your outstanding balance at your earliest convenience.",
        ]
    )
    if business_name:
        lines.append(f"Thank you, {business_name}")
    else:
        lines.append("Thank you")
    return "\n".join(lines)


def generate_whatsapp_reminder_url(
    customer: Customer,
    result: ReconciliationResult,
    *,
    currency: str = "PKR",
    business_name: str = "",
    default_country_code: str = "92",
) -> str:
    """Return a ``wa.me`` deep link with the reminder text pre-filled.

    Customers without a phone number get a link without a recipient, which
    lets the sender pick the chat manually.
    """

    phone = normalise_phone(customer.phone, default_country_code)
    if not phone:
        LOGGER.warning("Customer %s has no phone number; link has no recipient", customer.id)
    message = format_reminder_message(customer, result, currency=currency, business_name=business_name)
    request = PreparedRequest()
    request.prepare_url(f"{WHATSAPP_BASE_URL}{phone}", {"text": message})
    return request.url
