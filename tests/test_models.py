from datetime import date

import pytest

from water_ledger.models import Customer, SaleRecord, _safe_float, _safe_int, parse_iso_date


def test_customer_from_row_parses_numbers():
    customer = Customer.from_row(
        {
            "id": " c7 ",
            "name": "Bilal",
            "phone": "0300 1234567",
            "total_balance": "1,250",
            "empty_bottles_on_hand": "3",
            "last_known_rate": "90",
        }
    )
    assert customer.id == "c7"
    assert customer.total_balance == pytest.approx(1250)
    assert customer.empty_bottles_on_hand == 3
    assert customer.last_known_rate == pytest.approx(90)


def test_customer_from_row_treats_non_positive_rate_as_missing():
    assert Customer.from_row({"id": "c1", "last_known_rate": "0"}).last_known_rate is None
    assert Customer.from_row({"id": "c1", "last_known_rate": "n/a"}).last_known_rate is None
    assert Customer.from_row({"id": "c1"}).total_balance == 0.0


def test_sale_from_row_defaults_missing_values():
    sale = SaleRecord.from_row({"customer_id": "c1", "date": "2024-03-01"})
    assert sale.date == date(2024, 3, 1)
    assert sale.bottles_sold == 0
    assert sale.amount_received == 0.0
    assert sale.unit_price is None


def test_sale_from_row_rejects_bad_dates():
    with pytest.raises(ValueError):
        SaleRecord.from_row({"customer_id": "c1", "date": "yesterday"})
    with pytest.raises(ValueError):
        SaleRecord.from_row({"customer_id": "c1", "date": ""})


def test_parse_iso_date_accepts_timestamps():
    assert parse_iso_date("2024-03-01T09:30:00") == date(2024, 3, 1)
    assert parse_iso_date(date(2024, 3, 1)) == date(2024, 3, 1)


def test_safe_number_helpers():
    assert _safe_float("12.5") == pytest.approx(12.5)
    assert _safe_float("") is None
    assert _safe_float(None) is None
    assert _safe_float("abc") is None
    assert _safe_int("4.0") == 4
    assert _safe_int("x") is None


@pytest.mark.parametrize("raw", ["nan", "inf", "-inf", "1e400"])
def test_safe_number_helpers_reject_non_finite_values(raw):
    assert _safe_float(raw) is None
    assert _safe_int(raw) is None


def test_non_finite_cells_fall_back_to_defaults():
    customer = Customer.from_row(
        {"id": "c1", "total_balance": "inf", "empty_bottles_on_hand": "nan", "last_known_rate": "1e400"}
    )
    assert customer.total_balance == 0.0
    assert customer.empty_bottles_on_hand == 0
    assert customer.last_known_rate is None

    sale = SaleRecord.from_row(
        {"customer_id": "c1", "date": "2024-03-01", "bottles_sold": "inf", "amount_received": "nan", "unit_price": "inf"}
    )
    assert sale.bottles_sold == 0
    assert sale.amount_received == 0.0
    assert sale.unit_price is None


def test_parse_iso_date_accepts_utc_suffix():
    assert parse_iso_date("2024-03-01T09:30:00Z") == date(2024, 3, 1)
    assert parse_iso_date("2024-03-01T23:59:59.123z") == date(2024, 3, 1)
