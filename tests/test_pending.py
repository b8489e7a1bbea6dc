from water_ledger.models import Customer
from water_ledger.pending import customers_with_pending_balance


def _customer(customer_id, balance):
    return Customer(id=customer_id, name=customer_id.upper(), total_balance=balance)


def test_only_positive_balances_are_selected():
    customers = [_customer("a", 0), _customer("b", -20), _customer("c", 5), _customer("d", 0.01)]
    assert [c.id for c in customers_with_pending_balance(customers)] == ["c", "d"]


def test_sorted_descending_and_stable_on_ties():
    customers = [
        _customer("a", 100),
        _customer("b", 300),
        _customer("c", 100),
        _customer("d", 200),
        _customer("e", 100),
    ]
    assert [c.id for c in customers_with_pending_balance(customers)] == ["b", "d", "a", "c", "e"]


def test_empty_collection():
    assert customers_with_pending_balance([]) == []
