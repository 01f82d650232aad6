# test_reconciliation.py
import datetime as dt

import pytest

from homefood.errors import ValidationError, NotFoundError
from homefood.schemas.orders import Order, LineItem, PaymentStatus
from homefood.services.reconciliation import derive_status, amount_due, record_payment, delivery_board

MAY1 = dt.date(2024, 5, 1)


def _order(total=500, paid=0, **kw):
    base = dict(customer_id="c1", customer_name="Asha", date=MAY1, meal_type="lunch",
                items=[LineItem(name="Thali", unit_price=total, quantity=1)],
                delivery_charge=0, payment_received=paid)
    base.update(kw)
    return Order(**base)


@pytest.mark.parametrize("paid,status,due", [
    (500, PaymentStatus.paid, 0),
    (600, PaymentStatus.overpaid, -100),
    (300, PaymentStatus.pending, 200),
])
def test_derive_status(paid, status, due):
    o = _order(500, paid)
    assert derive_status(o) == status
    assert amount_due(o) == due


def test_scenario_c_payments_add_up(orders):
    oid = orders.append("c1", _order(250))
    record_payment(orders, "c1", oid, 100)
    after = record_payment(orders, "c1", oid, 150, mode="online", delivered=True)
    stored = orders.get("c1", oid)
    assert stored.payment_received == 250 == after.payment_received
    assert derive_status(stored) == PaymentStatus.paid
    assert (stored.payment_mode, stored.delivered) == ("online", True)
    assert stored.grand_total == 250


def test_payment_keeps_mode_and_delivery_when_not_given(orders):
    oid = orders.append("c1", _order(250, payment_mode="online", delivered=True))
    record_payment(orders, "c1", oid, 50)
    stored = orders.get("c1", oid)
    assert (stored.payment_mode, stored.delivered, stored.payment_received) == ("online", True, 50)


@pytest.mark.parametrize("amount", [0, -10, "100", None, float("inf"), True])
def test_invalid_payment_amounts(orders, amount):
    oid = orders.append("c1", _order(250))
    with pytest.raises(ValidationError):
        record_payment(orders, "c1", oid, amount)
    assert orders.get("c1", oid).payment_received == 0


def test_unknown_mode_and_missing_order(orders):
    oid = orders.append("c1", _order(250))
    with pytest.raises(ValidationError):
        record_payment(orders, "c1", oid, 10, mode="cheque")
    with pytest.raises(NotFoundError):
        record_payment(orders, "c1", "nope", 10)


def test_delivery_board_groups_and_filters():
    rows = [
        _order(100, 100, id="o1", customer_name="Asha"),
        _order(200, 0, id="o2", customer_name="Ravi"),
        _order(150, 0, id="o3", customer_name="Kiran", meal_type="dinner"),
        _order(150, 0, id="o4", customer_name="Old", date=dt.date(2024, 4, 30)),
    ]
    board = delivery_board(rows, MAY1)
    assert sorted(board) == ["dinner", "lunch"]
    assert [r.order_id for r in board["lunch"]] == ["o1", "o2"]
    assert board["lunch"][1].due == 200

    pending = delivery_board(rows, MAY1, status="pending")
    assert [r.order_id for r in pending["lunch"]] == ["o2"]
    assert delivery_board(rows, MAY1, meal_type="dinner", search="kir")["dinner"][0].order_id == "o3"
    with pytest.raises(ValidationError):
        delivery_board(rows, MAY1, status="late")
