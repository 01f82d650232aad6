# test_aggregation.py
import datetime as dt

from homefood.schemas.orders import Order, LineItem
from homefood.schemas.reports import AggregationFilters
from homefood.services.aggregation import aggregate, LiveAggregation

MAY1 = dt.date(2024, 5, 1)


def _order(oid, customer, meal="lunch", day=MAY1, items=(), delivery=0):
    return Order(id=oid, customer_id=f"c-{customer}", customer_name=customer, date=day,
                 meal_type=meal, delivery_charge=delivery,
                 items=[LineItem(name=n, unit_price=p, quantity=q) for n, p, q in items])


def test_scenario_b():
    o1 = _order("o1", "Asha", items=[("Rice", 50, 2)], delivery=30)
    o2 = _order("o2", "Ravi", items=[("Rice", 50, 1)], delivery=0)
    assert (o1.grand_total, o2.grand_total) == (130, 50)

    r = aggregate([o1, o2], AggregationFilters(date=MAY1, meal_type="lunch"))
    assert r.per_item_cooking_totals["lunch"]["Rice"] == 3
    assert r.meal_totals["lunch"] == 150
    assert r.delivery_totals["lunch"] == 30
    assert r.grand_total == 180
    assert r.order_count == 2

    packed = r.per_customer_packaging["lunch"]["Asha"]["Rice"]
    assert (packed.quantity, packed.unit_price, packed.amount) == (2, 50, 100)
    assert r.customer_totals["lunch"]["Asha"].grand_total == 130


def test_aggregate_is_idempotent():
    orders = [_order("o1", "Asha", items=[("Rice", 50, 2), ("Dal", 40, 1)], delivery=30),
              _order("o2", "Ravi", meal="dinner", items=[("Chapati", 15, 4)])]
    f = AggregationFilters(date=MAY1)
    assert aggregate(orders, f) == aggregate(orders, f)
    assert orders[0].items[0].quantity == 2


def test_filters_date_meal_and_customer():
    orders = [
        _order("o1", "Asha Rani", items=[("Rice", 50, 1)]),
        _order("o2", "Ravi", items=[("Rice", 50, 2)]),
        _order("o3", "Asha Rani", day=dt.date(2024, 5, 2), items=[("Rice", 50, 4)]),
        _order("o4", "Asha Rani", meal="dinner", items=[("Chapati", 15, 3)]),
    ]
    r = aggregate(orders, AggregationFilters(date=MAY1, customer="asha"))
    assert r.per_item_cooking_totals["lunch"] == {"Rice": 1}
    assert r.per_item_cooking_totals["dinner"] == {"Chapati": 3}
    assert r.order_count == 2

    r = aggregate(orders, AggregationFilters(meal_type="lunch"))
    assert r.per_item_cooking_totals == {"lunch": {"Rice": 7}}


def test_no_matches_gives_zeroed_buckets():
    r = aggregate([], AggregationFilters(date=MAY1), meal_types=["breakfast", "lunch", "dinner"])
    assert r.per_item_cooking_totals == {"breakfast": {}, "lunch": {}, "dinner": {}}
    assert r.meal_totals == {"breakfast": 0, "lunch": 0, "dinner": 0}
    assert r.grand_total == 0 and r.order_count == 0


def test_unrecognized_meal_counts_only_in_grand_total():
    orders = [_order("o1", "Asha", items=[("Rice", 50, 1)], delivery=30),
              _order("o2", "Asha", meal="festival_special", items=[("Pulihora", 120, 1)], delivery=30)]
    r = aggregate(orders, AggregationFilters(date=MAY1), meal_types=["breakfast", "lunch", "dinner"])
    assert "festival_special" not in r.per_item_cooking_totals
    assert "festival_special" not in r.meal_totals
    assert r.unbucketed_total == 150
    assert r.grand_total == 80 + 150


def test_filtering_on_a_custom_meal_buckets_it():
    orders = [_order("o1", "Asha", meal="festival_special", items=[("Pulihora", 120, 2)])]
    r = aggregate(orders, AggregationFilters(meal_type="festival_special"))
    assert r.per_item_cooking_totals == {"festival_special": {"Pulihora": 2}}
    assert r.meal_totals == {"festival_special": 240}
    assert r.unbucketed_total == 0


def test_live_aggregation_follows_the_store(orders):
    seen = []
    live = LiveAggregation(orders, AggregationFilters(date=MAY1), on_change=seen.append)
    assert live.result.grand_total == 0

    orders.append("c-asha", _order(None, "Asha", items=[("Rice", 50, 2)], delivery=30))
    assert live.result.grand_total == 130

    oid = orders.list_all()[0].id
    orders.remove_order("c-asha", oid)
    assert live.result.grand_total == 0

    live.close()
    orders.append("c-asha", _order(None, "Asha", items=[("Rice", 50, 1)]))
    assert live.result.grand_total == 0
    assert [r.grand_total for r in seen] == [0, 130, 0]
