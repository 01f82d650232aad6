import threading
from typing import Callable, Iterable, Optional

from homefood.config import settings
from homefood.schemas.catalog import BASE_MEAL_TYPES, BAKERY
from homefood.schemas.orders import Order
from homefood.schemas.reports import (
    AggregationFilters, AggregationResult, PackagedItem, CustomerCharges,
)
from homefood.services.billing import _money


def default_meal_types(include_bakery: Optional[bool] = None) -> tuple[str, ...]:
    if include_bakery is None:
        include_bakery = settings.INCLUDE_BAKERY
    return BASE_MEAL_TYPES + ((BAKERY,) if include_bakery else ())


def matches(order: Order, filters: AggregationFilters) -> bool:
    if filters.date is not None and order.date != filters.date:
        return False
    if filters.meal_type and order.meal_type != filters.meal_type:
        return False
    term = filters.customer.strip().lower()
    if term and term not in (order.customer_name or "").lower():
        return False
    return True


def aggregate(orders: Iterable[Order], filters: Optional[AggregationFilters] = None,
              meal_types: Optional[Iterable[str]] = None) -> AggregationResult:
    """Cooking, packaging and money views over the orders that pass ``filters``.

    Only recognized meal types get per-meal buckets. Orders of any other meal
    type still count towards ``unbucketed_total`` and so towards
    ``grand_total``. Pure: same input, same output.
    """
    filters = filters or AggregationFilters()
    recognized = list(meal_types) if meal_types is not None else list(default_meal_types())
    if filters.meal_type:
        # the filtered meal is always bucketed, and is the only bucket shown
        recognized = [filters.meal_type]

    cooking: dict[str, dict[str, int]] = {m: {} for m in recognized}
    packaging: dict[str, dict[str, dict[str, PackagedItem]]] = {m: {} for m in recognized}
    charges: dict[str, dict[str, CustomerCharges]] = {m: {} for m in recognized}
    meal_totals = {m: 0.0 for m in recognized}
    delivery_totals = {m: 0.0 for m in recognized}
    unbucketed = 0.0
    count = 0

    for o in orders:
        if not matches(o, filters):
            continue
        count += 1
        lines = [i for i in o.items if i.quantity > 0]
        items_revenue = sum(i.unit_price * i.quantity for i in lines)
        meal = o.meal_type
        if meal not in meal_totals:
            unbucketed += items_revenue + o.delivery_charge
            continue

        who = o.customer_name or o.customer_id
        packed = packaging[meal].setdefault(who, {})
        for i in lines:
            cooking[meal][i.name] = cooking[meal].get(i.name, 0) + i.quantity
            slot = packed.setdefault(i.name, PackagedItem(unit_price=i.unit_price))
            slot.quantity += i.quantity
            slot.amount = _money(slot.amount + i.unit_price * i.quantity)
        cc = charges[meal].setdefault(who, CustomerCharges())
        cc.delivery_charge = _money(cc.delivery_charge + o.delivery_charge)
        cc.grand_total = _money(cc.grand_total + items_revenue + o.delivery_charge)
        meal_totals[meal] += items_revenue
        delivery_totals[meal] += o.delivery_charge

    return AggregationResult(
        per_item_cooking_totals=cooking,
        per_customer_packaging=packaging,
        customer_totals=charges,
        meal_totals={m: _money(v) for m, v in meal_totals.items()},
        delivery_totals={m: _money(v) for m, v in delivery_totals.items()},
        unbucketed_total=_money(unbucketed),
        order_count=count,
        grand_total=_money(sum(meal_totals.values()) + sum(delivery_totals.values()) + unbucketed),
    )


class LiveAggregation:
    """Keeps an ``aggregate`` result current by re-running it on every order change."""

    def __init__(self, order_store, filters: Optional[AggregationFilters] = None,
                 meal_types: Optional[Iterable[str]] = None,
                 on_change: Optional[Callable[[AggregationResult], None]] = None):
        self.filters = filters or AggregationFilters()
        self.meal_types = list(meal_types) if meal_types is not None else None
        self.on_change = on_change
        self._lock = threading.Lock()
        self.result = aggregate([], self.filters, self.meal_types)
        self._sub = order_store.subscribe_all(self._refresh)

    def _refresh(self, orders: list[Order]) -> None:
        result = aggregate(orders, self.filters, self.meal_types)
        with self._lock:
            self.result = result
        if self.on_change:
            self.on_change(result)

    def close(self) -> None:
        self._sub.unsubscribe()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()
        return False
