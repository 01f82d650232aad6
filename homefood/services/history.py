import logging
from typing import Iterable, Optional

from pydantic import ValidationError as SchemaError

from homefood.errors import ValidationError
from homefood.schemas.orders import Order, LineItem
from homefood.services.billing import _money
from homefood.services.builder import _number
from homefood.services.order_store import OrderStore

log = logging.getLogger(__name__)

HISTORY_MEALS = ("breakfast", "lunch", "dinner")


def _write(orders: OrderStore, order: Order) -> Order:
    orders.update(order.customer_id, order.id, {
        "items": [i.model_dump() for i in order.items],
        "delivery_charge": order.delivery_charge,
        "grand_total": order.grand_total,
    })
    return order


def edit_order(orders: OrderStore, customer_id: str, order_id: str,
               items: Optional[list] = None, delivery_charge: Optional[float] = None) -> Order:
    """Replace the line items and/or delivery charge and store the recomputed total."""
    current = orders.get(customer_id, order_id)
    update = {}
    if items is not None:
        try:
            lines = [i if isinstance(i, LineItem) else LineItem.model_validate(i) for i in items]
        except SchemaError as exc:
            raise ValidationError(f"invalid line item: {exc.errors()[0]['msg']}") from exc
        update["items"] = [i for i in lines if i.quantity > 0]
        if not update["items"]:
            raise ValidationError("An order needs at least one item; delete it instead.")
    if delivery_charge is not None:
        delivery_charge = _number(delivery_charge, "delivery charge")
        if delivery_charge < 0:
            raise ValidationError("Delivery charge cannot be negative.")
        update["delivery_charge"] = delivery_charge
    if not update:
        return current
    edited = Order.model_validate({**current.model_dump(exclude={"grand_total"}), **update})
    log.info("order %s/%s edited, total now %s", customer_id, order_id, edited.grand_total)
    return _write(orders, edited)


def remove_line_item(orders: OrderStore, customer_id: str, order_id: str, index: int) -> Optional[Order]:
    """Drop one line; an order left without lines is deleted and None is returned."""
    current = orders.get(customer_id, order_id)
    if index < 0 or index >= len(current.items):
        raise ValidationError(f"order has no item #{index}")
    remaining = current.items[:index] + current.items[index + 1:]
    if not remaining:
        orders.remove_order(customer_id, order_id)
        return None
    return _write(orders, current.model_copy(update={"items": remaining}))


def customer_history(orders: Iterable[Order], date=None, search: str = "") -> dict[str, dict]:
    """customer_id -> {name, meals: {meal_type: [Order]}, total}"""
    term = (search or "").strip().lower()
    out: dict[str, dict] = {}
    for o in orders:
        if date is not None and o.date.isoformat() != str(date):
            continue
        if o.meal_type not in HISTORY_MEALS:
            continue
        if term and term not in (o.customer_name or "").lower():
            continue
        entry = out.setdefault(o.customer_id, {
            "name": o.customer_name, "meals": {m: [] for m in HISTORY_MEALS}, "total": 0.0})
        entry["meals"][o.meal_type].append(o)
        entry["total"] = _money(entry["total"] + o.grand_total)
    return out
