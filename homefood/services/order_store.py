import logging
from typing import Any, Callable, Optional

from pydantic import ValidationError as SchemaError

from homefood.errors import ValidationError, NotFoundError
from homefood.schemas.orders import Order
from homefood.services.menus import day_key
from homefood.store.base import DocumentStore, Subscription

log = logging.getLogger(__name__)

ROOT = "order_history"


def _orders_path(customer_id: str) -> str:
    if not customer_id:
        raise ValidationError("customer is required")
    return f"{ROOT}/{customer_id}/orders"


def _parse(customer_id: str, order_id: str, raw: Any) -> Optional[Order]:
    if not isinstance(raw, dict):
        log.warning("skipping malformed order %s/%s", customer_id, order_id)
        return None
    try:
        return Order.model_validate({**raw, "id": order_id, "customer_id": customer_id})
    except SchemaError:
        log.warning("skipping malformed order %s/%s", customer_id, order_id)
        return None


def _flatten(tree: Any) -> list[Order]:
    out = []
    for cid, node in (tree or {}).items():
        orders = node.get("orders") if isinstance(node, dict) else None
        for oid, raw in (orders or {}).items():
            o = _parse(cid, oid, raw)
            if o is not None:
                out.append(o)
    return out


class OrderStore:
    """Confirmed orders under ``order_history/{customer}/orders/{order}``.

    Writes do not recompute ``grand_total``; callers that edit items or the
    delivery charge must send the recomputed total in the patch.
    """

    def __init__(self, store: DocumentStore):
        self.store = store

    def append(self, customer_id: str, order: Order) -> str:
        doc = order.model_copy(update={"customer_id": customer_id}).to_document()
        return self.store.push(_orders_path(customer_id), doc)

    def get(self, customer_id: str, order_id: str) -> Order:
        raw = self.store.get(f"{_orders_path(customer_id)}/{order_id}")
        order = _parse(customer_id, order_id, raw) if raw is not None else None
        if order is None:
            raise NotFoundError("order not found")
        return order

    def list_for_customer(self, customer_id: str) -> list[Order]:
        return _flatten({customer_id: self.store.get(f"{ROOT}/{customer_id}")})

    def list_all(self) -> list[Order]:
        return _flatten(self.store.get(ROOT))

    def update(self, customer_id: str, order_id: str, patch: dict) -> None:
        path = f"{_orders_path(customer_id)}/{order_id}"
        if self.store.get(path) is None:
            raise NotFoundError("order not found")
        self.store.update(path, patch)

    def remove_order(self, customer_id: str, order_id: str) -> None:
        path = f"{_orders_path(customer_id)}/{order_id}"
        if self.store.get(path) is None:
            raise NotFoundError("order not found")
        self.store.remove(path)
        log.info("order %s/%s deleted", customer_id, order_id)

    def remove_orders_for_meal_type(self, customer_id: str, meal_type: str, date=None) -> int:
        if not meal_type:
            raise ValidationError("meal type is required")
        day = day_key(date) if date is not None else None
        doomed = [o for o in self.list_for_customer(customer_id)
                  if o.meal_type == meal_type and (day is None or o.date.isoformat() == day)]
        if doomed:
            self.store.update(_orders_path(customer_id), {o.id: None for o in doomed})
        log.info("deleted %d %s orders for %s", len(doomed), meal_type, customer_id)
        return len(doomed)

    def remove_all_orders(self, customer_id: str) -> int:
        count = len((self.store.get(_orders_path(customer_id)) or {}))
        self.store.remove(f"{ROOT}/{customer_id}")
        log.info("deleted all %d orders for %s", count, customer_id)
        return count

    def subscribe_all(self, callback: Callable[[list[Order]], None]) -> Subscription:
        return self.store.subscribe(ROOT, lambda tree: callback(_flatten(tree)))

    def subscribe_customer(self, customer_id: str, callback: Callable[[list[Order]], None]) -> Subscription:
        _orders_path(customer_id)
        return self.store.subscribe(f"{ROOT}/{customer_id}",
                                    lambda node: callback(_flatten({customer_id: node})))
