import copy
import logging
import threading

from homefood.errors import ValidationError
from homefood.schemas.orders import Order
from homefood.store.keyvalue import KeyValueStore

log = logging.getLogger(__name__)

STATE_KEY = "session_dashboards"


def _empty() -> dict:
    return {"cooking": {}, "packaging": {}, "folded_order_ids": []}


class SessionDashboards:
    """Running cooking/packaging tallies for the current shift.

    Not derived from the order store: totals only grow through
    ``fold_in_order`` and only reset through ``clear``. Each order id is
    folded at most once, and the state is saved after every change.
    """

    def __init__(self, kv: KeyValueStore, key: str = STATE_KEY):
        self.kv = kv
        self.key = key
        self._lock = threading.Lock()
        state = kv.load(key, _empty()) or _empty()
        self._cooking: dict[str, dict[str, int]] = state.get("cooking") or {}
        self._packaging: dict[str, dict[str, dict[str, int]]] = state.get("packaging") or {}
        self._folded: set[str] = set(state.get("folded_order_ids") or [])

    def _save(self, cooking: dict, packaging: dict, folded: set[str]) -> None:
        self.kv.save(self.key, {
            "cooking": cooking,
            "packaging": packaging,
            "folded_order_ids": sorted(folded),
        })
        self._cooking, self._packaging, self._folded = cooking, packaging, folded

    def fold_in_order(self, order: Order) -> bool:
        """Returns False when the order was already folded in."""
        if not order.id:
            raise ValidationError("only persisted orders can be added to the dashboards")
        with self._lock:
            if order.id in self._folded:
                log.warning("order %s already on the dashboards, ignoring", order.id)
                return False

            # work on copies; the live tallies only change once the save succeeds
            new_cooking = copy.deepcopy(self._cooking)
            new_packaging = copy.deepcopy(self._packaging)
            cooking = new_cooking.setdefault(order.meal_type, {})
            packed = new_packaging.setdefault(order.meal_type, {}).setdefault(
                order.customer_name or order.customer_id, {})
            for item in order.items:
                if item.quantity <= 0:
                    continue
                cooking[item.name] = cooking.get(item.name, 0) + item.quantity
                packed[item.name] = packed.get(item.name, 0) + item.quantity
            self._save(new_cooking, new_packaging, self._folded | {order.id})
        log.info("order %s folded into %s dashboards", order.id, order.meal_type)
        return True

    def clear(self) -> None:
        with self._lock:
            self._save({}, {}, set())
        log.info("session dashboards cleared")

    def cooking_totals(self) -> dict[str, dict[str, int]]:
        return {m: dict(items) for m, items in self._cooking.items()}

    def packaging_totals(self) -> dict[str, dict[str, dict[str, int]]]:
        return {m: {c: dict(items) for c, items in per_cust.items()}
                for m, per_cust in self._packaging.items()}

    @property
    def folded_count(self) -> int:
        return len(self._folded)
