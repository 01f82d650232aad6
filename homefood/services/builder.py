import datetime as dt
import logging
import math
from dataclasses import dataclass, field
from typing import Optional

from homefood.config import settings
from homefood.errors import ValidationError, NotFoundError
from homefood.schemas.catalog import MenuSnapshot
from homefood.schemas.orders import LineItem, Order, Totals
from homefood.services.billing import compute_totals
from homefood.services.customers import CustomerDirectory
from homefood.services.menus import MenuBook, day_key
from homefood.services.order_store import OrderStore

log = logging.getLogger(__name__)


@dataclass
class BuilderOptions:
    allow_custom_items: bool = True
    increment_on_reselect: bool = False
    default_delivery_charge: float = 30.0
    delivery_charge_presets: list[float] = field(default_factory=lambda: [0.0, 30.0, 60.0])

    @classmethod
    def from_settings(cls) -> "BuilderOptions":
        return cls(
            allow_custom_items=settings.ALLOW_CUSTOM_ITEMS,
            increment_on_reselect=settings.INCREMENT_ON_RESELECT,
            default_delivery_charge=settings.DEFAULT_DELIVERY_CHARGE,
            delivery_charge_presets=list(settings.DELIVERY_CHARGE_PRESETS),
        )


def _number(value, what: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
        raise ValidationError(f"{what} must be a number")
    return float(value)


class OrderBuilder:
    """Draft of one customer's order for a single date and meal.

    Prices come from the saved menu for that date, not the live catalog.
    ``confirm`` persists the order first; the dashboard fold and bill export
    that follow are best-effort and never undo the stored order.
    """

    def __init__(self, menus: MenuBook, customers: CustomerDirectory, orders: OrderStore,
                 dashboards=None, exporter=None, options: Optional[BuilderOptions] = None):
        self.menus = menus
        self.customers = customers
        self.orders = orders
        self.dashboards = dashboards
        self.exporter = exporter
        self.options = options or BuilderOptions.from_settings()
        self.date: Optional[dt.date] = None
        self.meal_type: Optional[str] = None
        self.snapshot: Optional[MenuSnapshot] = None
        self._reset()

    def _reset(self) -> None:
        self.items: list[LineItem] = []
        self.delivery_charge = float(self.options.default_delivery_charge)

    # ── context ────────────────────────────────────────────────────────────
    def begin(self, date, meal_type: str) -> MenuSnapshot:
        if not meal_type:
            raise ValidationError("Select a meal type.")
        snapshot = self.menus.get_snapshot(date, meal_type)
        if (self.meal_type, self.date) != (meal_type, snapshot.date):
            self._reset()
        self.date, self.meal_type, self.snapshot = snapshot.date, meal_type, snapshot
        return snapshot

    def _index(self, name: str) -> Optional[int]:
        for idx, item in enumerate(self.items):
            if item.name == name:
                return idx
        return None

    # ── selection ──────────────────────────────────────────────────────────
    def select_item(self, meal_type: str, name: str, quantity: int,
                    subcategory: Optional[str] = None) -> None:
        """Set the quantity of a menu item; ``quantity <= 0`` removes it.

        The snapshot is flat, so ``subcategory`` only documents where the
        item came from.
        """
        if self.snapshot is None:
            raise ValidationError("Pick a date and meal before selecting items.")
        if meal_type != self.meal_type:
            self.begin(self.date, meal_type)
        if isinstance(quantity, bool) or not isinstance(quantity, int):
            raise ValidationError("quantity must be a whole number")
        if quantity <= 0:
            self.remove_item(name)
            return
        entry = self.snapshot.price_of(name)
        if entry is None:
            raise NotFoundError(f"{name} is not on the {self.meal_type} menu for {self.date}")

        idx = self._index(name)
        if idx is None:
            self.items.append(LineItem(name=entry.name, unit_price=entry.price,
                                       quantity=quantity, localized_name=entry.localized_name))
            return
        current = self.items[idx]
        new_qty = current.quantity + quantity if self.options.increment_on_reselect else quantity
        self.items[idx] = current.model_copy(update={"quantity": new_qty})

    def remove_item(self, name: str) -> None:
        self.items = [i for i in self.items if i.name != name]

    def add_custom_item(self, name: Optional[str], price, localized_name: Optional[str] = None,
                        quantity: int = 1) -> LineItem:
        if not self.options.allow_custom_items:
            raise ValidationError("Custom items are not allowed here.")
        name = (name or "").strip()
        if not name or price is None or price == "":
            raise ValidationError("Enter both name and price for the custom item.")
        price = _number(price, "price")
        if price < 0:
            raise ValidationError("Custom item price cannot be negative.")
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
            raise ValidationError("quantity must be a positive whole number")
        if self._index(name) is not None:
            raise ValidationError(f"{name} is already in this order.")
        item = LineItem(name=name, unit_price=price, quantity=quantity,
                        localized_name=localized_name or None, is_custom=True)
        self.items.append(item)
        return item

    def set_delivery_charge(self, amount) -> None:
        amount = _number(amount, "delivery charge")
        if amount < 0:
            raise ValidationError("Delivery charge cannot be negative.")
        self.delivery_charge = amount

    def compute_totals(self) -> Totals:
        return Totals(**compute_totals(self.items, self.delivery_charge))

    # ── confirmation ───────────────────────────────────────────────────────
    def confirm(self, customer_id: Optional[str], date, meal_type: Optional[str]) -> Order:
        if not customer_id:
            raise ValidationError("Select a customer.")
        if not date or not meal_type:
            raise ValidationError("Select a date and meal type.")
        if self.snapshot is None or day_key(date) != self.date.isoformat() or meal_type != self.meal_type:
            raise ValidationError("The selection was priced for a different date or meal.")
        lines = [i for i in self.items if i.quantity > 0]
        if not lines:
            raise ValidationError("Add at least one item before confirming.")
        customer = self.customers.get(customer_id)

        order = Order(customer_id=customer_id, customer_name=customer.name, date=self.date,
                      meal_type=self.meal_type, items=lines, delivery_charge=self.delivery_charge)
        order_id = self.orders.append(customer_id, order)
        order = order.model_copy(update={"id": order_id})
        log.info("order %s confirmed for %s (%s %s), total %s",
                 order_id, customer.name, order.date, order.meal_type, order.grand_total)

        if self.dashboards is not None:
            try:
                self.dashboards.fold_in_order(order)
            except Exception:
                log.exception("order %s saved but could not be added to the dashboards", order_id)
        if self.exporter is not None:
            try:
                self.exporter.export(order)
            except Exception:
                log.exception("order %s saved but the bill image could not be written", order_id)

        self._reset()
        return order
