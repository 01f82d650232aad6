import logging
import math
from typing import Iterable, Optional

from homefood.errors import ValidationError
from homefood.schemas.orders import Order, PaymentStatus, DeliveryRow
from homefood.services.billing import _money
from homefood.services.menus import day_key
from homefood.services.order_store import OrderStore

log = logging.getLogger(__name__)

PAYMENT_MODES = ("online", "offline")


def amount_due(order: Order) -> float:
    return _money(order.grand_total - order.payment_received)


def derive_status(order: Order) -> PaymentStatus:
    due = amount_due(order)
    if due == 0:
        return PaymentStatus.paid
    if due < 0:
        return PaymentStatus.overpaid
    return PaymentStatus.pending


def record_payment(orders: OrderStore, customer_id: str, order_id: str, amount_received,
                   mode: Optional[str] = None, delivered: Optional[bool] = None) -> Order:
    """Adds ``amount_received`` to what the order has been paid so far."""
    if isinstance(amount_received, bool) or not isinstance(amount_received, (int, float)):
        raise ValidationError("Enter a valid payment amount.")
    if not math.isfinite(amount_received) or amount_received <= 0:
        raise ValidationError("Enter a valid payment amount.")
    if mode is not None and mode not in PAYMENT_MODES:
        raise ValidationError(f"unknown payment mode {mode!r}")

    order = orders.get(customer_id, order_id)
    patch = {
        "payment_received": _money(order.payment_received + amount_received),
        "payment_mode": mode if mode is not None else order.payment_mode,
        "delivered": delivered if delivered is not None else order.delivered,
    }
    orders.update(customer_id, order_id, patch)
    log.info("payment of %s recorded on %s/%s (%s)", amount_received, customer_id, order_id, patch["payment_mode"])
    return order.model_copy(update=patch)


def delivery_board(orders: Iterable[Order], date, meal_type: Optional[str] = None,
                   status: str = "all", search: str = "") -> dict[str, list[DeliveryRow]]:
    """Orders of one day grouped by meal type, for the deliveries screen."""
    day = day_key(date)
    if status != "all" and status not in PaymentStatus.__members__:
        raise ValidationError(f"unknown status filter {status!r}")
    term = (search or "").strip().lower()

    board: dict[str, list[DeliveryRow]] = {}
    for o in orders:
        if o.date.isoformat() != day:
            continue
        if meal_type and o.meal_type != meal_type:
            continue
        if term and term not in (o.customer_name or "").lower():
            continue
        st = derive_status(o)
        if status != "all" and st.value != status:
            continue
        board.setdefault(o.meal_type, []).append(DeliveryRow(
            customer_id=o.customer_id, order_id=o.id or "",
            customer_name=o.customer_name, grand_total=o.grand_total,
            paid=o.payment_received, due=amount_due(o), status=st,
            payment_mode=o.payment_mode, delivered=o.delivered,
        ))
    for rows in board.values():
        rows.sort(key=lambda r: r.customer_name.lower())
    return board
