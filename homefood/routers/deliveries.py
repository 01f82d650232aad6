import datetime as dt

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from homefood.db import get_db
from homefood.deps import require_auth, get_orders
from homefood.schemas.orders import Order, PaymentIn, DeliveryRow
from homefood.services.order_store import OrderStore
from homefood.services.reconciliation import delivery_board, record_payment
from homefood.util.audit import audit

router = APIRouter(prefix="/deliveries", tags=["deliveries"])

@router.get("/", response_model=dict[str, list[DeliveryRow]])
def board(date: dt.date, meal_type: str | None = None, status: str = "all", search: str = "",
          orders: OrderStore = Depends(get_orders), sub: str = Depends(require_auth)):
    return delivery_board(orders.list_all(), date, meal_type, status, search)

@router.post("/{customer_id}/{order_id}/payment", response_model=Order)
def pay(customer_id: str, order_id: str, body: PaymentIn,
        orders: OrderStore = Depends(get_orders),
        db: Session = Depends(get_db), sub: str = Depends(require_auth)):
    after = record_payment(orders, customer_id, order_id, body.amount, body.mode, body.delivered)
    audit(db, sub, "order", f"{customer_id}/{order_id}", "payment",
          after={"amount": body.amount, "payment_received": after.payment_received,
                 "payment_mode": after.payment_mode, "delivered": after.delivered})
    return after
