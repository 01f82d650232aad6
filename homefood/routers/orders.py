import datetime as dt

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from homefood.db import get_db
from homefood.deps import (
    require_auth, get_menus, get_customers, get_orders, get_dashboards,
    get_exporter, get_builder_options,
)
from homefood.schemas.orders import Order, OrderDraftIn, OrderPatchIn, Totals
from homefood.services import history
from homefood.services.builder import OrderBuilder, BuilderOptions
from homefood.services.customers import CustomerDirectory
from homefood.services.menus import MenuBook
from homefood.services.order_store import OrderStore
from homefood.util.audit import audit

router = APIRouter(prefix="/orders", tags=["orders"])

def _draft(body: OrderDraftIn, builder: OrderBuilder) -> OrderBuilder:
    builder.begin(body.date, body.meal_type)
    for s in body.selections:
        builder.select_item(body.meal_type, s.name, s.quantity, s.subcategory)
    for c in body.custom_items:
        builder.add_custom_item(c.name, c.price, c.localized_name, c.quantity)
    if body.delivery_charge is not None:
        builder.set_delivery_charge(body.delivery_charge)
    return builder


def _builder(menus: MenuBook = Depends(get_menus),
             customers: CustomerDirectory = Depends(get_customers),
             orders: OrderStore = Depends(get_orders),
             options: BuilderOptions = Depends(get_builder_options)) -> OrderBuilder:
    return OrderBuilder(menus, customers, orders, dashboards=get_dashboards(),
                        exporter=get_exporter(), options=options)


@router.get("/delivery-charges")
def delivery_charges(options: BuilderOptions = Depends(get_builder_options), sub: str = Depends(require_auth)):
    """Default charge and the quick-pick amounts offered when drafting an order."""
    return {"default": options.default_delivery_charge, "presets": options.delivery_charge_presets}


@router.post("/quote", response_model=Totals)
def quote(body: OrderDraftIn, builder: OrderBuilder = Depends(_builder), sub: str = Depends(require_auth)):
    """Price a draft without saving anything."""
    return _draft(body, builder).compute_totals()


@router.post("/", response_model=Order)
def place_order(body: OrderDraftIn, builder: OrderBuilder = Depends(_builder), sub: str = Depends(require_auth)):
    return _draft(body, builder).confirm(body.customer_id, body.date, body.meal_type)


@router.get("/", response_model=list[Order])
def list_orders(customer_id: str | None = None, date: dt.date | None = None, meal_type: str | None = None,
                orders: OrderStore = Depends(get_orders), sub: str = Depends(require_auth)):
    rows = orders.list_for_customer(customer_id) if customer_id else orders.list_all()
    if date is not None:
        rows = [o for o in rows if o.date == date]
    if meal_type:
        rows = [o for o in rows if o.meal_type == meal_type]
    return sorted(rows, key=lambda o: (o.date, o.meal_type, o.customer_name.lower()))


@router.get("/{customer_id}/{order_id}", response_model=Order)
def get_order(customer_id: str, order_id: str,
              orders: OrderStore = Depends(get_orders), sub: str = Depends(require_auth)):
    return orders.get(customer_id, order_id)


@router.patch("/{customer_id}/{order_id}", response_model=Order)
def edit_order(customer_id: str, order_id: str, body: OrderPatchIn,
               orders: OrderStore = Depends(get_orders),
               db: Session = Depends(get_db), sub: str = Depends(require_auth)):
    before = orders.get(customer_id, order_id)
    items = [i.model_dump() for i in body.items] if body.items is not None else None
    after = history.edit_order(orders, customer_id, order_id, items=items,
                               delivery_charge=body.delivery_charge)
    audit(db, sub, "order", f"{customer_id}/{order_id}", "edit",
          before=before.model_dump(mode="json"), after=after.model_dump(mode="json"))
    return after


@router.delete("/{customer_id}/{order_id}/items/{index}")
def remove_item(customer_id: str, order_id: str, index: int,
                orders: OrderStore = Depends(get_orders),
                db: Session = Depends(get_db), sub: str = Depends(require_auth)):
    before = orders.get(customer_id, order_id)
    after = history.remove_line_item(orders, customer_id, order_id, index)
    audit(db, sub, "order", f"{customer_id}/{order_id}", "remove_item" if after else "delete",
          before=before.model_dump(mode="json"), after=after.model_dump(mode="json") if after else None)
    if after is None:
        return {"deleted": True, "order": None}
    return {"deleted": False, "order": after}


@router.delete("/{customer_id}/{order_id}")
def delete_order(customer_id: str, order_id: str, reason: str | None = None,
                 orders: OrderStore = Depends(get_orders),
                 db: Session = Depends(get_db), sub: str = Depends(require_auth)):
    before = orders.get(customer_id, order_id)
    orders.remove_order(customer_id, order_id)
    audit(db, sub, "order", f"{customer_id}/{order_id}", "delete",
          before=before.model_dump(mode="json"), reason=reason)
    return {"deleted": 1}


@router.delete("/{customer_id}")
def delete_orders(customer_id: str, meal_type: str | None = None, date: dt.date | None = None,
                  reason: str | None = None, orders: OrderStore = Depends(get_orders),
                  db: Session = Depends(get_db), sub: str = Depends(require_auth)):
    """Delete one meal's orders (optionally for one date) or every order of the customer."""
    if meal_type:
        n = orders.remove_orders_for_meal_type(customer_id, meal_type, date)
        action = f"delete_{meal_type}"
    else:
        n = orders.remove_all_orders(customer_id)
        action = "delete_all"
    audit(db, sub, "order", customer_id, action, after={"deleted": n, "date": date}, reason=reason)
    return {"deleted": n}
