import datetime as dt

from fastapi import APIRouter, Depends

from homefood.deps import require_auth, get_orders
from homefood.schemas.reports import AggregationFilters, AggregationResult
from homefood.services.aggregation import aggregate
from homefood.services.history import customer_history
from homefood.services.order_store import OrderStore

router = APIRouter(prefix="/reports", tags=["reports"])

@router.get("/summary", response_model=AggregationResult)
def summary(date: dt.date | None = None, meal_type: str | None = None, customer: str = "",
            orders: OrderStore = Depends(get_orders), sub: str = Depends(require_auth)):
    """Cooking, packaging and revenue totals for the filtered orders."""
    filters = AggregationFilters(date=date, meal_type=meal_type, customer=customer)
    return aggregate(orders.list_all(), filters)

@router.get("/history")
def history(date: dt.date | None = None, search: str = "",
            orders: OrderStore = Depends(get_orders), sub: str = Depends(require_auth)):
    return customer_history(orders.list_all(), date=date, search=search)
