import datetime as dt
from typing import Optional

from pydantic import BaseModel


class AggregationFilters(BaseModel):
    date: Optional[dt.date] = None
    meal_type: Optional[str] = None
    customer: str = ""


class PackagedItem(BaseModel):
    quantity: int = 0
    unit_price: float = 0
    amount: float = 0


class CustomerCharges(BaseModel):
    delivery_charge: float = 0
    grand_total: float = 0


class AggregationResult(BaseModel):
    per_item_cooking_totals: dict[str, dict[str, int]] = {}
    per_customer_packaging: dict[str, dict[str, dict[str, PackagedItem]]] = {}
    customer_totals: dict[str, dict[str, CustomerCharges]] = {}
    meal_totals: dict[str, float] = {}
    delivery_totals: dict[str, float] = {}
    unbucketed_total: float = 0
    order_count: int = 0
    grand_total: float = 0


class DashboardsOut(BaseModel):
    cooking: dict[str, dict[str, int]] = {}
    packaging: dict[str, dict[str, dict[str, int]]] = {}
    folded_orders: int = 0
