import datetime as dt
from enum import Enum
from typing import Optional, Literal

from pydantic import BaseModel, Field, computed_field

from homefood.services.billing import _money

PaymentModeLiteral = Literal["online", "offline"]


class PaymentStatus(str, Enum):
    paid = "paid"
    overpaid = "overpaid"
    pending = "pending"


class LineItem(BaseModel):
    name: str = Field(min_length=1)
    unit_price: float = Field(ge=0)
    quantity: int = Field(ge=0)
    localized_name: Optional[str] = None
    is_custom: bool = False

    @property
    def amount(self) -> float:
        return self.unit_price * self.quantity


class Order(BaseModel):
    """A confirmed order. ``grand_total`` is always derived, never stored on its own."""
    id: Optional[str] = None
    customer_id: str = Field(min_length=1)
    customer_name: str = ""
    date: dt.date
    meal_type: str = Field(min_length=1)
    items: list[LineItem] = []
    delivery_charge: float = Field(default=0, ge=0)
    payment_received: float = Field(default=0, ge=0)
    payment_mode: PaymentModeLiteral = "offline"
    delivered: bool = False

    @property
    def subtotal(self) -> float:
        return _money(sum(i.amount for i in self.items))

    @computed_field
    @property
    def grand_total(self) -> float:
        return _money(sum(i.amount for i in self.items) + self.delivery_charge)

    def to_document(self) -> dict:
        # the store key is the id; the body carries the derived total for readers
        return self.model_dump(mode="json", exclude={"id"})


class Totals(BaseModel):
    subtotal: float
    delivery_charge: float
    grand_total: float


# ── HTTP payloads ───────────────────────────────────────────────────────────
class SelectionIn(BaseModel):
    name: str
    quantity: int
    subcategory: Optional[str] = None


class CustomItemIn(BaseModel):
    name: Optional[str] = None
    price: Optional[float] = None
    localized_name: Optional[str] = None
    quantity: int = 1


class OrderDraftIn(BaseModel):
    customer_id: Optional[str] = None
    date: dt.date
    meal_type: str
    selections: list[SelectionIn] = []
    custom_items: list[CustomItemIn] = []
    delivery_charge: Optional[float] = None


class LineItemIn(BaseModel):
    name: str
    unit_price: float
    quantity: int
    localized_name: Optional[str] = None
    is_custom: bool = False


class OrderPatchIn(BaseModel):
    items: Optional[list[LineItemIn]] = None
    delivery_charge: Optional[float] = None


class PaymentIn(BaseModel):
    amount: float
    mode: Optional[PaymentModeLiteral] = None
    delivered: Optional[bool] = None


class DeliveryRow(BaseModel):
    customer_id: str
    order_id: str
    customer_name: str
    grand_total: float
    paid: float
    due: float
    status: PaymentStatus
    payment_mode: str
    delivered: bool
