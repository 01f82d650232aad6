import datetime as dt
from typing import Optional

from pydantic import BaseModel, Field

BREAKFAST, LUNCH, DINNER, BAKERY = "breakfast", "lunch", "dinner", "bakery"
BASE_MEAL_TYPES = (BREAKFAST, LUNCH, DINNER)
# lunch and dinner catalogs are split further by dish kind
SUBCATEGORY_MEALS = (LUNCH, DINNER)
SUBCATEGORIES = ("daal", "curry", "pickle", "sambar", "others")


class CatalogItem(BaseModel):
    name: str = Field(min_length=1)
    localized_name: str = ""
    price: float = Field(ge=0)


class MenuEntry(BaseModel):
    name: str
    price: float = Field(ge=0)
    localized_name: Optional[str] = None


class MenuSnapshot(BaseModel):
    date: dt.date
    meal_type: str
    items: list[MenuEntry] = []

    def price_of(self, name: str) -> Optional[MenuEntry]:
        for e in self.items:
            if e.name == name:
                return e
        return None


class MenuPick(BaseModel):
    name: str
    subcategory: Optional[str] = None


class CustomMenuItem(BaseModel):
    name: Optional[str] = None
    localized_name: Optional[str] = None
    price: Optional[float] = Field(default=None, ge=0)


class CustomMenu(BaseModel):
    title: str = Field(min_length=1)
    localized_title: Optional[str] = None
    order_by: Optional[str] = None
    delivery_from: Optional[str] = None
    delivery_to: Optional[str] = None
    items: list[CustomMenuItem] = []


class MenuWindow(BaseModel):
    title: str
    localized_title: Optional[str] = None
    order_by: Optional[str] = None
    delivery_from: Optional[str] = None
    delivery_to: Optional[str] = None


class MenuSaveIn(BaseModel):
    picks: dict[str, list[MenuPick]] = {}
    custom_menu: Optional[CustomMenu] = None
