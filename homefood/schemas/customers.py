from typing import Optional

from pydantic import BaseModel


class CustomerIn(BaseModel):
    name: str
    phone: str
    address: Optional[str] = None


class CustomerPatch(BaseModel):
    name: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None


class Customer(CustomerIn):
    id: str
