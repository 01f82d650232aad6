from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from homefood.db import get_db
from homefood.deps import require_auth, get_customers
from homefood.schemas.customers import Customer, CustomerIn, CustomerPatch
from homefood.schemas.common import Msg
from homefood.services.customers import CustomerDirectory
from homefood.util.audit import audit

router = APIRouter(prefix="/customers", tags=["customers"])

@router.post("/", response_model=Customer)
def create_customer(body: CustomerIn, customers: CustomerDirectory = Depends(get_customers),
                    sub: str = Depends(require_auth)):
    return customers.create(body.name, body.phone, body.address)

@router.get("/", response_model=list[Customer])
def search_customers(q: str = "", customers: CustomerDirectory = Depends(get_customers),
                     sub: str = Depends(require_auth)):
    return customers.search(q)

@router.get("/{customer_id}", response_model=Customer)
def get_customer(customer_id: str, customers: CustomerDirectory = Depends(get_customers),
                 sub: str = Depends(require_auth)):
    return customers.get(customer_id)

@router.patch("/{customer_id}", response_model=Customer)
def update_customer(customer_id: str, body: CustomerPatch,
                    customers: CustomerDirectory = Depends(get_customers),
                    sub: str = Depends(require_auth)):
    return customers.update(customer_id, body.model_dump(exclude_unset=True))

@router.delete("/{customer_id}", response_model=Msg)
def delete_customer(customer_id: str, customers: CustomerDirectory = Depends(get_customers),
                    db: Session = Depends(get_db), sub: str = Depends(require_auth)):
    # orders are kept; remove them separately through /orders/{customer_id}
    gone = customers.delete(customer_id)
    audit(db, sub, "customer", customer_id, "delete", before=gone.model_dump())
    return Msg(message=f"{gone.name} deleted")
