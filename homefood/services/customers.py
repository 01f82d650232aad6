import logging
from typing import Optional

from pydantic import ValidationError as SchemaError

from homefood.errors import ValidationError, NotFoundError
from homefood.schemas.customers import Customer
from homefood.store.base import DocumentStore

log = logging.getLogger(__name__)


class CustomerDirectory:
    def __init__(self, store: DocumentStore):
        self.store = store

    def create(self, name: str, phone: str, address: Optional[str] = None) -> Customer:
        name, phone = (name or "").strip(), (phone or "").strip()
        if not name or not phone:
            raise ValidationError("Name and phone are required.")
        body = {"name": name, "phone": phone, "address": (address or "").strip() or None}
        cid = self.store.push("customers", body)
        log.info("customer %s created (%s)", cid, name)
        return Customer(id=cid, **body)

    def get(self, customer_id: str) -> Customer:
        raw = self.store.get(f"customers/{customer_id}") if customer_id else None
        if not isinstance(raw, dict):
            raise NotFoundError("customer not found")
        return Customer(id=customer_id, **{k: raw.get(k) for k in ("name", "phone", "address")})

    def update(self, customer_id: str, fields: dict) -> Customer:
        current = self.get(customer_id)
        patch = {k: v for k, v in fields.items() if k in ("name", "phone", "address")}
        for k in ("name", "phone"):
            if k in patch and not (patch[k] or "").strip():
                raise ValidationError("Name and phone are required.")
        merged = current.model_copy(update=patch)
        self.store.update(f"customers/{customer_id}", merged.model_dump(exclude={"id"}))
        return merged

    def delete(self, customer_id: str) -> Customer:
        # orders under order_history are left in place
        current = self.get(customer_id)
        self.store.remove(f"customers/{customer_id}")
        log.info("customer %s deleted", customer_id)
        return current

    def list_all(self) -> list[Customer]:
        out = []
        for cid, raw in (self.store.get("customers") or {}).items():
            try:
                out.append(Customer(id=cid, **raw))
            except (SchemaError, TypeError):
                log.warning("skipping malformed customer record %s", cid)
        return sorted(out, key=lambda c: c.name.lower())

    def search(self, term: str = "") -> list[Customer]:
        term = (term or "").strip().lower()
        return [c for c in self.list_all()
                if not term or term in c.name.lower() or term in c.phone.lower()]
