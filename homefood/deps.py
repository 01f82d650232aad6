from functools import lru_cache

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
import jwt

from homefood.config import settings
from homefood.errors import AuthorizationError
from homefood.db import SessionLocal
from homefood.services.bill import BillImageExporter
from homefood.services.builder import BuilderOptions
from homefood.services.catalog import Catalog
from homefood.services.customers import CustomerDirectory
from homefood.services.dashboards import SessionDashboards
from homefood.services.menus import MenuBook
from homefood.services.order_store import OrderStore
from homefood.store import SqlDocumentStore, SqlKeyValueStore, DocumentStore
from homefood.util.security import decode_token

auth_scheme = HTTPBearer(auto_error=False)

def require_auth(creds: HTTPAuthorizationCredentials | None = Depends(auth_scheme)) -> str:
    if not creds:
        raise AuthorizationError("Not authenticated")
    try:
        return decode_token(creds.credentials)
    except (jwt.PyJWTError, KeyError) as exc:
        raise AuthorizationError("Invalid token") from exc

# ── Shared services (one per process, all backed by the same database) ─────
@lru_cache
def get_store() -> DocumentStore:
    return SqlDocumentStore(SessionLocal)

@lru_cache
def get_dashboards() -> SessionDashboards:
    return SessionDashboards(SqlKeyValueStore(SessionLocal))

def get_catalog(store: DocumentStore = Depends(get_store)) -> Catalog:
    return Catalog(store)

def get_menus(store: DocumentStore = Depends(get_store)) -> MenuBook:
    return MenuBook(store, Catalog(store))

def get_customers(store: DocumentStore = Depends(get_store)) -> CustomerDirectory:
    return CustomerDirectory(store)

def get_orders(store: DocumentStore = Depends(get_store)) -> OrderStore:
    return OrderStore(store)

def get_exporter() -> BillImageExporter | None:
    if not settings.BILL_EXPORT_DIR:
        return None
    return BillImageExporter(settings.BILL_EXPORT_DIR, settings.BUSINESS_NAME)

def get_builder_options() -> BuilderOptions:
    return BuilderOptions.from_settings()
