# conftest.py
import os
import random
import string
import tempfile

import pytest

# Settings are read on import, so the environment has to be ready first.
_TMP = tempfile.mkdtemp(prefix="homefood-test-")
os.environ["APP_ENV"] = "dev"
os.environ.setdefault("APP_SECRET", "test-secret")
os.environ["DB_URL"] = f"sqlite:///{os.path.join(_TMP, 'homefood.db')}"
os.environ["BILL_EXPORT_DIR"] = os.path.join(_TMP, "bills")

from sqlalchemy.orm import sessionmaker  # noqa: E402

from homefood.db import Base, make_engine  # noqa: E402
import homefood.models  # noqa: E402,F401
from homefood.services.builder import OrderBuilder, BuilderOptions  # noqa: E402
from homefood.services.catalog import Catalog  # noqa: E402
from homefood.services.customers import CustomerDirectory  # noqa: E402
from homefood.services.dashboards import SessionDashboards  # noqa: E402
from homefood.services.menus import MenuBook  # noqa: E402
from homefood.services.order_store import OrderStore  # noqa: E402
from homefood.store import MemoryDocumentStore, MemoryKeyValueStore, SqlDocumentStore  # noqa: E402


def jprint(step, r):
    """Helper to print response and assert on failure."""
    assert 200 <= r.status_code < 300, f"{step} -> {r.status_code}: {r.text}"
    return r.json() if r.headers.get("content-type", "").startswith("application/json") else r.text


# ── In-process services ─────────────────────────────────────────────────────
@pytest.fixture
def session_factory():
    engine = make_engine("sqlite://")
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
    engine.dispose()


@pytest.fixture(params=["memory", "sql"])
def doc_store(request, session_factory):
    if request.param == "memory":
        return MemoryDocumentStore()
    return SqlDocumentStore(session_factory)


@pytest.fixture
def store():
    return MemoryDocumentStore()


@pytest.fixture
def kv():
    return MemoryKeyValueStore()


@pytest.fixture
def catalog(store):
    return Catalog(store)


@pytest.fixture
def menus(store, catalog):
    return MenuBook(store, catalog)


@pytest.fixture
def customers(store):
    return CustomerDirectory(store)


@pytest.fixture
def orders(store):
    return OrderStore(store)


@pytest.fixture
def dashboards(kv):
    return SessionDashboards(kv)


@pytest.fixture
def options():
    return BuilderOptions(allow_custom_items=True, increment_on_reselect=False,
                          default_delivery_charge=30.0)


@pytest.fixture
def builder(menus, customers, orders, dashboards, options):
    return OrderBuilder(menus, customers, orders, dashboards=dashboards, options=options)


# ── HTTP API ────────────────────────────────────────────────────────────────
@pytest.fixture(scope="session")
def base_url():
    return ""


@pytest.fixture(scope="session")
def client():
    from fastapi.testclient import TestClient
    from homefood.main import app
    with TestClient(app) as c:
        yield c


@pytest.fixture(scope="session")
def auth_headers(client, base_url):
    # ensure server is up
    r = client.get(f"{base_url}/healthz")
    assert r.status_code == 200, f"/healthz failed: {r.text}"

    # seed dev admin
    r = client.post(f"{base_url}/admin/dev-bootstrap")
    assert r.status_code == 200, f"/admin/dev-bootstrap failed: {r.text}"

    r = client.post(f"{base_url}/auth/login", params={"email": "admin@example.com", "password": "admin"})
    assert r.status_code == 200, f"/auth/login failed: {r.text}"
    tok = r.json()["access_token"]
    return {"Authorization": f"Bearer {tok}"}


@pytest.fixture(scope="session")
def rng_suffix():
    return "".join(random.choices(string.ascii_lowercase + string.digits, k=6))


@pytest.fixture(scope="session")
def bill_dir():
    return os.environ["BILL_EXPORT_DIR"]
