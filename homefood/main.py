# homefood/main.py
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from homefood.config import settings
from homefood.logging_config import configure_logging
from homefood.middleware import RequestIdMiddleware
from homefood.db import Base, engine
from homefood.errors import HomefoodError
import homefood.models  # noqa: F401  (registers tables)

from homefood.routers import auth, admin, catalog, menus, customers, orders, reports, deliveries, session

configure_logging(settings.LOG_LEVEL)
log = logging.getLogger(__name__)

app = FastAPI(title="Homefood Back-office API", version="0.1.0")

@app.on_event("startup")
def init_db():
    Base.metadata.create_all(bind=engine)
    log.info("database ready (%s)", settings.APP_ENV)

@app.exception_handler(HomefoodError)
async def homefood_error(request: Request, exc: HomefoodError):
    if exc.status_code >= 500:
        log.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})

# Middlewares
app.add_middleware(RequestIdMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth.router)
app.include_router(admin.router)
app.include_router(catalog.router)
app.include_router(menus.router)
app.include_router(customers.router)
app.include_router(orders.router)
app.include_router(reports.router)
app.include_router(deliveries.router)
app.include_router(session.router)

@app.get("/healthz")
def healthz():
    return {"ok": True}
