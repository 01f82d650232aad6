from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from homefood.db import get_db
from homefood.deps import require_auth, get_dashboards
from homefood.schemas.reports import DashboardsOut
from homefood.services.dashboards import SessionDashboards
from homefood.util.audit import audit

router = APIRouter(prefix="/session", tags=["session"])

def _view(d: SessionDashboards) -> DashboardsOut:
    return DashboardsOut(cooking=d.cooking_totals(), packaging=d.packaging_totals(),
                         folded_orders=d.folded_count)

@router.get("/dashboards", response_model=DashboardsOut)
def dashboards(d: SessionDashboards = Depends(get_dashboards), sub: str = Depends(require_auth)):
    return _view(d)

@router.post("/clear", response_model=DashboardsOut)
def clear(d: SessionDashboards = Depends(get_dashboards),
          db: Session = Depends(get_db), sub: str = Depends(require_auth)):
    before = _view(d)
    d.clear()
    audit(db, sub, "session", "dashboards", "clear", before=before.model_dump())
    return _view(d)
