import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from homefood.db import get_db
from homefood.config import settings
from homefood.util.security import hash_pw
from homefood.models.core import User

router = APIRouter(prefix="/admin", tags=["admin"])
log = logging.getLogger(__name__)

@router.post("/dev-bootstrap")
def dev_bootstrap(db: Session = Depends(get_db)):
    if settings.APP_ENV != "dev":
        raise HTTPException(403, detail="Not allowed")

    u = db.query(User).first()
    if not u:
        u = User(
            name="Admin",
            email="admin@example.com",
            pass_hash=hash_pw("admin"),
            active=True,
        )
        db.add(u)
        db.commit()
        log.info("bootstrap admin user created")
    return {"user_id": u.id, "email": u.email}
