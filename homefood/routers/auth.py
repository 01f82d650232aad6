from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from homefood.schemas.common import Token
from homefood.util.security import create_token, verify_pw
from homefood.models.core import User
from homefood.db import get_db
from homefood.errors import AuthorizationError

router = APIRouter(prefix="/auth", tags=["auth"])

@router.post("/login", response_model=Token)
def login(email: str, password: str, db: Session = Depends(get_db)):
    user = db.query(User).filter(User.email == email.strip().lower()).first()
    if not user or not user.active or not verify_pw(user.pass_hash, password):
        raise AuthorizationError("Invalid credentials")
    return Token(access_token=create_token(user.id))
