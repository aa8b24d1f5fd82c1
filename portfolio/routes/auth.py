# portfolio/routes/auth.py
import datetime as dt
import logging

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from portfolio.config import JWT_EXPIRE_SECONDS
from portfolio.middleware.auth_middleware import require_admin
from portfolio.security import create_access_token, verify_admin_password

log = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Auth"])


class LoginPayload(BaseModel):
    password: str = ""

def _iso(ts: int) -> str:
    return dt.datetime.fromtimestamp(ts, tz=dt.timezone.utc).isoformat()

@router.post("/login")
def login(body: LoginPayload):
    if not body.password:
        raise HTTPException(status_code=400, detail="Password required")
    if not verify_admin_password(body.password):
        log.warning("Admin login rejected")
        raise HTTPException(status_code=401, detail="Invalid password")
    token = create_access_token()
    expiry = dt.datetime.now(dt.timezone.utc) + dt.timedelta(seconds=JWT_EXPIRE_SECONDS)
    return {"success": True, "token": token, "token_type": "bearer", "expiry": expiry.isoformat()}

@router.get("/session")
def session(claims: dict = Depends(require_admin)):
    return {"loginTime": claims.get("loginTime"), "expiry": _iso(claims["exp"])}
