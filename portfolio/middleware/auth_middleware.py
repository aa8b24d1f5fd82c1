# portfolio/middleware/auth_middleware.py
from __future__ import annotations

from typing import Any, Dict, Optional

import jwt  # PyJWT
from fastapi import Depends, HTTPException
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from portfolio.config import JWT_ALG, JWT_SECRET

# Tolerate small clock drift (seconds)
JWT_LEEWAY_SEC = 30

# NOTE: auto_error=False so we can consistently return 401 on problems
security = HTTPBearer(auto_error=False)

# ---------- Token decoding / validation ----------
def decode_token(token: str) -> Dict[str, Any]:
    """
    Decode & validate token. Raises 401 on any auth failure.
    """
    try:
        return jwt.decode(token, JWT_SECRET, algorithms=[JWT_ALG], leeway=JWT_LEEWAY_SEC)
    except jwt.ExpiredSignatureError:
        raise HTTPException(status_code=401, detail="Token expired")
    except jwt.PyJWTError:
        raise HTTPException(status_code=401, detail="Invalid token")

# ---------- FastAPI dependencies ----------
def require_claims(credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)) -> Dict[str, Any]:
    """
    Strict auth dependency. Returns the validated claims dict.
    Always raises 401 (not 403) if header is missing/invalid.
    """
    if credentials is None or not credentials.scheme or credentials.scheme.lower() != "bearer":
        raise HTTPException(status_code=401, detail="Missing or invalid Authorization header")

    token = (credentials.credentials or "").strip()
    if not token:
        raise HTTPException(status_code=401, detail="Missing token")

    return decode_token(token)

def require_admin(claims: Dict[str, Any] = Depends(require_claims)) -> Dict[str, Any]:
    if claims.get("sub") != "admin":
        raise HTTPException(status_code=401, detail="Invalid token subject")
    return claims

__all__ = ["JWT_LEEWAY_SEC", "decode_token", "require_claims", "require_admin"]
