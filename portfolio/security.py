# portfolio/security.py
import datetime as dt

import jwt
from passlib.context import CryptContext

from portfolio.config import ADMIN_PASSWORD_HASH, JWT_ALG, JWT_EXPIRE_SECONDS, JWT_SECRET

_pwd = CryptContext(schemes=["bcrypt"], deprecated="auto")

def hash_password(plain: str) -> str:
    return _pwd.hash(plain)

def verify_password(plain: str, hashed: str) -> bool:
    if not hashed:
        return False
    try:
        return _pwd.verify(plain, hashed)
    except ValueError:
        # malformed hash in the environment
        return False

def verify_admin_password(plain: str) -> bool:
    return verify_password(plain, ADMIN_PASSWORD_HASH)

def create_access_token(sub: str = "admin", seconds: int = JWT_EXPIRE_SECONDS) -> str:
    now = dt.datetime.now(dt.timezone.utc)
    payload = {
        "sub": sub,
        "loginTime": now.isoformat(),
        "iat": int(now.timestamp()),
        "exp": int((now + dt.timedelta(seconds=seconds)).timestamp()),
    }
    return jwt.encode(payload, JWT_SECRET, algorithm=JWT_ALG)
