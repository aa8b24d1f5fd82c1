# portfolio/client/auth.py
from __future__ import annotations

import datetime as dt
import logging
from typing import Dict, Optional

import jwt

from portfolio.client.http import ApiClient, ApiError
from portfolio.client.local_cache import LocalCache
from portfolio.constants import TOKEN_KEY

log = logging.getLogger(__name__)


class AdminSession:
    """Holds the admin bearer token in the local cache.

    Claims are read without signature verification; the server verifies
    the token on every protected call.
    """

    def __init__(self, cache: LocalCache):
        self.cache = cache

    def token(self) -> Optional[str]:
        return self.cache.get(TOKEN_KEY)

    def _claims(self) -> Optional[Dict]:
        tok = self.token()
        if not tok:
            return None
        try:
            return jwt.decode(tok, options={"verify_signature": False})
        except jwt.PyJWTError:
            return None

    def is_authenticated(self) -> bool:
        claims = self._claims()
        if not claims or "exp" not in claims:
            return False
        return claims["exp"] > dt.datetime.now(dt.timezone.utc).timestamp()

    def session_info(self) -> Optional[Dict[str, str]]:
        claims = self._claims()
        if not claims:
            return None
        expiry = dt.datetime.fromtimestamp(claims["exp"], tz=dt.timezone.utc).isoformat() if "exp" in claims else None
        return {"loginTime": claims.get("loginTime"), "expiry": expiry}

    async def login(self, api: ApiClient, password: str) -> bool:
        try:
            r = await api.request("POST", "/auth/login", json={"password": password})
            body = r.json()
        except (ApiError, ValueError) as e:
            log.error("Login error: %s", e)
            return False
        if body.get("success") and body.get("token"):
            self.cache.set(TOKEN_KEY, body["token"])
            return True
        return False

    def logout(self) -> None:
        self.cache.remove(TOKEN_KEY)
