# portfolio/client/http.py
from __future__ import annotations

import logging
from typing import Any, Callable, Optional

import httpx

from portfolio import config

log = logging.getLogger("portfolio.api")

API_PREFIX = "/api/v1"


class ApiError(Exception):
    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class ApiClient:
    """Thin wrapper over httpx.AsyncClient for the portfolio API.

    `token` is a callable so the bearer token is read on every request
    (it changes on login/logout).
    """

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        *,
        base_url: str = config.PORTFOLIO_API_URL,
        token: Optional[Callable[[], Optional[str]]] = None,
    ):
        self._client = client or httpx.AsyncClient(base_url=base_url, timeout=config.HTTP_TIMEOUT_SECS)
        self._token = token or (lambda: None)

    def _headers(self) -> dict:
        headers = {"Accept": "application/json"}
        tok = self._token()
        if tok:
            headers["Authorization"] = f"Bearer {tok}"
        return headers

    async def request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        """Send a request; transport errors and non-2xx responses raise ApiError."""
        url = API_PREFIX + path
        try:
            r = await self._client.request(method, url, headers=self._headers(), **kwargs)
        except httpx.HTTPError as e:
            log.warning("%s %s failed: %s", method, url, e)
            raise ApiError(f"{method} {url} failed: {e}") from e
        if r.status_code >= 400:
            detail = r.text[:200]
            log.warning("%s %s -> %s %s", method, url, r.status_code, detail)
            raise ApiError(f"{method} {url} -> {r.status_code}: {detail}", status_code=r.status_code)
        return r

    async def aclose(self) -> None:
        await self._client.aclose()
