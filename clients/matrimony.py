# clients/matrimony.py
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx
from pydantic import BaseModel

import settings
from core.state_machine import skip_endpoint, step_endpoint

logger = logging.getLogger(__name__)

SKIP_ALL_PATH = "/profile/skip-all"
USER_INFO_PATH = "/user-info"


class MatrimonyAPIError(Exception):
    def __init__(self, message: str, status_code: Optional[int] = None, payload: Any = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.payload = payload


def extract_message(body: Any) -> str:
    """
    Best-effort message out of the API's `message` field, which shows up as
    a string, a list, {"error": [...]} or {"success": [...]}.
    """
    if not isinstance(body, dict):
        return ""
    msg = body.get("message")
    if isinstance(msg, str):
        return msg.strip()
    if isinstance(msg, list):
        return ", ".join(str(m) for m in msg if m)
    if isinstance(msg, dict):
        for key in ("error", "errors", "success"):
            val = msg.get(key)
            if isinstance(val, list) and val:
                return str(val[0])
            if isinstance(val, str) and val.strip():
                return val.strip()
        for val in msg.values():
            if isinstance(val, list) and val:
                return str(val[0])
            if isinstance(val, str) and val.strip():
                return val.strip()
    return ""


class Envelope(BaseModel):
    status: str = "error"
    data: Any = None
    message: Any = None

    @property
    def ok(self) -> bool:
        return (self.status or "").lower() == "success"

    def error_text(self, default: str) -> str:
        return extract_message({"message": self.message}) or default

    @classmethod
    def from_body(cls, body: Any) -> "Envelope":
        if not isinstance(body, dict):
            return cls(status="error", data=body)
        return cls(
            status=str(body.get("status") or "error"),
            data=body.get("data"),
            message=body.get("message"),
        )


class MatrimonyClient:
    """
    Thin async client over the matrimonial REST API.
    One httpx.AsyncClient per call; no retries.
    """

    def __init__(
        self,
        base_url: str = settings.MATRIMONY_API_BASE_URL,
        token: Optional[str] = None,
        timeout: float = settings.MATRIMONY_API_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.timeout = timeout
        self._transport = transport

    def _headers(self) -> Dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                headers=self._headers(),
                timeout=self.timeout,
                transport=self._transport,
            ) as client_http:
                resp = await client_http.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            logger.warning("%s %s failed: %r", method, path, e)
            raise MatrimonyAPIError(f"Request failed: {e}") from e

        try:
            body = resp.json()
        except ValueError:
            body = None

        if resp.status_code >= 400:
            message = extract_message(body) or f"HTTP {resp.status_code}"
            logger.warning("%s %s -> %s: %s", method, path, resp.status_code, message)
            raise MatrimonyAPIError(message, status_code=resp.status_code, payload=body)

        return body

    async def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        return await self._request("GET", path, params=params)

    async def post(self, path: str, json: Optional[Dict[str, Any]] = None) -> Any:
        if json is None:
            return await self._request("POST", path)
        return await self._request("POST", path, json=json)

    # -----------------------
    # Profile endpoints
    # -----------------------
    async def user_info(self) -> Envelope:
        return Envelope.from_body(await self.get(USER_INFO_PATH))

    async def submit_step(self, step: int, payload: Dict[str, Any]) -> Envelope:
        return Envelope.from_body(await self.post(step_endpoint(step), json=payload))

    async def skip_step(self, step: int) -> Envelope:
        return Envelope.from_body(await self.post(skip_endpoint(step)))

    async def skip_all(self) -> Envelope:
        return Envelope.from_body(await self.post(SKIP_ALL_PATH))
