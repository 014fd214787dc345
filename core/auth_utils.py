# core/auth_utils.py
from __future__ import annotations

import hashlib
from typing import Optional

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

# -------------------------------------------------------------------
# Token forwarding
# -------------------------------------------------------------------
# The remote API issues and checks the bearer token; this service only
# forwards it and keys wizard sessions on its hash.

bearer_scheme = HTTPBearer(auto_error=False)


def session_key(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def get_bearer_token(
    creds: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> str:
    """
    Returns the caller's API token.

    - No Authorization header -> 401
    - Not Bearer -> 401
    - Empty token -> 401
    """
    if creds is None:
        raise HTTPException(status_code=401, detail="Missing Authorization header")
    if creds.scheme.lower() != "bearer":
        raise HTTPException(status_code=401, detail="Invalid auth scheme")
    token = (creds.credentials or "").strip()
    if not token:
        raise HTTPException(status_code=401, detail="Invalid token")
    return token
