"""Session helpers (issue bearer tokens, read them back from requests)."""
from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from messagely.core.config import Settings, get_settings

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"

_bearer = HTTPBearer(auto_error=False)


def issue_session(username: str, *, settings: Optional[Settings] = None) -> str:
    """Sign a token carrying the username claim."""
    settings = settings or get_settings()
    now = datetime.now(timezone.utc)
    claims = {"username": username, "iat": now}
    if settings.session_ttl_seconds > 0:
        claims["exp"] = now + timedelta(seconds=settings.session_ttl_seconds)
    return jwt.encode(claims, settings.secret_key, algorithm=ALGORITHM)


def decode_session(token: str, *, settings: Optional[Settings] = None) -> Optional[str]:
    """Return the username a token was issued for, or None if it does not verify."""
    if not token:
        return None
    settings = settings or get_settings()
    try:
        claims = jwt.decode(token, settings.secret_key, algorithms=[ALGORITHM])
    except jwt.PyJWTError as exc:
        logger.debug("Rejected bearer token: %s", exc)
        return None
    username = claims.get("username")
    return username if isinstance(username, str) and username else None


def current_username(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer),
) -> str:
    """FastAPI dependency: the username of the logged-in caller."""
    username = decode_session(credentials.credentials) if credentials else None
    if not username:
        raise HTTPException(status.HTTP_401_UNAUTHORIZED, "Unauthorized", headers={"WWW-Authenticate": "Bearer"})
    return username


def ensure_correct_user(username: str, caller: str = Depends(current_username)) -> str:
    """FastAPI dependency: the path username must be the caller's own."""
    if caller != username:
        raise HTTPException(status.HTTP_401_UNAUTHORIZED, "Unauthorized")
    return caller
