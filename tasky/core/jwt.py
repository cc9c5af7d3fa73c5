# tasky/core/jwt.py
from __future__ import annotations

from datetime import timedelta
from typing import Any, Dict
from uuid import UUID

from jose import jwt, JWTError

from tasky.core.clock import utcnow
from tasky.core.config import settings


def create_access_token(user_id: UUID | str, expires_delta: timedelta | None = None) -> str:
    """
    user_id로 서명된 Access Token을 발급한다. 서버에는 아무 상태도 남기지 않는다.
    """
    now = utcnow()
    expire = now + (expires_delta or timedelta(days=settings.access_token_expire_days))
    payload: Dict[str, Any] = {
        "sub": str(user_id),
        "typ": "access",
        "iat": int(now.timestamp()),
        "exp": int(expire.timestamp()),
    }
    return jwt.encode(payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def verify_access_token(token: str) -> Dict[str, Any]:
    """
    유효한 Access Token이면 payload(dict)를 반환,
    서명 불일치·만료·type 오류가 나면 JWTError를 던진다.
    """
    payload = jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    if payload.get("typ") != "access":
        raise JWTError("Invalid token type")
    if not payload.get("sub"):
        raise JWTError("Missing sub")
    return payload

