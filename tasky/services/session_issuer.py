from __future__ import annotations

import logging
from uuid import UUID

from jose import JWTError
from sqlmodel import Session

from tasky import errors
from tasky.core.jwt import create_access_token, verify_access_token
from tasky.core.security import verify_password
from tasky.models.user import User
from tasky.services.credential_store import find_by_identifier

log = logging.getLogger(__name__)


def login(db: Session, identifier: str, password: str) -> tuple[str, User]:
    """
    Check credentials and issue a bearer token.
    Unknown identifier and wrong password fail the same way.
    """
    user = find_by_identifier(db, identifier)
    if user is None or not verify_password(password, user.password_hash):
        raise errors.AuthError("Invalid credentials")
    return create_access_token(user.id), user


def verify(token: str | None) -> UUID:
    if not token:
        raise errors.AuthError("Access token required")
    try:
        payload = verify_access_token(token)
        return UUID(str(payload["sub"]))
    except (JWTError, ValueError) as exc:
        log.debug("rejected token: %s", exc)
        raise errors.AuthError("Invalid or expired token")
