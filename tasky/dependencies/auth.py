from uuid import UUID

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer

from tasky.services import session_issuer

# auto_error=False so a missing header goes through the same AuthError path
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/token", auto_error=False)


def get_current_user(token: str | None = Depends(oauth2_scheme)) -> UUID:
    """Strict auth dependency; raises AuthError when no/invalid token."""
    return session_issuer.verify(token)
