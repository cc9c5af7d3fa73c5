from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlmodel import Session

from tasky.db.session import get_session
from tasky.dependencies.auth import get_current_user
from tasky.schemas.base import MessageResponse
from tasky.schemas.user import (
    LoginRequest,
    LoginResponse,
    OAuthTokenResponse,
    PasswordUpdate,
    UserMessageResponse,
    UserRead,
    UserRegister,
)
from tasky.services import credential_store, session_issuer

auth_router = APIRouter(prefix="/auth", tags=["auth"])


@auth_router.post(
    "/register",
    response_model=UserMessageResponse,
    status_code=status.HTTP_201_CREATED,
)
def register(body: UserRegister, db: Session = Depends(get_session)):
    user = credential_store.create_user(db, body.model_dump())
    return UserMessageResponse(
        message="User registered successfully",
        user=UserRead.model_validate(user),
    )


@auth_router.post("/login", response_model=LoginResponse)
def login(body: LoginRequest, db: Session = Depends(get_session)):
    token, user = session_issuer.login(db, body.identifier, body.password)
    return LoginResponse(token=token, user=UserRead.model_validate(user))


@auth_router.post("/token", response_model=OAuthTokenResponse)
def login_for_access_token(
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: Session = Depends(get_session),
):
    """OAuth2 password flow for the interactive docs' Authorize button."""
    token, _ = session_issuer.login(db, form_data.username, form_data.password)
    return OAuthTokenResponse(access_token=token)


@auth_router.post("/logout", response_model=MessageResponse)
def logout(user_id: UUID = Depends(get_current_user)):
    # Stateless tokens: nothing to revoke server-side, the client drops its copy.
    return MessageResponse(message="Logged out successfully")


@auth_router.patch("/password", response_model=MessageResponse)
def change_password(
    body: PasswordUpdate,
    db: Session = Depends(get_session),
    user_id: UUID = Depends(get_current_user),
):
    credential_store.update_password(db, user_id, body.current_password, body.new_password)
    return MessageResponse(message="Password updated successfully")
