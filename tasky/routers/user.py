from uuid import UUID

from fastapi import APIRouter, Depends, File, UploadFile
from sqlmodel import Session

from tasky.core.config import settings
from tasky.db.session import get_session
from tasky.dependencies.auth import get_current_user
from tasky.schemas.user import ProfileUpdate, UserMessageResponse, UserRead, UserResponse
from tasky.services import credential_store, profile_service
from tasky.services.asset_host import AssetHost, get_asset_host

user_router = APIRouter(prefix="/user", tags=["user"])


@user_router.get("", response_model=UserResponse)
def get_me(
    db: Session = Depends(get_session),
    user_id: UUID = Depends(get_current_user),
):
    user = credential_store.get_active_user(db, user_id)
    return UserResponse(user=UserRead.model_validate(user))


@user_router.patch("", response_model=UserMessageResponse)
def update_me(
    body: ProfileUpdate,
    db: Session = Depends(get_session),
    user_id: UUID = Depends(get_current_user),
):
    user = credential_store.update_profile(db, user_id, body.model_dump(exclude_none=True))
    return UserMessageResponse(
        message="Profile updated successfully",
        user=UserRead.model_validate(user),
    )


@user_router.post("/avatar", response_model=UserMessageResponse)
async def upload_avatar(
    avatar: UploadFile = File(...),
    db: Session = Depends(get_session),
    user_id: UUID = Depends(get_current_user),
    host: AssetHost = Depends(get_asset_host),
):
    # one byte past the limit is enough to know it is too large
    data = await avatar.read(settings.avatar_max_bytes + 1)
    user = await profile_service.upload_avatar(
        db,
        host,
        user_id,
        data,
        avatar.content_type,
        filename=avatar.filename or "avatar",
    )
    return UserMessageResponse(
        message="Avatar uploaded successfully",
        user=UserRead.model_validate(user),
    )


@user_router.delete("/avatar", response_model=UserMessageResponse)
async def remove_avatar(
    db: Session = Depends(get_session),
    user_id: UUID = Depends(get_current_user),
    host: AssetHost = Depends(get_asset_host),
):
    user = await profile_service.remove_avatar(db, host, user_id)
    return UserMessageResponse(
        message="Avatar removed successfully",
        user=UserRead.model_validate(user),
    )
