"""
Avatar upload/removal.

The old remote asset is removed best-effort: if the delete fails the new
avatar is still stored and the orphaned asset is only logged. Upload and
cleanup are sequential, not atomic.
"""

from __future__ import annotations

import logging
from typing import Optional
from uuid import UUID

from sqlmodel import Session
from starlette.concurrency import run_in_threadpool

from tasky import errors
from tasky.core.clock import utcnow
from tasky.core.config import settings
from tasky.models.user import User
from tasky.services.asset_host import AssetHost, public_id_from_url
from tasky.services.credential_store import get_active_user

log = logging.getLogger(__name__)

ALLOWED_IMAGE_TYPES = {"image/jpeg", "image/jpg", "image/png", "image/gif"}


def validate_image(data: bytes, content_type: Optional[str], max_bytes: Optional[int] = None) -> str:
    limit = max_bytes or settings.avatar_max_bytes
    ctype = (content_type or "").split(";", 1)[0].strip().lower()
    if ctype not in ALLOWED_IMAGE_TYPES:
        raise errors.ValidationError("Only image files are allowed!")
    if not data:
        raise errors.ValidationError("No file uploaded")
    if len(data) > limit:
        raise errors.ValidationError(
            f"File too large (max {limit // (1024 * 1024)}MB)"
        )
    return ctype


def _store_avatar(db: Session, user: User, url: str) -> User:
    # DB 작업은 동기라서 threadpool에서 돌린다
    user.avatar = url
    user.last_profile_update = utcnow()
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


async def _discard_remote(host: AssetHost, url: str) -> None:
    public_id = public_id_from_url(url)
    if not public_id:
        return
    try:
        await host.destroy(public_id)
    except errors.UpstreamError as exc:
        log.warning("could not delete old avatar %s: %s", public_id, exc.message)


async def upload_avatar(
    db: Session,
    host: AssetHost,
    user_id: UUID,
    data: bytes,
    content_type: Optional[str],
    filename: str = "avatar",
) -> User:
    ctype = validate_image(data, content_type)
    user = await run_in_threadpool(get_active_user, db, user_id)

    asset = await host.upload(data, content_type=ctype, filename=filename)

    if user.avatar:
        await _discard_remote(host, user.avatar)

    user = await run_in_threadpool(_store_avatar, db, user, asset.url)
    log.info("avatar updated for user %s", user_id)
    return user


async def remove_avatar(db: Session, host: AssetHost, user_id: UUID) -> User:
    user = await run_in_threadpool(get_active_user, db, user_id)
    if user.avatar:
        await _discard_remote(host, user.avatar)

    return await run_in_threadpool(_store_avatar, db, user, "")
