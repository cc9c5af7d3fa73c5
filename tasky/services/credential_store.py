"""
User identity persistence: registration, lookups, password and profile edits.

Usernames and emails are matched case-sensitively, exactly as stored.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional
from uuid import UUID

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from tasky import errors
from tasky.core.clock import utcnow
from tasky.core.security import hash_password, verify_password
from tasky.models.user import User
from tasky.schemas.user import MIN_PASSWORD_LENGTH

log = logging.getLogger(__name__)

PROFILE_FIELDS = ("first_name", "last_name", "username", "email_address")


def _commit_unique(db: Session, message: str) -> None:
    try:
        db.commit()
    except IntegrityError:
        # unique index caught a collision the pre-check raced past
        db.rollback()
        raise errors.DuplicateError(message)


def create_user(db: Session, fields: Mapping[str, Any]) -> User:
    username = fields["username"]
    email_address = fields["email_address"]

    existing = db.exec(
        select(User).where(
            or_(User.username == username, User.email_address == email_address)
        )
    ).first()
    if existing:
        raise errors.DuplicateError("User with this email or username already exists")

    user = User(
        first_name=fields["first_name"],
        last_name=fields["last_name"],
        username=username,
        email_address=email_address,
        password_hash=hash_password(fields["password"]),
    )
    db.add(user)
    _commit_unique(db, "User with this email or username already exists")
    db.refresh(user)
    log.info("registered user %s", user.id)
    return user


def find_by_identifier(db: Session, identifier: str) -> Optional[User]:
    """Username OR email, soft-deleted users excluded."""
    stmt = select(User).where(
        or_(User.username == identifier, User.email_address == identifier),
        User.is_deleted == False,  # noqa: E712
    )
    return db.exec(stmt).first()


def get_active_user(db: Session, user_id: UUID) -> User:
    user = db.get(User, user_id)
    if user is None or user.is_deleted:
        raise errors.NotFoundError("User not found")
    return user


def update_password(
    db: Session, user_id: UUID, current_password: str, new_password: str
) -> None:
    if len(new_password or "") < MIN_PASSWORD_LENGTH:
        raise errors.ValidationError(
            f"Your new password must be at least {MIN_PASSWORD_LENGTH} characters"
        )

    user = get_active_user(db, user_id)
    if not verify_password(current_password, user.password_hash):
        raise errors.IncorrectPasswordError()

    user.password_hash = hash_password(new_password)
    db.add(user)
    db.commit()
    log.info("password changed for user %s", user_id)


def update_profile(db: Session, user_id: UUID, fields: Mapping[str, Any]) -> User:
    user = get_active_user(db, user_id)
    changes = {k: fields[k] for k in PROFILE_FIELDS if fields.get(k)}

    clauses = []
    if "username" in changes:
        clauses.append(User.username == changes["username"])
    if "email_address" in changes:
        clauses.append(User.email_address == changes["email_address"])
    if clauses:
        clash = db.exec(
            select(User).where(or_(*clauses), User.id != user_id)
        ).first()
        if clash:
            raise errors.DuplicateError("Username or email already exists")

    for key, value in changes.items():
        setattr(user, key, value)
    user.last_profile_update = utcnow()
    db.add(user)
    _commit_unique(db, "Username or email already exists")
    db.refresh(user)
    return user
