from sqlmodel import SQLModel, Field
from uuid import UUID, uuid4
from datetime import datetime
from typing import Optional

from tasky.core.clock import utcnow
from tasky.models.types import UTCDateTime


class User(SQLModel, table=True):
    __tablename__ = "user"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    first_name: str
    last_name: str
    username: str = Field(index=True, unique=True)
    email_address: str = Field(index=True, unique=True)
    password_hash: str = Field(nullable=False)
    avatar: str = Field(default="")  # 외부 에셋 호스트 URL, 없으면 ""
    date_joined: datetime = Field(default_factory=utcnow, sa_type=UTCDateTime)
    last_profile_update: Optional[datetime] = Field(default=None, sa_type=UTCDateTime)
    is_deleted: bool = Field(default=False)
