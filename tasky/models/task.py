from enum import Enum
from sqlmodel import SQLModel, Field
from uuid import UUID, uuid4
from datetime import datetime
from typing import Optional

from tasky.core.clock import utcnow
from tasky.models.types import UTCDateTime


class Priority(str, Enum):
    IMPORTANT = "IMPORTANT"
    URGENT = "URGENT"
    VERY_URGENT = "VERY_URGENT"


class Task(SQLModel, table=True):
    __tablename__ = "task"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    owner_id: UUID = Field(foreign_key="user.id", index=True)
    title: str
    description: str
    priority: Priority = Field(default=Priority.IMPORTANT)
    deadline: Optional[datetime] = Field(default=None, sa_type=UTCDateTime)
    is_completed: bool = Field(default=False)
    is_deleted: bool = Field(default=False, index=True)
    date_created: datetime = Field(default_factory=utcnow, sa_type=UTCDateTime, index=True)
    date_updated: datetime = Field(default_factory=utcnow, sa_type=UTCDateTime)


class TaskStatus(str, Enum):
    """List views over the lifecycle flags."""

    ACTIVE = "active"  # not deleted, not completed
    COMPLETED = "completed"  # not deleted, completed
    DELETED = "deleted"  # in trash, either completion state
