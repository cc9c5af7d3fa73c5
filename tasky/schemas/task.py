from __future__ import annotations

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import field_validator

from tasky.core.clock import as_utc
from tasky.models.task import Priority
from tasky.schemas.base import CamelModel, require_text


class TaskCreate(CamelModel):
    title: str
    description: str
    priority: Optional[Priority] = None
    deadline: Optional[datetime] = None

    @field_validator("title")
    @classmethod
    def _title(cls, v: str) -> str:
        return require_text(v, "Title is required")

    @field_validator("description")
    @classmethod
    def _description(cls, v: str) -> str:
        return require_text(v, "Description is required")

    @field_validator("deadline")
    @classmethod
    def _deadline(cls, v: Optional[datetime]) -> Optional[datetime]:
        return as_utc(v)


class TaskUpdate(TaskCreate):
    """
    Same contract as create. An explicit ``"deadline": null`` clears the
    deadline; an omitted deadline or priority is left unchanged.
    """


class TaskRead(CamelModel):
    id: UUID
    owner_id: UUID
    title: str
    description: str
    priority: Priority
    deadline: Optional[datetime] = None
    is_completed: bool
    is_deleted: bool
    date_created: datetime
    date_updated: datetime


class TaskResponse(CamelModel):
    task: TaskRead


class TaskMessageResponse(CamelModel):
    message: str
    task: TaskRead


class TaskListResponse(CamelModel):
    tasks: List[TaskRead]
