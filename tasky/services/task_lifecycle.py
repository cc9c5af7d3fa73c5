"""
Task lifecycle transitions.

    active  <->  completed          (toggle while not deleted)
      |              |
      +--> trash <---+              (soft delete keeps is_completed)
             |
             +--> restored to its previous list
    any state --> purged

Absent, foreign and wrong-state tasks all raise the same NotFoundError so
callers cannot discover other users' task ids.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Optional
from uuid import UUID

from sqlmodel import Session

from tasky import errors
from tasky.models.task import Priority, Task, TaskStatus
from tasky.services import task_store

log = logging.getLogger(__name__)

_UNSET: Any = object()


def _require_text(value: Optional[str], field: str) -> str:
    trimmed = (value or "").strip()
    if not trimmed:
        raise errors.ValidationError(
            "Validation failed",
            errors=[{"field": field, "message": f"{field.capitalize()} is required"}],
        )
    return trimmed


def _transition(
    db: Session,
    owner_id: UUID,
    task_id: UUID,
    *,
    deleted: bool,
    values: dict[str, Any],
    not_found: str = "Task not found",
) -> Task:
    task = task_store.conditional_update(
        db, owner_id, task_id, deleted=deleted, values=values
    )
    if task is None:
        raise errors.NotFoundError(not_found)
    return task


def create_task(
    db: Session,
    owner_id: UUID,
    *,
    title: str,
    description: str,
    priority: Optional[Priority] = None,
    deadline: Optional[datetime] = None,
) -> Task:
    task = Task(
        owner_id=owner_id,
        title=_require_text(title, "title"),
        description=_require_text(description, "description"),
        priority=priority or Priority.IMPORTANT,
        deadline=deadline,
    )
    task = task_store.insert(db, task)
    log.info("task %s created by %s", task.id, owner_id)
    return task


def get_task(db: Session, owner_id: UUID, task_id: UUID) -> Task:
    task = task_store.find(db, owner_id, task_id, deleted=False)
    if task is None:
        raise errors.NotFoundError("Task not found")
    return task


def list_tasks(
    db: Session, owner_id: UUID, status: TaskStatus = TaskStatus.ACTIVE
) -> list[Task]:
    return task_store.list_by_status(db, owner_id, status)


def mark_complete(db: Session, owner_id: UUID, task_id: UUID) -> Task:
    return _transition(db, owner_id, task_id, deleted=False, values={"is_completed": True})


def mark_incomplete(db: Session, owner_id: UUID, task_id: UUID) -> Task:
    return _transition(db, owner_id, task_id, deleted=False, values={"is_completed": False})


def edit_task(
    db: Session,
    owner_id: UUID,
    task_id: UUID,
    *,
    title: str,
    description: str,
    priority: Optional[Priority] = None,
    deadline: Optional[datetime] = _UNSET,
) -> Task:
    """Priority None keeps the current value; deadline None clears it."""
    values: dict[str, Any] = {
        "title": _require_text(title, "title"),
        "description": _require_text(description, "description"),
    }
    if priority is not None:
        values["priority"] = priority
    if deadline is not _UNSET:
        values["deadline"] = deadline
    return _transition(db, owner_id, task_id, deleted=False, values=values)


def soft_delete(db: Session, owner_id: UUID, task_id: UUID) -> Task:
    task = _transition(db, owner_id, task_id, deleted=False, values={"is_deleted": True})
    log.info("task %s moved to trash", task_id)
    return task


def restore(db: Session, owner_id: UUID, task_id: UUID) -> Task:
    return _transition(
        db,
        owner_id,
        task_id,
        deleted=True,
        values={"is_deleted": False},
        not_found="Task not found in trash",
    )


def purge(db: Session, owner_id: UUID, task_id: UUID) -> None:
    if not task_store.erase(db, owner_id, task_id):
        raise errors.NotFoundError("Task not found")
    log.info("task %s permanently deleted", task_id)
