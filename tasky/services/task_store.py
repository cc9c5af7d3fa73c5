"""
Owner-scoped task persistence.

Every read and write carries ``owner_id`` in its WHERE clause. Writes are a
single conditional UPDATE/DELETE, so the ownership and lifecycle check is
evaluated atomically by the database; a zero row count means the predicate
did not hold.
"""

from __future__ import annotations

from typing import Any, Optional
from uuid import UUID

from sqlalchemy import delete, update
from sqlmodel import Session, select

from tasky.core.clock import utcnow
from tasky.models.task import Task, TaskStatus


def _status_clauses(status: TaskStatus) -> list:
    if status == TaskStatus.DELETED:
        return [Task.is_deleted == True]  # noqa: E712
    return [
        Task.is_deleted == False,  # noqa: E712
        Task.is_completed == (status == TaskStatus.COMPLETED),
    ]


def insert(db: Session, task: Task) -> Task:
    db.add(task)
    db.commit()
    db.refresh(task)
    return task


def find(
    db: Session,
    owner_id: UUID,
    task_id: UUID,
    *,
    deleted: Optional[bool] = False,
) -> Optional[Task]:
    """``deleted=None`` matches the task in any lifecycle state."""
    stmt = select(Task).where(Task.id == task_id, Task.owner_id == owner_id)
    if deleted is not None:
        stmt = stmt.where(Task.is_deleted == deleted)
    return db.exec(stmt).first()


def list_by_status(db: Session, owner_id: UUID, status: TaskStatus) -> list[Task]:
    stmt = (
        select(Task)
        .where(Task.owner_id == owner_id, *_status_clauses(status))
        .order_by(Task.date_created.desc())
    )
    return list(db.exec(stmt).all())


def conditional_update(
    db: Session,
    owner_id: UUID,
    task_id: UUID,
    *,
    deleted: bool,
    values: dict[str, Any],
) -> Optional[Task]:
    """
    Apply ``values`` only if the task belongs to ``owner_id`` and its
    ``is_deleted`` flag equals ``deleted``. Returns the fresh row, or None
    when nothing matched.
    """
    stmt = (
        update(Task)
        .where(
            Task.id == task_id,
            Task.owner_id == owner_id,
            Task.is_deleted == deleted,
        )
        .values(**values, date_updated=utcnow())
        .execution_options(synchronize_session=False)
    )
    result = db.exec(stmt)
    if result.rowcount == 0:
        db.rollback()
        return None
    db.commit()
    return db.get(Task, task_id, populate_existing=True)


def erase(db: Session, owner_id: UUID, task_id: UUID) -> bool:
    stmt = (
        delete(Task)
        .where(Task.id == task_id, Task.owner_id == owner_id)
        .execution_options(synchronize_session=False)
    )
    result = db.exec(stmt)
    db.commit()
    return result.rowcount > 0
