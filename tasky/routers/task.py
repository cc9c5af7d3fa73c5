# tasky/routers/task.py
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlmodel import Session

from tasky.db.session import get_session
from tasky.dependencies.auth import get_current_user
from tasky.models.task import TaskStatus
from tasky.schemas.base import MessageResponse
from tasky.schemas.task import (
    TaskCreate,
    TaskListResponse,
    TaskMessageResponse,
    TaskRead,
    TaskResponse,
    TaskUpdate,
)
from tasky.services import task_lifecycle

router = APIRouter(prefix="/tasks", tags=["Tasks"])


def _reply(message: str, task) -> TaskMessageResponse:
    return TaskMessageResponse(message=message, task=TaskRead.model_validate(task))


@router.post("", response_model=TaskMessageResponse, status_code=status.HTTP_201_CREATED)
def create_task(
    body: TaskCreate,
    db: Session = Depends(get_session),
    user_id: UUID = Depends(get_current_user),
):
    task = task_lifecycle.create_task(
        db,
        user_id,
        title=body.title,
        description=body.description,
        priority=body.priority,
        deadline=body.deadline,
    )
    return _reply("Task created successfully", task)


@router.get("", response_model=TaskListResponse)
def list_tasks(
    task_status: TaskStatus = Query(TaskStatus.ACTIVE, alias="status"),
    db: Session = Depends(get_session),
    user_id: UUID = Depends(get_current_user),
):
    tasks = task_lifecycle.list_tasks(db, user_id, task_status)
    return TaskListResponse(tasks=[TaskRead.model_validate(t) for t in tasks])


@router.patch("/complete/{task_id}", response_model=TaskMessageResponse)
def complete_task(
    task_id: UUID,
    db: Session = Depends(get_session),
    user_id: UUID = Depends(get_current_user),
):
    return _reply("Task marked as complete", task_lifecycle.mark_complete(db, user_id, task_id))


@router.patch("/incomplete/{task_id}", response_model=TaskMessageResponse)
def incomplete_task(
    task_id: UUID,
    db: Session = Depends(get_session),
    user_id: UUID = Depends(get_current_user),
):
    return _reply("Task marked as incomplete", task_lifecycle.mark_incomplete(db, user_id, task_id))


@router.patch("/restore/{task_id}", response_model=TaskMessageResponse)
def restore_task(
    task_id: UUID,
    db: Session = Depends(get_session),
    user_id: UUID = Depends(get_current_user),
):
    return _reply("Task restored successfully", task_lifecycle.restore(db, user_id, task_id))


@router.get("/{task_id}", response_model=TaskResponse)
def get_task(
    task_id: UUID,
    db: Session = Depends(get_session),
    user_id: UUID = Depends(get_current_user),
):
    task = task_lifecycle.get_task(db, user_id, task_id)
    return TaskResponse(task=TaskRead.model_validate(task))


@router.patch("/{task_id}", response_model=TaskMessageResponse)
def update_task(
    task_id: UUID,
    body: TaskUpdate,
    db: Session = Depends(get_session),
    user_id: UUID = Depends(get_current_user),
):
    optional = {}
    if "deadline" in body.model_fields_set:
        optional["deadline"] = body.deadline
    task = task_lifecycle.edit_task(
        db,
        user_id,
        task_id,
        title=body.title,
        description=body.description,
        priority=body.priority,
        **optional,
    )
    return _reply("Task updated successfully", task)


@router.delete("/{task_id}", response_model=MessageResponse)
def delete_task(
    task_id: UUID,
    db: Session = Depends(get_session),
    user_id: UUID = Depends(get_current_user),
):
    """Moves the task to trash. Use /{task_id}/permanent to erase it."""
    task_lifecycle.soft_delete(db, user_id, task_id)
    return MessageResponse(message="Task deleted successfully")


@router.delete("/{task_id}/permanent", response_model=MessageResponse)
def purge_task(
    task_id: UUID,
    db: Session = Depends(get_session),
    user_id: UUID = Depends(get_current_user),
):
    task_lifecycle.purge(db, user_id, task_id)
    return MessageResponse(message="Task permanently deleted")
