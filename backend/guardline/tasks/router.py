from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlmodel import Session
from typing import List, Optional
import uuid

from guardline.database import get_session
from guardline.auth.permissions import (
    require_permission,
    has_permission,
    VIEW_OWN_TASKS,
    VIEW_ALL_TASKS,
    MANAGE_OWN_TASKS,
    MANAGE_ALL_TASKS,
)
from guardline.users.models import User
from guardline.tasks.schemas import TaskCreate, TaskRead, TaskUpdate
from guardline.tasks.models import TaskStatus
from guardline.tasks import service

router = APIRouter(prefix="/api/tasks", tags=["tasks"])

@router.post("", response_model=TaskRead, status_code=status.HTTP_201_CREATED)
def create_task(
    task_create: TaskCreate,
    current_user: User = Depends(require_permission(MANAGE_ALL_TASKS)),
    session: Session = Depends(get_session)
):
    return service.create_task(session, task_create, current_user.id)

@router.get("", response_model=List[TaskRead])
def read_tasks(
    skip: int = 0,
    limit: int = 100,
    status: Optional[TaskStatus] = Query(None),
    assigned_to_id: Optional[uuid.UUID] = Query(None, alias="assignedToId"),
    created_by_id: Optional[uuid.UUID] = Query(None, alias="createdById"),
    project_id: Optional[uuid.UUID] = Query(None, alias="projectId"),
    current_user: User = Depends(require_permission(VIEW_OWN_TASKS, VIEW_ALL_TASKS)),
    session: Session = Depends(get_session)
):
    # Without view_all_tasks the list is narrowed to the caller's own assignments
    if not has_permission(current_user.role, VIEW_ALL_TASKS):
        assigned_to_id = current_user.id
    return service.get_tasks(session, skip, limit, status, assigned_to_id, created_by_id, project_id)

@router.get("/{task_id}", response_model=TaskRead)
def read_task(
    task_id: uuid.UUID,
    current_user: User = Depends(require_permission(VIEW_OWN_TASKS, VIEW_ALL_TASKS)),
    session: Session = Depends(get_session)
):
    task = service.get_task(session, task_id)
    if not task:
        raise HTTPException(status_code=404, detail="Task not found")
    if not has_permission(current_user.role, VIEW_ALL_TASKS) and task.assigned_to_id != current_user.id:
        raise HTTPException(status_code=403, detail="Access denied")
    return task

@router.patch("/{task_id}", response_model=TaskRead)
def update_task(
    task_id: uuid.UUID,
    task_update: TaskUpdate,
    current_user: User = Depends(require_permission(MANAGE_OWN_TASKS, MANAGE_ALL_TASKS)),
    session: Session = Depends(get_session)
):
    task = service.get_task(session, task_id)
    if not task:
        raise HTTPException(status_code=404, detail="Task not found")

    if not has_permission(current_user.role, MANAGE_ALL_TASKS):
        if task.assigned_to_id != current_user.id:
            raise HTTPException(status_code=403, detail="You can only edit tasks assigned to you")
        if "assigned_to_id" in task_update.model_fields_set:
            raise HTTPException(status_code=403, detail="Only task managers can reassign tasks")

    return service.update_task(session, task, task_update)

@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_task(
    task_id: uuid.UUID,
    current_user: User = Depends(require_permission(MANAGE_ALL_TASKS)),
    session: Session = Depends(get_session)
):
    task = service.get_task(session, task_id)
    if not task:
        raise HTTPException(status_code=404, detail="Task not found")
    service.delete_task(session, task)
