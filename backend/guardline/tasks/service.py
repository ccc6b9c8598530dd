from typing import Optional, List
from sqlmodel import Session, select
from sqlalchemy.exc import IntegrityError
from datetime import datetime, timezone
import logging
import uuid

from guardline.exceptions import ConflictError, NotFoundError
from guardline.projects.models import Project
from guardline.users.models import User
from guardline.tasks.models import Task, TaskStatus
from guardline.tasks.schemas import TaskCreate, TaskUpdate
from guardline.tickets import next_ticket_number

logger = logging.getLogger(__name__)

TICKET_PREFIX = "TSK"

def ensure_references_exist(session: Session, data: dict) -> None:
    if data.get("project_id") and not session.get(Project, data["project_id"]):
        raise NotFoundError("Project not found")
    if data.get("assigned_to_id") and not session.get(User, data["assigned_to_id"]):
        raise NotFoundError("Assigned user not found")

def create_task(session: Session, task_create: TaskCreate, user_id: uuid.UUID) -> Task:
    data = task_create.model_dump()
    ensure_references_exist(session, data)

    db_task = Task(
        **data,
        created_by_id=user_id,
        ticket_number=next_ticket_number(session, Task, TICKET_PREFIX),
    )
    if db_task.status == TaskStatus.COMPLETED:
        db_task.completed_at = datetime.now(timezone.utc)
    session.add(db_task)
    try:
        session.commit()
    except IntegrityError:
        session.rollback()
        raise ConflictError("Task ticket number already taken, please retry")
    session.refresh(db_task)
    logger.info("Created task %s (%s)", db_task.ticket_number, db_task.id)
    return db_task

def get_tasks(
    session: Session,
    skip: int = 0,
    limit: int = 100,
    status: Optional[TaskStatus] = None,
    assigned_to_id: Optional[uuid.UUID] = None,
    created_by_id: Optional[uuid.UUID] = None,
    project_id: Optional[uuid.UUID] = None
) -> List[Task]:
    query = select(Task)

    if status:
        query = query.where(Task.status == status)
    if assigned_to_id:
        query = query.where(Task.assigned_to_id == assigned_to_id)
    if created_by_id:
        query = query.where(Task.created_by_id == created_by_id)
    if project_id:
        query = query.where(Task.project_id == project_id)

    return session.exec(query.order_by(Task.created_at.desc()).offset(skip).limit(limit)).all()

def get_task(session: Session, task_id: uuid.UUID) -> Optional[Task]:
    return session.get(Task, task_id)

def update_task(session: Session, db_task: Task, task_update: TaskUpdate) -> Task:
    update_data = task_update.model_dump(exclude_unset=True)
    ensure_references_exist(session, update_data)

    new_status = update_data.get("status")
    if new_status is not None and new_status != db_task.status:
        # completed_at tracks the current completion only
        if new_status == TaskStatus.COMPLETED:
            db_task.completed_at = datetime.now(timezone.utc)
        else:
            db_task.completed_at = None

    for key, value in update_data.items():
        setattr(db_task, key, value)

    db_task.updated_at = datetime.now(timezone.utc)
    session.add(db_task)
    session.commit()
    session.refresh(db_task)
    return db_task

def delete_task(session: Session, db_task: Task) -> None:
    task_id = db_task.id
    session.delete(db_task)
    session.commit()
    logger.info("Deleted task %s", task_id)
