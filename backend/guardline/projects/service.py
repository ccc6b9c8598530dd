from typing import Optional, List
from sqlmodel import Session, select
from sqlalchemy.exc import IntegrityError
from datetime import datetime, timezone
import logging
import uuid

from guardline.exceptions import ConflictError, NotFoundError, ValidationFailedError
from guardline.clients.models import Client
from guardline.leads.models import Lead
from guardline.users.models import User
from guardline.projects.models import Project, ProjectStatus
from guardline.tasks.models import Task
from guardline.projects.schemas import ProjectCreate, ProjectUpdate, MISSING_LINK_MESSAGE
from guardline.tickets import next_ticket_number

logger = logging.getLogger(__name__)

TICKET_PREFIX = "PRJ"

def ensure_linked(client_id: Optional[uuid.UUID], lead_id: Optional[uuid.UUID]) -> None:
    if client_id is None and lead_id is None:
        raise ValidationFailedError(MISSING_LINK_MESSAGE)

def ensure_references_exist(session: Session, data: dict) -> None:
    """Raise NotFoundError for any referenced client, lead or technician id that is unknown."""
    if data.get("client_id") and not session.get(Client, data["client_id"]):
        raise NotFoundError("Client not found")
    if data.get("lead_id") and not session.get(Lead, data["lead_id"]):
        raise NotFoundError("Lead not found")
    if data.get("assigned_technician_id") and not session.get(User, data["assigned_technician_id"]):
        raise NotFoundError("Technician not found")

def create_project(session: Session, project_create: ProjectCreate) -> Project:
    data = project_create.model_dump()
    ensure_linked(data.get("client_id"), data.get("lead_id"))
    ensure_references_exist(session, data)

    db_project = Project(**data, ticket_number=next_ticket_number(session, Project, TICKET_PREFIX))
    session.add(db_project)
    try:
        session.commit()
    except IntegrityError:
        session.rollback()
        raise ConflictError("Project ticket number already taken, please retry")
    session.refresh(db_project)
    logger.info("Created project %s (%s)", db_project.ticket_number, db_project.id)
    return db_project

def get_projects(
    session: Session,
    skip: int = 0,
    limit: int = 100,
    status: Optional[ProjectStatus] = None,
    client_id: Optional[uuid.UUID] = None,
    lead_id: Optional[uuid.UUID] = None,
    assigned_technician_id: Optional[uuid.UUID] = None
) -> List[Project]:
    query = select(Project)

    if status:
        query = query.where(Project.status == status)
    if client_id:
        query = query.where(Project.client_id == client_id)
    if lead_id:
        query = query.where(Project.lead_id == lead_id)
    if assigned_technician_id:
        query = query.where(Project.assigned_technician_id == assigned_technician_id)

    return session.exec(query.order_by(Project.created_at.desc()).offset(skip).limit(limit)).all()

def get_project(session: Session, project_id: uuid.UUID) -> Optional[Project]:
    return session.get(Project, project_id)

def has_projects(session: Session, client_id: Optional[uuid.UUID] = None, lead_id: Optional[uuid.UUID] = None) -> bool:
    query = select(Project.id)
    if client_id:
        query = query.where(Project.client_id == client_id)
    if lead_id:
        query = query.where(Project.lead_id == lead_id)
    return session.exec(query.limit(1)).first() is not None

def update_project(session: Session, db_project: Project, project_update: ProjectUpdate) -> Project:
    update_data = project_update.model_dump(exclude_unset=True)

    if "client_id" in update_data or "lead_id" in update_data:
        ensure_linked(
            update_data.get("client_id", db_project.client_id),
            update_data.get("lead_id", db_project.lead_id),
        )
    ensure_references_exist(session, update_data)

    for key, value in update_data.items():
        setattr(db_project, key, value)

    db_project.updated_at = datetime.now(timezone.utc)
    session.add(db_project)
    session.commit()
    session.refresh(db_project)
    return db_project

def delete_project(session: Session, db_project: Project) -> None:
    project_id = db_project.id
    # Tasks outlive their project
    for task in session.exec(select(Task).where(Task.project_id == project_id)).all():
        task.project_id = None
        session.add(task)
    session.delete(db_project)
    session.commit()
    logger.info("Deleted project %s", project_id)
