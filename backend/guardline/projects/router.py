from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlmodel import Session
from typing import List, Optional
import uuid

from guardline.database import get_session
from guardline.auth.permissions import (
    require_permission,
    has_permission,
    VIEW_OWN_PROJECTS,
    VIEW_ALL_PROJECTS,
    MANAGE_ALL_PROJECTS,
)
from guardline.users.models import User
from guardline.projects.schemas import ProjectCreate, ProjectRead, ProjectUpdate
from guardline.projects.models import ProjectStatus
from guardline.projects import service

router = APIRouter(prefix="/api/projects", tags=["projects"])

@router.post("", response_model=ProjectRead, status_code=status.HTTP_201_CREATED)
def create_project(
    project_create: ProjectCreate,
    current_user: User = Depends(require_permission(MANAGE_ALL_PROJECTS)),
    session: Session = Depends(get_session)
):
    return service.create_project(session, project_create)

@router.get("", response_model=List[ProjectRead])
def read_projects(
    skip: int = 0,
    limit: int = 100,
    status: Optional[ProjectStatus] = Query(None),
    client_id: Optional[uuid.UUID] = Query(None, alias="clientId"),
    lead_id: Optional[uuid.UUID] = Query(None, alias="leadId"),
    assigned_technician_id: Optional[uuid.UUID] = Query(None, alias="assignedTechnicianId"),
    current_user: User = Depends(require_permission(VIEW_OWN_PROJECTS)),
    session: Session = Depends(get_session)
):
    # Field staff only see the projects they are assigned to
    if not has_permission(current_user.role, VIEW_ALL_PROJECTS):
        assigned_technician_id = current_user.id
    return service.get_projects(session, skip, limit, status, client_id, lead_id, assigned_technician_id)

@router.get("/{project_id}", response_model=ProjectRead)
def read_project(
    project_id: uuid.UUID,
    current_user: User = Depends(require_permission(VIEW_OWN_PROJECTS)),
    session: Session = Depends(get_session)
):
    project = service.get_project(session, project_id)
    if not project:
        raise HTTPException(status_code=404, detail="Project not found")
    if not has_permission(current_user.role, VIEW_ALL_PROJECTS) and project.assigned_technician_id != current_user.id:
        raise HTTPException(status_code=403, detail="Access denied")
    return project

@router.patch("/{project_id}", response_model=ProjectRead)
def update_project(
    project_id: uuid.UUID,
    project_update: ProjectUpdate,
    current_user: User = Depends(require_permission(MANAGE_ALL_PROJECTS)),
    session: Session = Depends(get_session)
):
    project = service.get_project(session, project_id)
    if not project:
        raise HTTPException(status_code=404, detail="Project not found")
    return service.update_project(session, project, project_update)

@router.delete("/{project_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_project(
    project_id: uuid.UUID,
    current_user: User = Depends(require_permission(MANAGE_ALL_PROJECTS)),
    session: Session = Depends(get_session)
):
    project = service.get_project(session, project_id)
    if not project:
        raise HTTPException(status_code=404, detail="Project not found")
    service.delete_project(session, project)
