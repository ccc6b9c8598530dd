from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlmodel import Session
from typing import List, Optional
import uuid

from guardline.database import get_session
from guardline.auth.permissions import require_permission, VIEW_LEADS, MANAGE_LEADS
from guardline.users.models import User
from guardline.users.service import get_user
from guardline.leads.schemas import LeadCreate, LeadRead, LeadUpdate, LeadHistoryRead
from guardline.leads.models import LeadSource, LeadStatus
from guardline.leads import service

router = APIRouter(prefix="/api/leads", tags=["leads"])

def ensure_assignee_exists(session: Session, assigned_to_id: Optional[uuid.UUID]) -> None:
    if assigned_to_id and not get_user(session, assigned_to_id):
        raise HTTPException(status_code=400, detail="Assigned user does not exist")

@router.post("", response_model=LeadRead, status_code=status.HTTP_201_CREATED)
def create_lead(
    lead_create: LeadCreate,
    current_user: User = Depends(require_permission(MANAGE_LEADS)),
    session: Session = Depends(get_session)
):
    ensure_assignee_exists(session, lead_create.assigned_to_id)
    return service.create_lead(session, lead_create, current_user.id)

@router.post("/convert-from-inquiry/{inquiry_id}", response_model=LeadRead, status_code=status.HTTP_201_CREATED)
def convert_from_inquiry(
    inquiry_id: uuid.UUID,
    current_user: User = Depends(require_permission(MANAGE_LEADS)),
    session: Session = Depends(get_session)
):
    # NotFoundError / ConflictError are rendered by the app-level handlers
    return service.convert_inquiry_to_lead(session, inquiry_id, current_user.id)

@router.get("", response_model=List[LeadRead])
def read_leads(
    skip: int = 0,
    limit: int = 100,
    source: Optional[LeadSource] = Query(None),
    status: Optional[LeadStatus] = Query(None),
    assigned_to_id: Optional[uuid.UUID] = Query(None, alias="assignedToId"),
    current_user: User = Depends(require_permission(VIEW_LEADS)),
    session: Session = Depends(get_session)
):
    return service.get_leads(session, skip, limit, source, status, assigned_to_id)

@router.get("/{lead_id}", response_model=LeadRead)
def read_lead(
    lead_id: uuid.UUID,
    current_user: User = Depends(require_permission(VIEW_LEADS)),
    session: Session = Depends(get_session)
):
    lead = service.get_lead(session, lead_id)
    if not lead:
        raise HTTPException(status_code=404, detail="Lead not found")
    return lead

@router.patch("/{lead_id}", response_model=LeadRead)
def update_lead(
    lead_id: uuid.UUID,
    lead_update: LeadUpdate,
    current_user: User = Depends(require_permission(MANAGE_LEADS)),
    session: Session = Depends(get_session)
):
    lead = service.get_lead(session, lead_id)
    if not lead:
        raise HTTPException(status_code=404, detail="Lead not found")
    ensure_assignee_exists(session, lead_update.assigned_to_id)
    return service.update_lead(session, lead, lead_update, current_user.id)

@router.delete("/{lead_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_lead(
    lead_id: uuid.UUID,
    current_user: User = Depends(require_permission(MANAGE_LEADS)),
    session: Session = Depends(get_session)
):
    lead = service.get_lead(session, lead_id)
    if not lead:
        raise HTTPException(status_code=404, detail="Lead not found")
    service.delete_lead(session, lead)

@router.get("/{lead_id}/history", response_model=List[LeadHistoryRead])
def get_lead_history(
    lead_id: uuid.UUID,
    current_user: User = Depends(require_permission(VIEW_LEADS)),
    session: Session = Depends(get_session)
):
    """Every recorded action on this lead, newest first."""
    if not service.get_lead(session, lead_id):
        raise HTTPException(status_code=404, detail="Lead not found")
    return service.get_lead_history(session, lead_id)
