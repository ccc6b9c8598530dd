from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlmodel import Session
from typing import List, Optional
import uuid

from guardline.database import get_session
from guardline.auth.permissions import require_permission, VIEW_ALL_MESSAGES, MANAGE_MESSAGES
from guardline.users.models import User
from guardline.users.service import get_user
from guardline.inquiries.schemas import InquiryCreate, InquiryRead, InquiryUpdate
from guardline.inquiries.models import InquiryStatus, InquiryType
from guardline.inquiries import service

router = APIRouter(prefix="/api/inquiries", tags=["inquiries"])

def ensure_assignee_exists(session: Session, assigned_to_id: Optional[uuid.UUID]) -> None:
    if assigned_to_id and not get_user(session, assigned_to_id):
        raise HTTPException(status_code=400, detail="Assigned user does not exist")

# Public: the quote and appointment forms on the website post here without a session
@router.post("", response_model=InquiryRead, status_code=status.HTTP_201_CREATED)
def submit_inquiry(inquiry_create: InquiryCreate, session: Session = Depends(get_session)):
    return service.create_inquiry(session, inquiry_create)

@router.get("", response_model=List[InquiryRead])
def read_inquiries(
    skip: int = 0,
    limit: int = 100,
    type: Optional[InquiryType] = Query(None),
    status: Optional[InquiryStatus] = Query(None),
    assigned_to_id: Optional[uuid.UUID] = Query(None, alias="assignedToId"),
    current_user: User = Depends(require_permission(VIEW_ALL_MESSAGES)),
    session: Session = Depends(get_session)
):
    return service.get_inquiries(session, skip, limit, type, status, assigned_to_id)

@router.get("/{inquiry_id}", response_model=InquiryRead)
def read_inquiry(
    inquiry_id: uuid.UUID,
    current_user: User = Depends(require_permission(VIEW_ALL_MESSAGES)),
    session: Session = Depends(get_session)
):
    inquiry = service.get_inquiry(session, inquiry_id)
    if not inquiry:
        raise HTTPException(status_code=404, detail="Inquiry not found")
    return inquiry

@router.patch("/{inquiry_id}", response_model=InquiryRead)
def update_inquiry(
    inquiry_id: uuid.UUID,
    inquiry_update: InquiryUpdate,
    current_user: User = Depends(require_permission(MANAGE_MESSAGES)),
    session: Session = Depends(get_session)
):
    inquiry = service.get_inquiry(session, inquiry_id)
    if not inquiry:
        raise HTTPException(status_code=404, detail="Inquiry not found")
    ensure_assignee_exists(session, inquiry_update.assigned_to_id)
    return service.update_inquiry(session, inquiry, inquiry_update)

@router.delete("/{inquiry_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_inquiry(
    inquiry_id: uuid.UUID,
    current_user: User = Depends(require_permission(MANAGE_MESSAGES)),
    session: Session = Depends(get_session)
):
    inquiry = service.get_inquiry(session, inquiry_id)
    if not inquiry:
        raise HTTPException(status_code=404, detail="Inquiry not found")
    service.delete_inquiry(session, inquiry)
