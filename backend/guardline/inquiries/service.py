from typing import Optional, List
from sqlmodel import Session, select
from datetime import datetime, timezone
import logging
import uuid

from guardline.exceptions import ConflictError
from guardline.inquiries.models import Inquiry, InquiryStatus, InquiryType
from guardline.leads.models import Lead
from guardline.inquiries.schemas import InquiryCreate, InquiryUpdate

logger = logging.getLogger(__name__)

def create_inquiry(session: Session, inquiry_create: InquiryCreate) -> Inquiry:
    db_inquiry = Inquiry(**inquiry_create.model_dump())
    session.add(db_inquiry)
    session.commit()
    session.refresh(db_inquiry)
    logger.info("Received %s inquiry %s", db_inquiry.type.value, db_inquiry.id)
    return db_inquiry

def get_inquiries(
    session: Session,
    skip: int = 0,
    limit: int = 100,
    type: Optional[InquiryType] = None,
    status: Optional[InquiryStatus] = None,
    assigned_to_id: Optional[uuid.UUID] = None
) -> List[Inquiry]:
    query = select(Inquiry)

    if type:
        query = query.where(Inquiry.type == type)
    if status:
        query = query.where(Inquiry.status == status)
    if assigned_to_id:
        query = query.where(Inquiry.assigned_to_id == assigned_to_id)

    return session.exec(query.order_by(Inquiry.created_at.desc()).offset(skip).limit(limit)).all()

def get_inquiry(session: Session, inquiry_id: uuid.UUID) -> Optional[Inquiry]:
    return session.get(Inquiry, inquiry_id)

def update_inquiry(session: Session, db_inquiry: Inquiry, inquiry_update: InquiryUpdate) -> Inquiry:
    update_data = inquiry_update.model_dump(exclude_unset=True)
    for key, value in update_data.items():
        setattr(db_inquiry, key, value)

    db_inquiry.updated_at = datetime.now(timezone.utc)
    session.add(db_inquiry)
    session.commit()
    session.refresh(db_inquiry)
    return db_inquiry

def delete_inquiry(session: Session, db_inquiry: Inquiry) -> None:
    inquiry_id = db_inquiry.id
    converted = session.exec(select(Lead.id).where(Lead.inquiry_id == inquiry_id)).first()
    if db_inquiry.converted_lead_id or converted:
        raise ConflictError("Inquiry was converted to a lead and cannot be deleted")
    session.delete(db_inquiry)
    session.commit()
    logger.info("Deleted inquiry %s", inquiry_id)
