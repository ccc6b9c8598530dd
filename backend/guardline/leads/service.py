from typing import Any, Optional, List
from sqlmodel import Session, select
from sqlalchemy.exc import IntegrityError
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
import logging
import uuid

from guardline.exceptions import ConflictError, NotFoundError
from guardline.clients.models import Client
from guardline.inquiries.models import Inquiry, InquiryStatus
from guardline.leads.models import Lead, LeadSource, LeadStatus
from guardline.leads.history_models import LeadHistory, LeadAction
from guardline.leads.schemas import LeadCreate, LeadUpdate
from guardline.projects.service import has_projects

logger = logging.getLogger(__name__)

def create_lead(session: Session, lead_create: LeadCreate, user_id: uuid.UUID) -> Lead:
    db_lead = Lead(**lead_create.model_dump())
    if db_lead.assigned_to_id is None:
        db_lead.assigned_to_id = user_id
    session.add(db_lead)

    # Only store explicitly set fields
    provided_data = lead_create.model_dump(exclude_unset=True)
    record_lead_history(
        session=session,
        lead_id=db_lead.id,
        action=LeadAction.CREATED,
        performed_by_id=user_id,
        description=f"Lead '{db_lead.name}' was created",
        new_value=provided_data
    )
    session.commit()
    session.refresh(db_lead)
    logger.info("Created %s lead %s", db_lead.source.value, db_lead.id)
    return db_lead

def get_leads(
    session: Session,
    skip: int = 0,
    limit: int = 100,
    source: Optional[LeadSource] = None,
    status: Optional[LeadStatus] = None,
    assigned_to_id: Optional[uuid.UUID] = None
) -> List[Lead]:
    query = select(Lead)

    if source:
        query = query.where(Lead.source == source)

    if status:
        query = query.where(Lead.status == status)

    if assigned_to_id:
        query = query.where(Lead.assigned_to_id == assigned_to_id)

    return session.exec(query.order_by(Lead.created_at.desc()).offset(skip).limit(limit)).all()

def get_lead(session: Session, lead_id: uuid.UUID) -> Optional[Lead]:
    return session.get(Lead, lead_id)

def get_lead_for_inquiry(session: Session, inquiry_id: uuid.UUID) -> Optional[Lead]:
    return session.exec(select(Lead).where(Lead.inquiry_id == inquiry_id)).first()

def update_lead(session: Session, db_lead: Lead, lead_update: LeadUpdate, user_id: uuid.UUID) -> Lead:
    update_data = lead_update.model_dump(exclude_unset=True)
    changes = []
    changed_old = {}
    changed_new = {}

    for key, value in update_data.items():
        old_value = getattr(db_lead, key)
        if old_value != value:
            setattr(db_lead, key, value)
            changes.append(f"{key}: {_json_safe(old_value)} → {_json_safe(value)}")
            changed_old[key] = old_value
            changed_new[key] = value

    if changes:
        db_lead.updated_at = datetime.now(timezone.utc)
        session.add(db_lead)

        action = LeadAction.ASSIGNED if "assigned_to_id" in changed_new else LeadAction.UPDATED
        if "status" in changed_new:
            action = LeadAction.STATUS_CHANGED

        record_lead_history(
            session=session,
            lead_id=db_lead.id,
            action=action,
            performed_by_id=user_id,
            description=f"Lead updated: {', '.join(changes)}",
            old_value=changed_old,
            new_value=changed_new
        )
        session.commit()
        session.refresh(db_lead)

    return db_lead

def delete_lead(session: Session, db_lead: Lead) -> None:
    lead_id = db_lead.id
    if has_projects(session, lead_id=lead_id):
        raise ConflictError("Lead still has projects; reassign or delete them first")
    converted_to_client = session.exec(select(Client.id).where(Client.lead_id == lead_id)).first()
    source_inquiry = session.exec(select(Inquiry.id).where(Inquiry.converted_lead_id == lead_id)).first()
    if converted_to_client or source_inquiry:
        raise ConflictError("Lead is part of a conversion and cannot be deleted")
    for entry in session.exec(select(LeadHistory).where(LeadHistory.lead_id == lead_id)).all():
        session.delete(entry)
    session.delete(db_lead)
    session.commit()
    logger.info("Deleted lead %s", lead_id)

def convert_inquiry_to_lead(session: Session, inquiry_id: uuid.UUID, user_id: uuid.UUID) -> Lead:
    """Turn a public inquiry into a lead assigned to ``user_id``.

    The new lead, the inquiry's status flip and its back-reference commit in
    one transaction. Converting an inquiry that already produced a lead raises
    ConflictError and writes nothing.
    """
    inquiry = session.exec(
        select(Inquiry)
        .where(Inquiry.id == inquiry_id)
        .with_for_update()
        .execution_options(populate_existing=True)
    ).first()
    if not inquiry:
        raise NotFoundError("Inquiry not found")

    if inquiry.converted_lead_id or get_lead_for_inquiry(session, inquiry.id):
        logger.warning("Rejected conversion of inquiry %s: already converted", inquiry.id)
        raise ConflictError("Inquiry already converted to lead")

    db_lead = Lead(
        source=LeadSource.INQUIRY,
        inquiry_id=inquiry.id,
        name=inquiry.name,
        email=inquiry.email,
        phone=inquiry.phone,
        company=inquiry.company,
        service_type=inquiry.service_type,
        address=inquiry.address,
        status=LeadStatus.NEW,
        assigned_to_id=user_id,
        notes=inquiry.description or inquiry.notes or "",
    )
    session.add(db_lead)

    now = datetime.now(timezone.utc)
    inquiry.status = InquiryStatus.CONVERTED
    inquiry.converted_lead_id = db_lead.id
    inquiry.updated_at = now
    session.add(inquiry)

    record_lead_history(
        session=session,
        lead_id=db_lead.id,
        action=LeadAction.CREATED,
        performed_by_id=user_id,
        description=f"Lead '{db_lead.name}' was created from inquiry {inquiry.id}",
        new_value={"source": LeadSource.INQUIRY, "inquiry_id": inquiry.id}
    )

    try:
        session.commit()
    except IntegrityError:
        # A concurrent conversion of the same inquiry committed first
        session.rollback()
        logger.warning("Conversion of inquiry %s lost a race", inquiry_id)
        raise ConflictError("Inquiry already converted to lead")

    session.refresh(db_lead)
    logger.info("Converted inquiry %s to lead %s", inquiry_id, db_lead.id)
    return db_lead

def record_lead_history(
    session: Session,
    lead_id: uuid.UUID,
    action: LeadAction,
    performed_by_id: Optional[uuid.UUID],
    description: str,
    old_value: Optional[dict] = None,
    new_value: Optional[dict] = None
) -> LeadHistory:
    """Stage a history entry; the caller's commit persists it with the change."""
    history = LeadHistory(
        lead_id=lead_id,
        action=action,
        performed_by_id=performed_by_id,
        description=description,
        old_value=_json_safe(old_value) if old_value is not None else None,
        new_value=_json_safe(new_value) if new_value is not None else None
    )
    session.add(history)
    return history

def get_lead_history(session: Session, lead_id: uuid.UUID) -> List[LeadHistory]:
    return session.exec(
        select(LeadHistory)
        .where(LeadHistory.lead_id == lead_id)
        .order_by(LeadHistory.created_at.desc())
    ).all()

def _json_safe(value: Any) -> Any:
    if isinstance(value, dict):
        return {key: _json_safe(item) for key, item in value.items()}
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (uuid.UUID, Decimal)):
        return str(value)
    if isinstance(value, datetime):
        return value.isoformat()
    return value
