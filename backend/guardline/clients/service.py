from typing import Optional, List
from sqlmodel import Session, select
from sqlalchemy.exc import IntegrityError
from datetime import datetime, timezone
import logging
import uuid

from guardline.exceptions import ConflictError, NotFoundError
from guardline.clients.models import Client, ClientStatus
from guardline.clients.schemas import ClientCreate, ClientUpdate, LeadConversionOptions
from guardline.leads.models import Lead, LeadStatus
from guardline.leads.history_models import LeadAction
from guardline.leads.service import record_lead_history
from guardline.projects.service import has_projects

logger = logging.getLogger(__name__)

def create_client(session: Session, client_create: ClientCreate, user_id: uuid.UUID) -> Client:
    db_client = Client(**client_create.model_dump())
    if db_client.account_manager_id is None:
        db_client.account_manager_id = user_id
    session.add(db_client)
    session.commit()
    session.refresh(db_client)
    logger.info("Created client %s", db_client.id)
    return db_client

def get_clients(
    session: Session,
    skip: int = 0,
    limit: int = 100,
    status: Optional[ClientStatus] = None,
    account_manager_id: Optional[uuid.UUID] = None
) -> List[Client]:
    query = select(Client)

    if status:
        query = query.where(Client.status == status)

    if account_manager_id:
        query = query.where(Client.account_manager_id == account_manager_id)

    return session.exec(query.order_by(Client.created_at.desc()).offset(skip).limit(limit)).all()

def get_client(session: Session, client_id: uuid.UUID) -> Optional[Client]:
    return session.get(Client, client_id)

def get_client_for_lead(session: Session, lead_id: uuid.UUID) -> Optional[Client]:
    return session.exec(select(Client).where(Client.lead_id == lead_id)).first()

def update_client(session: Session, db_client: Client, client_update: ClientUpdate) -> Client:
    update_data = client_update.model_dump(exclude_unset=True)
    for key, value in update_data.items():
        setattr(db_client, key, value)

    db_client.updated_at = datetime.now(timezone.utc)
    session.add(db_client)
    session.commit()
    session.refresh(db_client)
    return db_client

def delete_client(session: Session, db_client: Client) -> None:
    client_id = db_client.id
    if has_projects(session, client_id=client_id):
        raise ConflictError("Client still has projects; reassign or delete them first")
    session.delete(db_client)
    session.commit()
    logger.info("Deleted client %s", client_id)

def convert_lead_to_client(
    session: Session,
    lead_id: uuid.UUID,
    user_id: uuid.UUID,
    options: Optional[LeadConversionOptions] = None
) -> Client:
    """Create a potential client from a lead and mark the lead converted.

    Identity fields are copied from the lead as it stands now; later edits to
    the lead do not reach the client. Both writes commit together.
    """
    lead = session.exec(
        select(Lead)
        .where(Lead.id == lead_id)
        .with_for_update()
        .execution_options(populate_existing=True)
    ).first()
    if not lead:
        raise NotFoundError("Lead not found")

    if lead.status == LeadStatus.CONVERTED or get_client_for_lead(session, lead.id):
        logger.warning("Rejected conversion of lead %s: already converted", lead.id)
        raise ConflictError("Lead already converted to client")

    extras = options.model_dump(exclude_unset=True) if options else {}
    account_manager_id = extras.pop("account_manager_id", None) or user_id

    db_client = Client(
        lead_id=lead.id,
        account_manager_id=account_manager_id,
        name=lead.name,
        email=lead.email,
        phone=lead.phone,
        company=lead.company,
        industry=lead.industry,
        address=lead.address,
        notes=lead.notes,
        status=ClientStatus.POTENTIAL,
        **extras,
    )
    session.add(db_client)

    previous_status = lead.status
    lead.status = LeadStatus.CONVERTED
    lead.updated_at = datetime.now(timezone.utc)
    session.add(lead)

    record_lead_history(
        session=session,
        lead_id=lead.id,
        action=LeadAction.CONVERTED,
        performed_by_id=user_id,
        description=f"Lead '{lead.name}' was converted to client {db_client.id}",
        old_value={"status": previous_status},
        new_value={"status": LeadStatus.CONVERTED, "client_id": db_client.id}
    )

    try:
        session.commit()
    except IntegrityError:
        # A concurrent conversion of the same lead committed first
        session.rollback()
        logger.warning("Conversion of lead %s lost a race", lead_id)
        raise ConflictError("Lead already converted to client")

    session.refresh(db_client)
    logger.info("Converted lead %s to client %s", lead_id, db_client.id)
    return db_client
