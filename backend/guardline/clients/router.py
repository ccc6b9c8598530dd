from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlmodel import Session
from typing import List, Optional
import uuid

from guardline.database import get_session
from guardline.auth.permissions import require_permission, VIEW_CLIENTS, MANAGE_CLIENTS, MANAGE_LEADS
from guardline.users.models import User
from guardline.users.service import get_user
from guardline.clients.schemas import ClientCreate, ClientRead, ClientUpdate, LeadConversionOptions
from guardline.clients.models import ClientStatus
from guardline.clients import service

router = APIRouter(prefix="/api/clients", tags=["clients"])

def ensure_account_manager_exists(session: Session, account_manager_id: Optional[uuid.UUID]) -> None:
    if account_manager_id and not get_user(session, account_manager_id):
        raise HTTPException(status_code=400, detail="Account manager does not exist")

@router.post("", response_model=ClientRead, status_code=status.HTTP_201_CREATED)
def create_client(
    client_create: ClientCreate,
    current_user: User = Depends(require_permission(MANAGE_CLIENTS)),
    session: Session = Depends(get_session)
):
    ensure_account_manager_exists(session, client_create.account_manager_id)
    return service.create_client(session, client_create, current_user.id)

@router.post("/convert-from-lead/{lead_id}", response_model=ClientRead, status_code=status.HTTP_201_CREATED)
def convert_from_lead(
    lead_id: uuid.UUID,
    options: Optional[LeadConversionOptions] = None,
    current_user: User = Depends(require_permission(MANAGE_LEADS)),
    session: Session = Depends(get_session)
):
    if options:
        ensure_account_manager_exists(session, options.account_manager_id)
    return service.convert_lead_to_client(session, lead_id, current_user.id, options)

@router.get("", response_model=List[ClientRead])
def read_clients(
    skip: int = 0,
    limit: int = 100,
    status: Optional[ClientStatus] = Query(None),
    account_manager_id: Optional[uuid.UUID] = Query(None, alias="accountManagerId"),
    current_user: User = Depends(require_permission(VIEW_CLIENTS)),
    session: Session = Depends(get_session)
):
    return service.get_clients(session, skip, limit, status, account_manager_id)

@router.get("/{client_id}", response_model=ClientRead)
def read_client(
    client_id: uuid.UUID,
    current_user: User = Depends(require_permission(VIEW_CLIENTS)),
    session: Session = Depends(get_session)
):
    client = service.get_client(session, client_id)
    if not client:
        raise HTTPException(status_code=404, detail="Client not found")
    return client

@router.patch("/{client_id}", response_model=ClientRead)
def update_client(
    client_id: uuid.UUID,
    client_update: ClientUpdate,
    current_user: User = Depends(require_permission(MANAGE_CLIENTS)),
    session: Session = Depends(get_session)
):
    client = service.get_client(session, client_id)
    if not client:
        raise HTTPException(status_code=404, detail="Client not found")
    ensure_account_manager_exists(session, client_update.account_manager_id)
    return service.update_client(session, client, client_update)

@router.delete("/{client_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_client(
    client_id: uuid.UUID,
    current_user: User = Depends(require_permission(MANAGE_CLIENTS)),
    session: Session = Depends(get_session)
):
    client = service.get_client(session, client_id)
    if not client:
        raise HTTPException(status_code=404, detail="Client not found")
    service.delete_client(session, client)
