from typing import Optional, List
from sqlmodel import Session, select
from passlib.context import CryptContext
from datetime import datetime, timezone
import logging
import uuid

from guardline.exceptions import ConflictError
from guardline.users.models import User, UserRole
from guardline.users.schemas import UserCreate, UserUpdate
from guardline.inquiries.models import Inquiry
from guardline.leads.models import Lead
from guardline.leads.history_models import LeadHistory
from guardline.clients.models import Client
from guardline.projects.models import Project
from guardline.tasks.models import Task

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)

def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)

def create_user(session: Session, user_create: UserCreate, role: UserRole = UserRole.CLIENT) -> User:
    hashed_password = get_password_hash(user_create.password)
    user_data = user_create.model_dump(exclude={"password"})
    user_data["email"] = user_data["email"].lower()
    db_user = User(**user_data, hashed_password=hashed_password, role=role)
    session.add(db_user)
    session.commit()
    session.refresh(db_user)
    logger.info("Created user %s with role %s", db_user.id, db_user.role.value)
    return db_user

def get_user(session: Session, user_id: uuid.UUID) -> Optional[User]:
    return session.get(User, user_id)

def get_user_by_email(session: Session, email: str) -> Optional[User]:
    return session.exec(select(User).where(User.email == email.lower())).first()

def get_all_users(
    session: Session,
    offset: int = 0,
    limit: int = 100,
    role: Optional[UserRole] = None
) -> List[User]:
    query = select(User)
    if role:
        query = query.where(User.role == role)
    return session.exec(query.order_by(User.created_at).offset(offset).limit(limit)).all()

def get_technicians(session: Session) -> List[User]:
    """Active employees, the pool projects get assigned to."""
    return session.exec(
        select(User)
        .where(User.role == UserRole.EMPLOYEE)
        .where(User.is_active == True)  # noqa: E712
        .order_by(User.first_name, User.last_name)
    ).all()

def update_user(session: Session, db_user: User, user_update: UserUpdate) -> User:
    update_data = user_update.model_dump(exclude_unset=True)

    # If password is being updated, hash it
    if "password" in update_data:
        password = update_data.pop("password")
        if password:
            update_data["hashed_password"] = get_password_hash(password)

    for key, value in update_data.items():
        setattr(db_user, key, value)

    db_user.updated_at = datetime.now(timezone.utc)
    session.add(db_user)
    session.commit()
    session.refresh(db_user)
    return db_user

def is_referenced(session: Session, user_id: uuid.UUID) -> bool:
    """True when any record still points at ``user_id``."""
    references = (
        Inquiry.assigned_to_id,
        Lead.assigned_to_id,
        LeadHistory.performed_by_id,
        Client.account_manager_id,
        Project.assigned_technician_id,
        Task.assigned_to_id,
        Task.created_by_id,
    )
    return any(
        session.exec(select(column).where(column == user_id).limit(1)).first() is not None
        for column in references
    )

def delete_user(session: Session, db_user: User) -> None:
    user_id = db_user.id
    if is_referenced(session, user_id):
        raise ConflictError("User is still referenced by other records; deactivate the account instead")
    session.delete(db_user)
    session.commit()
    logger.info("Deleted user %s", user_id)
