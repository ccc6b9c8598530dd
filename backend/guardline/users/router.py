from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import Session
from typing import List, Optional
import uuid

from guardline.database import get_session
from guardline.auth.router import get_current_user
from guardline.auth.permissions import require_permission, has_permission, VIEW_USERS, MANAGE_USERS, MANAGE_ALL_PROJECTS
from guardline.users.schemas import UserCreate, UserRead, UserUpdate
from guardline.users.models import User, UserRole
from guardline.users import service

router = APIRouter(prefix="/api/users", tags=["users"])

@router.post("", response_model=UserRead, status_code=status.HTTP_201_CREATED)
def register_user(user_create: UserCreate, session: Session = Depends(get_session)):
    # Self-registration always yields a client account; staff roles are granted afterwards
    if service.get_user_by_email(session, user_create.email):
        raise HTTPException(status_code=400, detail="Email already registered")
    return service.create_user(session, user_create)

@router.get("/me", response_model=UserRead)
def read_current_user(current_user: User = Depends(get_current_user)):
    return current_user

@router.get("/technicians", response_model=List[UserRead])
def read_technicians(
    current_user: User = Depends(require_permission(MANAGE_ALL_PROJECTS, VIEW_USERS)),
    session: Session = Depends(get_session)
):
    return service.get_technicians(session)

@router.get("", response_model=List[UserRead])
def read_users(
    offset: int = 0,
    limit: int = 100,
    role: Optional[UserRole] = None,
    current_user: User = Depends(require_permission(VIEW_USERS)),
    session: Session = Depends(get_session)
):
    return service.get_all_users(session, offset, limit, role)

@router.get("/{user_id}", response_model=UserRead)
def read_user(
    user_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    session: Session = Depends(get_session)
):
    if user_id != current_user.id and not has_permission(current_user.role, VIEW_USERS):
        raise HTTPException(status_code=403, detail="Permission denied")
    user = service.get_user(session, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user

@router.patch("/{user_id}", response_model=UserRead)
def update_user(
    user_id: uuid.UUID,
    user_update: UserUpdate,
    current_user: User = Depends(get_current_user),
    session: Session = Depends(get_session)
):
    can_manage = has_permission(current_user.role, MANAGE_USERS)
    if user_id != current_user.id and not can_manage:
        raise HTTPException(status_code=403, detail="Permission denied")

    privileged = user_update.model_dump(exclude_unset=True).keys() & {"role", "is_active"}
    if privileged and not can_manage:
        raise HTTPException(status_code=403, detail="Only user managers can change roles or account status")

    user = service.get_user(session, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return service.update_user(session, user, user_update)

@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(
    user_id: uuid.UUID,
    current_user: User = Depends(require_permission(MANAGE_USERS)),
    session: Session = Depends(get_session)
):
    if user_id == current_user.id:
        raise HTTPException(status_code=400, detail="You cannot delete your own account")
    user = service.get_user(session, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    service.delete_user(session, user)
