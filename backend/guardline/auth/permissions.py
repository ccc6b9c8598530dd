"""Role allow-list.

Every authenticated user carries exactly one role; a role grants a fixed set
of permissions. Routers depend on ``require_permission(...)`` to gate writes
and reads.
"""
from typing import Callable, Dict, FrozenSet
from fastapi import Depends, HTTPException, status

from guardline.auth.router import get_current_user
from guardline.users.models import User, UserRole

VIEW_OWN_PROJECTS = "view_own_projects"
VIEW_ALL_PROJECTS = "view_all_projects"
MANAGE_ALL_PROJECTS = "manage_all_projects"
VIEW_OWN_TASKS = "view_own_tasks"
VIEW_ALL_TASKS = "view_all_tasks"
MANAGE_OWN_TASKS = "manage_own_tasks"
MANAGE_ALL_TASKS = "manage_all_tasks"
VIEW_ALL_MESSAGES = "view_all_messages"
MANAGE_MESSAGES = "manage_messages"
VIEW_CLIENTS = "view_clients"
MANAGE_CLIENTS = "manage_clients"
VIEW_LEADS = "view_leads"
MANAGE_LEADS = "manage_leads"
VIEW_USERS = "view_users"
MANAGE_USERS = "manage_users"

_STAFF_TASKS = {VIEW_OWN_TASKS, MANAGE_OWN_TASKS}
_ALL_TASKS = _STAFF_TASKS | {VIEW_ALL_TASKS, MANAGE_ALL_TASKS}
_ALL_PROJECTS = {VIEW_OWN_PROJECTS, VIEW_ALL_PROJECTS, MANAGE_ALL_PROJECTS}
_SALES = {VIEW_ALL_MESSAGES, MANAGE_MESSAGES, VIEW_LEADS, MANAGE_LEADS}
_CLIENTS = {VIEW_CLIENTS, MANAGE_CLIENTS}
_USERS = {VIEW_USERS, MANAGE_USERS}

ROLE_PERMISSIONS: Dict[UserRole, FrozenSet[str]] = {
    UserRole.CLIENT: frozenset({VIEW_OWN_PROJECTS}),
    UserRole.EMPLOYEE: frozenset({VIEW_OWN_PROJECTS} | _STAFF_TASKS),
    UserRole.SALES: frozenset(_ALL_PROJECTS | _ALL_TASKS | _SALES | _CLIENTS),
    UserRole.PROJECT_MANAGER: frozenset(_ALL_PROJECTS | _ALL_TASKS | _CLIENTS),
    UserRole.MANAGER: frozenset(_ALL_PROJECTS | _ALL_TASKS | _SALES | _CLIENTS | _USERS),
    UserRole.ADMIN: frozenset(_ALL_PROJECTS | _ALL_TASKS | _SALES | _CLIENTS | _USERS),
}

def has_permission(role: UserRole, permission: str) -> bool:
    return permission in ROLE_PERMISSIONS.get(role, frozenset())

def require_permission(*permissions: str) -> Callable[..., User]:
    """Dependency that passes when the caller holds ANY of ``permissions``."""

    def checker(current_user: User = Depends(get_current_user)) -> User:
        if not any(has_permission(current_user.role, p) for p in permissions):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Permission denied"
            )
        return current_user

    return checker
