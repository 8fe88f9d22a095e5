from datetime import datetime

from fastapi import Depends, HTTPException
from sqlmodel import Session

from portal.api.endpoints.auth import get_current_user
from portal.core.clock import utcnow
from portal.database import get_session
from portal.models.enums import UserType
from portal.models.project import Project
from portal.models.user import User


def get_now() -> datetime:
    """Request clock. Overridden in tests to pin time-dependent behaviour."""
    return utcnow()


def get_project(
    project_id: int,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> Project:
    project = session.get(Project, project_id)
    if not project:
        raise HTTPException(status_code=404, detail="Project not found")
    return project


def is_client(user: User) -> bool:
    return user.user_type == UserType.CLIENT


def require_internal(current_user: User = Depends(get_current_user)) -> User:
    if is_client(current_user):
        raise HTTPException(status_code=403, detail="Unauthorized")
    return current_user
