from fastapi import APIRouter, Depends, status
from sqlmodel import Session
from typing import List

from portal.api.deps import get_project, is_client, require_internal
from portal.api.endpoints.auth import get_current_user
from portal.database import get_session
from portal.models.project import Project
from portal.models.user import User
from portal.schemas.epic import EpicCreate, EpicRead, EpicUpdate, EpicWithCount
from portal.services.epics import create_epic, delete_epic, get_epic, list_epics_with_counts, update_epic

router = APIRouter()


@router.post("/", response_model=EpicRead, status_code=status.HTTP_201_CREATED)
def post_epic(
    epic_in: EpicCreate,
    project: Project = Depends(get_project),
    session: Session = Depends(get_session),
    current_user: User = Depends(require_internal),
):
    return create_epic(session, project.id, epic_in.dict(exclude_unset=True))


@router.get("/", response_model=List[EpicWithCount])
def get_epics(
    project: Project = Depends(get_project),
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    rows = list_epics_with_counts(session, project.id, client_only=is_client(current_user))
    return [EpicWithCount(**EpicRead.model_validate(e).dict(), deliverable_count=n) for e, n in rows]


@router.get("/{epic_id}", response_model=EpicRead)
def get_one(
    epic_id: int,
    project: Project = Depends(get_project),
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    return get_epic(session, project.id, epic_id, client_only=is_client(current_user))


@router.patch("/{epic_id}", response_model=EpicRead)
def patch_epic(
    epic_id: int,
    epic_in: EpicUpdate,
    project: Project = Depends(get_project),
    session: Session = Depends(get_session),
    current_user: User = Depends(require_internal),
):
    return update_epic(session, project.id, epic_id, epic_in.dict(exclude_unset=True))


@router.delete("/{epic_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_epic(
    epic_id: int,
    project: Project = Depends(get_project),
    session: Session = Depends(get_session),
    current_user: User = Depends(require_internal),
):
    delete_epic(session, project.id, epic_id)
