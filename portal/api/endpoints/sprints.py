from datetime import datetime
from fastapi import APIRouter, Depends, status
from sqlmodel import Session, select
from typing import List

from portal.api.deps import get_now, get_project, require_internal
from portal.api.endpoints.auth import get_current_user
from portal.database import get_session
from portal.models.project import Project
from portal.models.sprint import Sprint
from portal.models.user import User
from portal.models.work_item import WorkItem
from portal.schemas.sprint import ActiveSprint, SprintCreate, SprintRead, SprintWithProgress
from portal.services.progress import sprint_summary
from portal.services.sprints import create_sprint, delete_sprint, get_active_sprint, get_sprint, list_sprints

router = APIRouter()


def _with_progress(session: Session, sprint: Sprint, now: datetime) -> SprintWithProgress:
    items = session.exec(select(WorkItem).where(WorkItem.sprint_id == sprint.id)).all()
    summary = sprint_summary(sprint, items, now)
    return SprintWithProgress(
        id=sprint.id,
        project_id=sprint.project_id,
        name=sprint.name,
        start_date=sprint.start_date,
        end_date=sprint.end_date,
        time_progress=summary.time_progress,
        items=summary.items,
        days_remaining=summary.days_remaining,
    )


@router.post("/", response_model=SprintRead, status_code=status.HTTP_201_CREATED)
def post_sprint(
    sprint_in: SprintCreate,
    project: Project = Depends(get_project),
    session: Session = Depends(get_session),
    current_user: User = Depends(require_internal),
):
    return create_sprint(session, project.id, sprint_in.name, sprint_in.start_date)


@router.get("/", response_model=List[SprintWithProgress])
def get_sprints(
    project: Project = Depends(get_project),
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
    now: datetime = Depends(get_now),
):
    return [_with_progress(session, s, now) for s in list_sprints(session, project.id)]


@router.get("/active", response_model=ActiveSprint)
def get_active(
    project: Project = Depends(get_project),
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
    now: datetime = Depends(get_now),
):
    sprint = get_active_sprint(session, project.id, now)
    if not sprint:
        return ActiveSprint(sprint=None)
    return ActiveSprint(sprint=_with_progress(session, sprint, now))


@router.get("/{sprint_id}", response_model=SprintWithProgress)
def get_one(
    sprint_id: int,
    project: Project = Depends(get_project),
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
    now: datetime = Depends(get_now),
):
    return _with_progress(session, get_sprint(session, project.id, sprint_id), now)


@router.delete("/{sprint_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_sprint(
    sprint_id: int,
    project: Project = Depends(get_project),
    session: Session = Depends(get_session),
    current_user: User = Depends(require_internal),
):
    delete_sprint(session, project.id, sprint_id)
