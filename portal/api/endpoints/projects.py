from fastapi import APIRouter, HTTPException, Depends, status
from sqlmodel import Session, select
from typing import List, Optional
from portal.models.project import Project
from portal.schemas.project import ProjectCreate, ProjectRead, ProjectUpdate
from portal.schemas.progress import ProgressScope, ScopedProgress
from portal.schemas.project_update import ProjectUpdateRead
from portal.api.deps import get_project, is_client, require_internal
from portal.api.endpoints.auth import get_current_user
from portal.database import get_session
from portal.models.user import User
from portal.services.milestones import get_milestone
from portal.services.progress import compute_progress
from portal.services.project_updates import list_project_updates

router = APIRouter()

@router.post("/", response_model=ProjectRead, status_code=status.HTTP_201_CREATED)
def create_project(
    project_in: ProjectCreate,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_internal),
):
    project = Project(**project_in.dict())
    session.add(project)
    session.commit()
    session.refresh(project)
    return project

@router.get("/", response_model=List[ProjectRead])
def list_projects(
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    return session.exec(select(Project).order_by(Project.id)).all()

@router.get("/{project_id}", response_model=ProjectRead)
def read_project(project: Project = Depends(get_project)):
    return project

@router.put("/{project_id}", response_model=ProjectRead)
def update_project(
    project_in: ProjectUpdate,
    project: Project = Depends(get_project),
    session: Session = Depends(get_session),
    current_user: User = Depends(require_internal),
):
    project_data = project_in.dict(exclude_unset=True)
    for key, value in project_data.items():
        setattr(project, key, value)
    session.add(project)
    session.commit()
    session.refresh(project)
    return project

@router.get("/{project_id}/progress", response_model=ScopedProgress)
def get_progress(
    scope: ProgressScope = ProgressScope.project,
    ref_id: Optional[int] = None,
    project: Project = Depends(get_project),
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    if scope != ProgressScope.project and ref_id is None:
        raise HTTPException(status_code=400, detail="ref_id is required for sprint and milestone scopes")
    if scope == ProgressScope.milestone:
        get_milestone(session, project.id, ref_id, client_only=is_client(current_user))
    return compute_progress(session, project.id, scope, ref_id)

@router.get("/{project_id}/updates", response_model=List[ProjectUpdateRead])
def get_updates(
    project: Project = Depends(get_project),
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    return list_project_updates(session, project.id, client_only=is_client(current_user))
