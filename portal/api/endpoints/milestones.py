from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import Session
from typing import List

from portal.api.deps import get_project, is_client, require_internal
from portal.api.endpoints.auth import get_current_user
from portal.database import get_session
from portal.models.enums import ApprovalStatus
from portal.models.project import Project
from portal.models.user import User
from portal.schemas.milestone import ApprovalDecision, MilestoneCreate, MilestoneRead, MilestoneWithProgress
from portal.schemas.progress import ProgressScope, ScopedProgress
from portal.services.milestones import create_milestone, list_milestones_with_progress, set_approval, get_milestone
from portal.services.progress import compute_progress

router = APIRouter()


def require_client(current_user: User = Depends(get_current_user)) -> User:
    if not is_client(current_user):
        raise HTTPException(status_code=403, detail="Unauthorized")
    return current_user


@router.post("/", response_model=MilestoneRead, status_code=status.HTTP_201_CREATED)
def post_milestone(
    milestone_in: MilestoneCreate,
    project: Project = Depends(get_project),
    session: Session = Depends(get_session),
    current_user: User = Depends(require_internal),
):
    return create_milestone(session, project.id, milestone_in.dict(exclude_unset=True))


@router.get("/", response_model=List[MilestoneWithProgress])
def get_milestones(
    project: Project = Depends(get_project),
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    rows = list_milestones_with_progress(session, project.id, client_only=is_client(current_user))
    return [
        MilestoneWithProgress(**MilestoneRead.model_validate(m).dict(), progress=p)
        for m, p in rows
    ]


@router.get("/{milestone_id}/progress", response_model=ScopedProgress)
def get_milestone_progress(
    milestone_id: int,
    project: Project = Depends(get_project),
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    get_milestone(session, project.id, milestone_id, client_only=is_client(current_user))
    return compute_progress(session, project.id, ProgressScope.milestone, milestone_id)


@router.post("/{milestone_id}/approve", response_model=MilestoneRead)
def approve_milestone(
    milestone_id: int,
    decision: ApprovalDecision,
    project: Project = Depends(get_project),
    session: Session = Depends(get_session),
    current_user: User = Depends(require_client),
):
    return set_approval(session, project.id, milestone_id, ApprovalStatus.APPROVED, decision.notes)


@router.post("/{milestone_id}/request-changes", response_model=MilestoneRead)
def request_changes(
    milestone_id: int,
    decision: ApprovalDecision,
    project: Project = Depends(get_project),
    session: Session = Depends(get_session),
    current_user: User = Depends(require_client),
):
    return set_approval(
        session, project.id, milestone_id, ApprovalStatus.CHANGES_REQUESTED, decision.notes
    )
