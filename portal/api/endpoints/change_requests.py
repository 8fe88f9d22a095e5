from datetime import datetime
from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import Session, select
from typing import List

from portal.api.deps import get_now, get_project, is_client, require_internal
from portal.api.endpoints.auth import get_current_user
from portal.database import get_session
from portal.models.change_request import ChangeRequest
from portal.models.project import Project
from portal.models.user import User
from portal.schemas.change_request import (
    ChangeRequestCreate,
    ChangeRequestRead,
    ChangeRequestReview,
    SubmissionWindow,
)
from portal.services.rate_limit import (
    check_submission_allowed,
    create_change_request,
    review_change_request,
)

router = APIRouter()


@router.get("/eligibility", response_model=SubmissionWindow)
def get_eligibility(
    project: Project = Depends(get_project),
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
    now: datetime = Depends(get_now),
):
    """Whether the current user may submit a change request this week."""
    author_id = current_user.id if is_client(current_user) else None
    return check_submission_allowed(session, project.id, now, author_id=author_id)


@router.post("/", response_model=ChangeRequestRead, status_code=status.HTTP_201_CREATED)
def post_change_request(
    change_in: ChangeRequestCreate,
    project: Project = Depends(get_project),
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
    now: datetime = Depends(get_now),
):
    # Only client submissions are capped at one per week.
    return create_change_request(
        session,
        project.id,
        current_user.id,
        change_in.dict(),
        now,
        rate_limited=is_client(current_user),
    )


@router.get("/", response_model=List[ChangeRequestRead])
def list_change_requests(
    project: Project = Depends(get_project),
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    q = select(ChangeRequest).where(ChangeRequest.project_id == project.id)
    if is_client(current_user):
        q = q.where(ChangeRequest.author_id == current_user.id)
    return session.exec(q.order_by(ChangeRequest.created_at.desc())).all()


@router.patch("/{change_request_id}", response_model=ChangeRequestRead)
def review(
    change_request_id: int,
    review_in: ChangeRequestReview,
    project: Project = Depends(get_project),
    session: Session = Depends(get_session),
    current_user: User = Depends(require_internal),
    now: datetime = Depends(get_now),
):
    change_request = session.get(ChangeRequest, change_request_id)
    if not change_request or change_request.project_id != project.id:
        raise HTTPException(status_code=404, detail="Change request not found")
    return review_change_request(
        session, change_request, project, review_in.dict(exclude_unset=True), now
    )
