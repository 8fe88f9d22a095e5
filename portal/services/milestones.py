from typing import List, Optional, Tuple

from sqlmodel import Session, select, func

from portal.core.clock import utcnow
from portal.core.errors import NotFoundError, ValidationError
from portal.models.enums import ApprovalStatus
from portal.models.milestone import Milestone
from portal.models.work_item import WorkItem
from portal.schemas.progress import ProgressSummary
from portal.services.progress import progress


def create_milestone(session: Session, project_id: int, data: dict) -> Milestone:
    fields = dict(data)
    if not (fields.get("title") or "").strip():
        raise ValidationError("Milestone title is required")
    if fields.get("order_index") is None:
        last = session.exec(
            select(func.max(Milestone.order_index)).where(Milestone.project_id == project_id)
        ).first()
        fields["order_index"] = 0 if last is None else last + 1
    if fields.get("requires_client_approval"):
        fields["approval_status"] = ApprovalStatus.PENDING
    milestone = Milestone(**fields, project_id=project_id)
    session.add(milestone)
    session.commit()
    session.refresh(milestone)
    return milestone


def get_milestone(session: Session, project_id: int, milestone_id: int, client_only: bool = False) -> Milestone:
    milestone = session.get(Milestone, milestone_id)
    if not milestone or milestone.project_id != project_id:
        raise NotFoundError("Milestone", milestone_id)
    if client_only and not milestone.client_visible:
        raise NotFoundError("Milestone", milestone_id)
    return milestone


def list_milestones_with_progress(
    session: Session, project_id: int, client_only: bool = False
) -> List[Tuple[Milestone, ProgressSummary]]:
    q = select(Milestone).where(Milestone.project_id == project_id)
    if client_only:
        q = q.where(Milestone.client_visible == True)  # noqa: E712
    milestones = session.exec(q.order_by(Milestone.order_index, Milestone.created_at)).all()
    items = session.exec(select(WorkItem).where(WorkItem.project_id == project_id)).all()
    return [(m, progress(i for i in items if i.milestone_id == m.id)) for m in milestones]


def set_approval(
    session: Session,
    project_id: int,
    milestone_id: int,
    approval_status: ApprovalStatus,
    notes: Optional[str] = None,
) -> Milestone:
    """Records a client decision on a milestone that is gated on approval."""
    milestone = get_milestone(session, project_id, milestone_id, client_only=True)
    if not milestone.requires_client_approval:
        raise NotFoundError("Milestone", milestone_id)
    if approval_status == ApprovalStatus.CHANGES_REQUESTED and not (notes or "").strip():
        raise ValidationError("Notes are required when requesting changes")
    milestone.approval_status = approval_status
    milestone.approval_notes = notes or None
    milestone.updated_at = utcnow()
    session.add(milestone)
    session.commit()
    session.refresh(milestone)
    return milestone
