import logging
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from portal.models.enums import STATUS_LABELS, UpdateType, WorkItemStatus
from portal.models.project_update import ProjectUpdate

logger = logging.getLogger(__name__)


def create_project_update(
    session: Session,
    project_id: int,
    body: str,
    title: Optional[str] = None,
    author_id: Optional[int] = None,
    type: UpdateType = UpdateType.GENERAL,
    client_visible: bool = True,
) -> ProjectUpdate:
    update = ProjectUpdate(
        project_id=project_id,
        author_id=author_id,
        type=type,
        title=title,
        body=body,
        client_visible=client_visible,
    )
    session.add(update)
    session.commit()
    session.refresh(update)
    return update


def record_status_change(
    session: Session,
    project_id: int,
    item_title: str,
    old_status: WorkItemStatus,
    new_status: WorkItemStatus,
    author_id: Optional[int] = None,
) -> Optional[ProjectUpdate]:
    """Writes a feed entry for a status change.

    The work item change is already committed when this runs; a failure here
    is logged and swallowed so the caller's operation still succeeds.
    """
    if old_status == new_status:
        return None

    if new_status == WorkItemStatus.DONE:
        update_type = UpdateType.LAUNCH
        title = "Deliverable Completed"
        body = f"Deliverable **{item_title}** has been completed!"
    else:
        update_type = UpdateType.GENERAL
        title = "Deliverable Status Changed"
        body = (
            f"Deliverable **{item_title}** moved from "
            f"**{STATUS_LABELS[old_status]}** to **{STATUS_LABELS[new_status]}**."
        )

    try:
        return create_project_update(
            session, project_id, body, title=title, author_id=author_id, type=update_type
        )
    except SQLAlchemyError:
        session.rollback()
        logger.exception(
            "Feed entry for project %s failed (%s -> %s)",
            project_id,
            STATUS_LABELS[old_status],
            STATUS_LABELS[new_status],
        )
        return None


def list_project_updates(session: Session, project_id: int, client_only: bool = False) -> List[ProjectUpdate]:
    q = select(ProjectUpdate).where(ProjectUpdate.project_id == project_id)
    if client_only:
        q = q.where(ProjectUpdate.client_visible == True)  # noqa: E712
    return session.exec(q.order_by(ProjectUpdate.created_at.desc(), ProjectUpdate.id.desc())).all()
