import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select, delete

from portal.core.clock import utcnow
from portal.core.errors import NotFoundError, ValidationError
from portal.models.comment import Comment
from portal.models.enums import WorkItemStatus
from portal.models.epic import Epic
from portal.models.milestone import Milestone
from portal.models.project import Project
from portal.models.sprint import Sprint
from portal.models.task import WorkItemTask
from portal.models.work_item import WorkItem
from portal.services.project_updates import record_status_change

logger = logging.getLogger(__name__)


def get_work_item(session: Session, project_id: int, item_id: int, lock: bool = False) -> WorkItem:
    q = select(WorkItem).where(WorkItem.id == item_id, WorkItem.project_id == project_id)
    if lock:
        q = q.with_for_update()
    item = session.exec(q).first()
    if not item:
        raise NotFoundError("Work item", item_id)
    return item


def list_work_items(session: Session, project_id: int, client_only: bool = False) -> List[WorkItem]:
    q = select(WorkItem).where(WorkItem.project_id == project_id)
    if client_only:
        q = q.where(WorkItem.client_visible == True)  # noqa: E712
    return session.exec(q.order_by(WorkItem.status, WorkItem.order_index, WorkItem.id)).all()


def list_group(
    session: Session,
    project_id: int,
    status: WorkItemStatus,
    exclude_id: Optional[int] = None,
    lock: bool = False,
) -> List[WorkItem]:
    """Items of one board column in display order."""
    q = select(WorkItem).where(WorkItem.project_id == project_id, WorkItem.status == status)
    if exclude_id is not None:
        q = q.where(WorkItem.id != exclude_id)
    if lock:
        q = q.with_for_update()
    return session.exec(q.order_by(WorkItem.order_index, WorkItem.id)).all()


def reorder_group(session: Session, items: List[WorkItem]) -> int:
    """Rewrites order indices densely (0..n-1) following the list order.

    Returns how many rows actually changed.
    """
    changed = 0
    for position, item in enumerate(items):
        if item.order_index != position:
            item.order_index = position
            session.add(item)
            changed += 1
    return changed


def lock_project(session: Session, project_id: int) -> None:
    """Row lock on the project; serialises writers of its board columns until commit."""
    session.exec(select(Project.id).where(Project.id == project_id).with_for_update()).first()


def next_order_index(session: Session, project_id: int, status: WorkItemStatus) -> int:
    """Index after the last item of the column, read under lock."""
    lock_project(session, project_id)
    column = list_group(session, project_id, status, lock=True)
    return column[-1].order_index + 1 if column else 0


def _check_references(session: Session, project_id: int, data: Dict[str, Any]):
    sprint_id = data.get("sprint_id")
    if sprint_id is not None:
        sprint = session.get(Sprint, sprint_id)
        if not sprint or sprint.project_id != project_id:
            raise NotFoundError("Sprint", sprint_id)
    milestone_id = data.get("milestone_id")
    if milestone_id is not None:
        milestone = session.get(Milestone, milestone_id)
        if not milestone or milestone.project_id != project_id:
            raise NotFoundError("Milestone", milestone_id)
    epic_id = data.get("epic_id")
    if epic_id is not None:
        epic = session.get(Epic, epic_id)
        if not epic or epic.project_id != project_id:
            raise NotFoundError("Epic", epic_id)


# Columns a partial payload may not null out.
REQUIRED_FIELDS = ("status", "priority", "client_visible")


def _drop_nulls(data: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in data.items() if not (k in REQUIRED_FIELDS and v is None)}


def _clean_title(title: Optional[str]) -> str:
    if title is None or not str(title).strip():
        raise ValidationError("Title is required")
    return str(title).strip()


def create_work_item(
    session: Session,
    project_id: int,
    data: Dict[str, Any],
) -> WorkItem:
    """Creates an item at the end of its status column."""
    fields = _drop_nulls(data)
    fields["title"] = _clean_title(fields.get("title"))
    status = fields.get("status") or WorkItemStatus.BACKLOG
    fields["status"] = status
    _check_references(session, project_id, fields)

    item = WorkItem(
        **fields,
        project_id=project_id,
        order_index=next_order_index(session, project_id, status),
    )
    session.add(item)
    session.commit()
    session.refresh(item)
    logger.info("Work item %s created in project %s (%s)", item.id, project_id, item.status.value)
    return item


def update_work_item(
    session: Session,
    project_id: int,
    item_id: int,
    data: Dict[str, Any],
    author_id: Optional[int] = None,
) -> WorkItem:
    """Applies a partial update.

    A status change through here appends the item to the end of the new
    column; use the move operation to choose a position.
    """
    item = get_work_item(session, project_id, item_id)
    data = _drop_nulls(data)
    if "title" in data:
        data = dict(data, title=_clean_title(data["title"]))
    _check_references(session, project_id, data)

    old_status = item.status
    new_status = data.get("status") or old_status
    for key, value in data.items():
        if key == "status":
            continue
        setattr(item, key, value)
    if new_status != old_status:
        item.order_index = next_order_index(session, project_id, new_status)
        item.status = new_status
    item.updated_at = utcnow()
    session.add(item)
    session.commit()
    session.refresh(item)

    record_status_change(session, project_id, item.title, old_status, new_status, author_id)
    return item


def delete_work_item(session: Session, project_id: int, item_id: int) -> None:
    """Deletes an item together with its comment forest and tasks."""
    item = get_work_item(session, project_id, item_id)
    try:
        session.exec(delete(Comment).where(Comment.work_item_id == item.id))
        session.exec(delete(WorkItemTask).where(WorkItemTask.work_item_id == item.id))
        session.delete(item)
        session.commit()
    except SQLAlchemyError:
        session.rollback()
        raise
    logger.info("Work item %s deleted from project %s", item_id, project_id)
