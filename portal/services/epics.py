from typing import Any, Dict, List, Tuple

from sqlmodel import Session, select, func

from portal.core.clock import utcnow
from portal.core.errors import NotFoundError, ValidationError
from portal.models.enums import EpicStatus, WorkItemPriority
from portal.models.epic import Epic
from portal.models.work_item import WorkItem

# Columns a partial payload may not null out.
REQUIRED_FIELDS = ("title", "status", "priority", "client_visible", "order_index")


def create_epic(session: Session, project_id: int, data: Dict[str, Any]) -> Epic:
    """Creates an epic after the last one of the project."""
    fields = {k: v for k, v in data.items() if v is not None}
    if not (fields.get("title") or "").strip():
        raise ValidationError("Epic title is required")
    fields["title"] = fields["title"].strip()
    fields.setdefault("status", EpicStatus.NOT_STARTED)
    fields.setdefault("priority", WorkItemPriority.MED)
    last = session.exec(
        select(func.max(Epic.order_index)).where(Epic.project_id == project_id)
    ).first()
    epic = Epic(**fields, project_id=project_id, order_index=0 if last is None else last + 1)
    session.add(epic)
    session.commit()
    session.refresh(epic)
    return epic


def get_epic(session: Session, project_id: int, epic_id: int, client_only: bool = False) -> Epic:
    epic = session.get(Epic, epic_id)
    if not epic or epic.project_id != project_id:
        raise NotFoundError("Epic", epic_id)
    if client_only and not epic.client_visible:
        raise NotFoundError("Epic", epic_id)
    return epic


def list_epics_with_counts(
    session: Session, project_id: int, client_only: bool = False
) -> List[Tuple[Epic, int]]:
    """Epics in board order with the number of work items each one groups.

    For clients only client-visible epics and items are counted.
    """
    q = select(Epic).where(Epic.project_id == project_id)
    items_q = select(WorkItem).where(WorkItem.project_id == project_id, WorkItem.epic_id != None)  # noqa: E711
    if client_only:
        q = q.where(Epic.client_visible == True)  # noqa: E712
        items_q = items_q.where(WorkItem.client_visible == True)  # noqa: E712
    epics = session.exec(q.order_by(Epic.order_index, Epic.id)).all()
    counts: Dict[int, int] = {}
    for item in session.exec(items_q).all():
        counts[item.epic_id] = counts.get(item.epic_id, 0) + 1
    return [(e, counts.get(e.id, 0)) for e in epics]


def update_epic(session: Session, project_id: int, epic_id: int, data: Dict[str, Any]) -> Epic:
    epic = get_epic(session, project_id, epic_id)
    data = {k: v for k, v in data.items() if not (k in REQUIRED_FIELDS and v is None)}
    if "title" in data:
        if not data["title"].strip():
            raise ValidationError("Epic title is required")
        data["title"] = data["title"].strip()
    for key, value in data.items():
        setattr(epic, key, value)
    epic.updated_at = utcnow()
    session.add(epic)
    session.commit()
    session.refresh(epic)
    return epic


def delete_epic(session: Session, project_id: int, epic_id: int) -> None:
    """Removes the epic; its work items stay on the board without one."""
    epic = get_epic(session, project_id, epic_id)
    items = session.exec(select(WorkItem).where(WorkItem.epic_id == epic.id)).all()
    for item in items:
        item.epic_id = None
        session.add(item)
    session.delete(epic)
    session.commit()
