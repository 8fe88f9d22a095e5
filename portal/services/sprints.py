from datetime import datetime, timedelta
from typing import List, Optional

from sqlmodel import Session, select

from portal.core.errors import NotFoundError, ValidationError
from portal.models.sprint import Sprint, SPRINT_DURATION_DAYS
from portal.models.work_item import WorkItem
from portal.services.progress import active_sprint


def create_sprint(session: Session, project_id: int, name: str, start_date: datetime) -> Sprint:
    if not name or not name.strip():
        raise ValidationError("Sprint name is required")
    sprint = Sprint(
        project_id=project_id,
        name=name.strip(),
        start_date=start_date,
        end_date=start_date + timedelta(days=SPRINT_DURATION_DAYS),
    )
    session.add(sprint)
    session.commit()
    session.refresh(sprint)
    return sprint


def get_sprint(session: Session, project_id: int, sprint_id: int) -> Sprint:
    sprint = session.get(Sprint, sprint_id)
    if not sprint or sprint.project_id != project_id:
        raise NotFoundError("Sprint", sprint_id)
    return sprint


def list_sprints(session: Session, project_id: int) -> List[Sprint]:
    return session.exec(
        select(Sprint).where(Sprint.project_id == project_id).order_by(Sprint.start_date.desc())
    ).all()


def get_active_sprint(session: Session, project_id: int, now: datetime) -> Optional[Sprint]:
    return active_sprint(list_sprints(session, project_id), now)


def delete_sprint(session: Session, project_id: int, sprint_id: int) -> None:
    """Removes the sprint; its work items stay on the board without a sprint."""
    sprint = get_sprint(session, project_id, sprint_id)
    items = session.exec(select(WorkItem).where(WorkItem.sprint_id == sprint.id)).all()
    for item in items:
        item.sprint_id = None
        session.add(item)
    session.delete(sprint)
    session.commit()
