from typing import List

from sqlmodel import Session, select, func

from portal.core.clock import utcnow
from portal.core.errors import NotFoundError, ValidationError
from portal.models.task import WorkItemTask
from portal.models.work_item import WorkItem


def list_tasks(session: Session, item: WorkItem) -> List[WorkItemTask]:
    return session.exec(
        select(WorkItemTask)
        .where(WorkItemTask.work_item_id == item.id)
        .order_by(WorkItemTask.order_index, WorkItemTask.id)
    ).all()


def create_task(session: Session, item: WorkItem, title: str) -> WorkItemTask:
    if not title or not title.strip():
        raise ValidationError("Task title is required")
    last = session.exec(
        select(func.max(WorkItemTask.order_index)).where(WorkItemTask.work_item_id == item.id)
    ).first()
    task = WorkItemTask(
        work_item_id=item.id,
        title=title.strip(),
        order_index=0 if last is None else last + 1,
    )
    session.add(task)
    session.commit()
    session.refresh(task)
    return task


def get_task(session: Session, item: WorkItem, task_id: int) -> WorkItemTask:
    task = session.get(WorkItemTask, task_id)
    if not task or task.work_item_id != item.id:
        raise NotFoundError("Task", task_id)
    return task


def update_task(session: Session, task: WorkItemTask, data: dict) -> WorkItemTask:
    if "title" in data:
        if not (data["title"] or "").strip():
            raise ValidationError("Task title is required")
        task.title = data["title"].strip()
    if data.get("completed") is not None:
        task.completed = data["completed"]
        task.completed_at = utcnow() if data["completed"] else None
    session.add(task)
    session.commit()
    session.refresh(task)
    return task


def delete_task(session: Session, task: WorkItemTask) -> None:
    session.delete(task)
    session.commit()
