from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import Session
from typing import List

from portal.api.deps import get_project, is_client, require_internal
from portal.api.endpoints.auth import get_current_user
from portal.database import get_session
from portal.models.project import Project
from portal.models.user import User
from portal.schemas.task import TaskCreate, TaskRead, TaskUpdate
from portal.services.tasks import create_task, delete_task, get_task, list_tasks, update_task
from portal.services.work_item_store import get_work_item

router = APIRouter()


@router.get("/{item_id}/tasks", response_model=List[TaskRead])
def get_tasks(
    item_id: int,
    project: Project = Depends(get_project),
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    item = get_work_item(session, project.id, item_id)
    if is_client(current_user) and not item.client_visible:
        raise HTTPException(status_code=403, detail="Unauthorized")
    return list_tasks(session, item)


@router.post("/{item_id}/tasks", response_model=TaskRead, status_code=status.HTTP_201_CREATED)
def post_task(
    item_id: int,
    task_in: TaskCreate,
    project: Project = Depends(get_project),
    session: Session = Depends(get_session),
    current_user: User = Depends(require_internal),
):
    item = get_work_item(session, project.id, item_id)
    return create_task(session, item, task_in.title)


@router.patch("/{item_id}/tasks/{task_id}", response_model=TaskRead)
def patch_task(
    item_id: int,
    task_id: int,
    task_in: TaskUpdate,
    project: Project = Depends(get_project),
    session: Session = Depends(get_session),
    current_user: User = Depends(require_internal),
):
    item = get_work_item(session, project.id, item_id)
    task = get_task(session, item, task_id)
    return update_task(session, task, task_in.dict(exclude_unset=True))


@router.delete("/{item_id}/tasks/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_task(
    item_id: int,
    task_id: int,
    project: Project = Depends(get_project),
    session: Session = Depends(get_session),
    current_user: User = Depends(require_internal),
):
    item = get_work_item(session, project.id, item_id)
    delete_task(session, get_task(session, item, task_id))
