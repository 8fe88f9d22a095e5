# api/endpoints/work_items.py

from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import Session
from typing import List

from portal.api.deps import get_project, is_client, require_internal
from portal.api.endpoints.auth import get_current_user
from portal.database import get_session
from portal.models.project import Project
from portal.models.user import User
from portal.schemas.work_item import (
    WorkItemCreate,
    WorkItemMove,
    WorkItemMoveResult,
    WorkItemRead,
    WorkItemUpdate,
)
from portal.services.ordering import move_work_item
from portal.services.work_item_store import (
    create_work_item,
    delete_work_item,
    get_work_item,
    list_work_items,
    update_work_item,
)

router = APIRouter()

@router.post("/", response_model=WorkItemRead, status_code=status.HTTP_201_CREATED)
def create_item(
    item_in: WorkItemCreate,
    project: Project = Depends(get_project),
    session: Session = Depends(get_session),
    current_user: User = Depends(require_internal),
):
    return create_work_item(session, project.id, item_in.dict(exclude_unset=True))

@router.get("/", response_model=List[WorkItemRead])
def list_items(
    project: Project = Depends(get_project),
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    return list_work_items(session, project.id, client_only=is_client(current_user))

@router.get("/{item_id}", response_model=WorkItemRead)
def get_item(
    item_id: int,
    project: Project = Depends(get_project),
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    item = get_work_item(session, project.id, item_id)
    if is_client(current_user) and not item.client_visible:
        raise HTTPException(status_code=404, detail="Work item not found")
    return item

@router.patch("/{item_id}", response_model=WorkItemRead)
def update_item(
    item_id: int,
    item_in: WorkItemUpdate,
    project: Project = Depends(get_project),
    session: Session = Depends(get_session),
    current_user: User = Depends(require_internal),
):
    return update_work_item(
        session, project.id, item_id, item_in.dict(exclude_unset=True), author_id=current_user.id
    )

@router.patch("/{item_id}/move", response_model=WorkItemMoveResult)
def move_item(
    item_id: int,
    move: WorkItemMove,
    project: Project = Depends(get_project),
    session: Session = Depends(get_session),
    current_user: User = Depends(require_internal),
):
    """
    Places the item at `order_index` of the `status` column.
    The response carries the stored destination column so an optimistic
    client can reconcile; on any error the client restores its snapshot.
    """
    item, column = move_work_item(
        session, project.id, item_id, move.status, move.order_index, actor_id=current_user.id
    )
    return WorkItemMoveResult(
        item=WorkItemRead.model_validate(item),
        column=[WorkItemRead.model_validate(i) for i in column],
    )

@router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_item(
    item_id: int,
    project: Project = Depends(get_project),
    session: Session = Depends(get_session),
    current_user: User = Depends(require_internal),
):
    delete_work_item(session, project.id, item_id)
