from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import Session
from typing import Optional

from portal.api.deps import get_now, get_project, is_client
from portal.api.endpoints.auth import get_current_user
from portal.database import get_session
from portal.models.project import Project
from portal.models.user import User
from portal.schemas.comment import CommentCreate, CommentRead, CommentTree, HighlightResult
from portal.services.comment_thread import add_comment, comment_tree, locate
from portal.services.work_item_store import get_work_item

router = APIRouter()


def _visible_item(session: Session, project: Project, item_id: int, user: User):
    item = get_work_item(session, project.id, item_id)
    if is_client(user) and not item.client_visible:
        raise HTTPException(status_code=404, detail="Work item not found")
    return item


@router.get("/{item_id}/comments", response_model=CommentTree)
def get_comments(
    item_id: int,
    highlight: Optional[int] = None,
    project: Project = Depends(get_project),
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    _visible_item(session, project, item_id, current_user)
    forest = comment_tree(session, project.id, item_id)
    result = CommentTree(comments=forest)
    if highlight is not None:
        location = locate(forest, highlight)
        result.highlight = HighlightResult(
            comment_id=highlight,
            found=location is not None,
            path=location.path if location else [],
        )
    return result


@router.post("/{item_id}/comments", response_model=CommentRead, status_code=status.HTTP_201_CREATED)
def post_comment(
    item_id: int,
    comment_in: CommentCreate,
    project: Project = Depends(get_project),
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
    now=Depends(get_now),
):
    _visible_item(session, project, item_id, current_user)
    return add_comment(
        session,
        project.id,
        item_id,
        current_user.id,
        comment_in.content,
        parent_id=comment_in.parent_id,
        now=now,
    )
