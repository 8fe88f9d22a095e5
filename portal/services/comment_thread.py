"""Reply trees attached to work items.

Comments are stored flat with a ``parent_id``; trees are assembled on demand.
Nothing here recurses, so thread depth is unbounded.
"""

import logging
from datetime import datetime
from typing import Dict, Iterable, List, Optional

from sqlmodel import Session, select

from portal.core.clock import utcnow
from portal.core.errors import NotFoundError, ValidationError
from portal.models.comment import Comment
from portal.schemas.comment import CommentLocation, CommentNode
from portal.services.work_item_store import get_work_item

logger = logging.getLogger(__name__)


def add_comment(
    session: Session,
    project_id: int,
    work_item_id: int,
    author_id: int,
    content: str,
    parent_id: Optional[int] = None,
    now: Optional[datetime] = None,
) -> Comment:
    if content is None or not content.strip():
        raise ValidationError("Comment content is required")
    item = get_work_item(session, project_id, work_item_id)

    if parent_id is not None:
        parent = session.get(Comment, parent_id)
        if not parent or parent.work_item_id != item.id:
            raise NotFoundError("Parent comment", parent_id)

    comment = Comment(
        work_item_id=item.id,
        author_id=author_id,
        content=content,
        parent_id=parent_id,
        created_at=now or utcnow(),
    )
    session.add(comment)
    session.commit()
    session.refresh(comment)
    logger.info("Comment %s added to work item %s (parent %s)", comment.id, item.id, parent_id)
    return comment


def build_tree(comments: Iterable[Comment]) -> List[CommentNode]:
    """Assembles flat comments into a forest ordered by creation.

    Comments whose parent is not in ``comments`` are left out together with
    their replies.
    """
    ordered = sorted(comments, key=lambda c: (c.created_at, c.id))
    nodes: Dict[int, CommentNode] = {
        c.id: CommentNode.model_validate(c, from_attributes=True) for c in ordered
    }
    roots: List[CommentNode] = []
    for c in ordered:
        node = nodes[c.id]
        if c.parent_id is None:
            roots.append(node)
        elif c.parent_id in nodes:
            nodes[c.parent_id].replies.append(node)
    return roots


def comment_tree(session: Session, project_id: int, work_item_id: int) -> List[CommentNode]:
    item = get_work_item(session, project_id, work_item_id)
    comments = session.exec(select(Comment).where(Comment.work_item_id == item.id)).all()
    return build_tree(comments)


def locate(forest: List[CommentNode], comment_id: int) -> Optional[CommentLocation]:
    """Finds a comment anywhere in the forest; None when it is not there."""
    stack = [(node, [node.id]) for node in reversed(forest)]
    while stack:
        node, path = stack.pop()
        if node.id == comment_id:
            return CommentLocation(node=node, path=path)
        for reply in reversed(node.replies):
            stack.append((reply, path + [reply.id]))
    return None
