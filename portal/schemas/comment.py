from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime


class CommentCreate(BaseModel):
    content: str = Field(min_length=1)
    parent_id: Optional[int] = None


class CommentRead(BaseModel):
    id: int
    work_item_id: int
    author_id: int
    content: str
    parent_id: Optional[int]
    created_at: datetime

    class Config:
        from_attributes = True


class CommentNode(CommentRead):
    replies: List["CommentNode"] = []


class CommentLocation(BaseModel):
    node: CommentNode
    path: List[int]  # ids from the thread root down to the node itself


class HighlightResult(BaseModel):
    comment_id: int
    found: bool
    path: List[int] = []


class CommentTree(BaseModel):
    comments: List[CommentNode]
    highlight: Optional[HighlightResult] = None


CommentNode.model_rebuild()
