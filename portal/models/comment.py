from typing import Optional
from sqlmodel import SQLModel, Field
from datetime import datetime

from portal.core.clock import utcnow
from portal.models.types import UTCDateTime

class Comment(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    work_item_id: int = Field(foreign_key="workitem.id", index=True)
    author_id: int = Field(foreign_key="user.id")
    content: str
    parent_id: Optional[int] = Field(default=None, foreign_key="comment.id")  # None for thread roots
    created_at: datetime = Field(default_factory=utcnow, sa_type=UTCDateTime)
