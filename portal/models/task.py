from typing import Optional
from sqlmodel import SQLModel, Field
from datetime import datetime

from portal.core.clock import utcnow
from portal.models.types import UTCDateTime


class WorkItemTask(SQLModel, table=True):
    """A checklist entry under a work item."""

    id: Optional[int] = Field(default=None, primary_key=True)
    work_item_id: int = Field(foreign_key="workitem.id", index=True)
    title: str
    completed: bool = False
    completed_at: Optional[datetime] = Field(default=None, sa_type=UTCDateTime)
    order_index: int = 0
    created_at: datetime = Field(default_factory=utcnow, sa_type=UTCDateTime)
