from typing import Optional
from sqlmodel import SQLModel, Field
from datetime import datetime

from portal.core.clock import utcnow
from portal.models.types import UTCDateTime
from portal.models.enums import EpicStatus, WorkItemPriority


class Epic(SQLModel, table=True):
    """A group of related work items, ordered per project."""

    id: Optional[int] = Field(default=None, primary_key=True)
    project_id: int = Field(foreign_key="project.id", index=True)
    title: str
    description: Optional[str] = None
    status: EpicStatus = EpicStatus.NOT_STARTED
    priority: WorkItemPriority = WorkItemPriority.MED
    assignee_id: Optional[int] = Field(default=None, foreign_key="user.id")
    due_date: Optional[datetime] = Field(default=None, sa_type=UTCDateTime)
    client_visible: bool = True
    order_index: int = 0
    created_at: datetime = Field(default_factory=utcnow, sa_type=UTCDateTime)
    updated_at: datetime = Field(default_factory=utcnow, sa_type=UTCDateTime)
