from typing import Optional
from sqlmodel import SQLModel, Field
from datetime import datetime

from portal.core.clock import utcnow
from portal.models.types import UTCDateTime
from portal.models.enums import WorkItemStatus, WorkItemPriority


class WorkItem(SQLModel, table=True):
    """A deliverable on the project board.

    ``order_index`` orders items inside one (project, status) column. Gaps are
    allowed; only the relative order is meaningful.
    """

    id: Optional[int] = Field(default=None, primary_key=True)
    project_id: int = Field(foreign_key="project.id", index=True)
    title: str
    description: Optional[str] = None
    status: WorkItemStatus = Field(default=WorkItemStatus.BACKLOG, index=True)
    priority: WorkItemPriority = WorkItemPriority.MED
    owner_id: Optional[int] = Field(default=None, foreign_key="user.id")
    due_date: Optional[datetime] = Field(default=None, sa_type=UTCDateTime)
    estimate: Optional[float] = None
    sprint_id: Optional[int] = Field(default=None, foreign_key="sprint.id", index=True)
    milestone_id: Optional[int] = Field(default=None, foreign_key="milestone.id", index=True)
    epic_id: Optional[int] = Field(default=None, foreign_key="epic.id", index=True)
    order_index: int = 0
    client_visible: bool = True
    created_at: datetime = Field(default_factory=utcnow, sa_type=UTCDateTime)
    updated_at: datetime = Field(default_factory=utcnow, sa_type=UTCDateTime)
