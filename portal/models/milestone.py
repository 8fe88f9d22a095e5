from typing import Optional
from sqlmodel import SQLModel, Field
from datetime import datetime

from portal.core.clock import utcnow
from portal.models.types import UTCDateTime
from portal.models.enums import ApprovalStatus


class Milestone(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    project_id: int = Field(foreign_key="project.id", index=True)
    title: str
    description: Optional[str] = None
    order_index: int = 0
    due_date: Optional[datetime] = Field(default=None, sa_type=UTCDateTime)
    client_visible: bool = True
    requires_client_approval: bool = False
    approval_status: Optional[ApprovalStatus] = None
    approval_notes: Optional[str] = None
    created_at: datetime = Field(default_factory=utcnow, sa_type=UTCDateTime)
    updated_at: datetime = Field(default_factory=utcnow, sa_type=UTCDateTime)
