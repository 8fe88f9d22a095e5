from typing import Optional
from sqlmodel import SQLModel, Field
from datetime import datetime

from portal.core.clock import utcnow
from portal.models.types import UTCDateTime
from portal.models.enums import ChangeRequestStatus, ChangeRequestType


class ChangeRequest(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    project_id: int = Field(foreign_key="project.id", index=True)
    author_id: int = Field(foreign_key="user.id", index=True)
    title: str
    description: str
    type: ChangeRequestType = ChangeRequestType.CHANGE
    status: ChangeRequestStatus = ChangeRequestStatus.NEW
    estimate_hours: Optional[float] = None
    estimated_timeline_delay_days: Optional[int] = None
    new_project_due_date: Optional[datetime] = Field(default=None, sa_type=UTCDateTime)
    created_at: datetime = Field(default_factory=utcnow, sa_type=UTCDateTime, index=True)
    updated_at: datetime = Field(default_factory=utcnow, sa_type=UTCDateTime)
