from typing import Optional
from sqlmodel import SQLModel, Field
from datetime import datetime

from portal.core.clock import utcnow
from portal.models.types import UTCDateTime

SPRINT_DURATION_DAYS = 14

class Sprint(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    project_id: int = Field(foreign_key="project.id", index=True)
    name: str
    start_date: datetime = Field(sa_type=UTCDateTime)
    end_date: datetime = Field(sa_type=UTCDateTime)  # always start_date + SPRINT_DURATION_DAYS
    created_at: datetime = Field(default_factory=utcnow, sa_type=UTCDateTime)
