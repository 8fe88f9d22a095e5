from typing import Optional
from sqlmodel import SQLModel, Field
from datetime import datetime

from portal.core.clock import utcnow
from portal.models.types import UTCDateTime

class Project(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    description: str = ""
    due_date: Optional[datetime] = Field(default=None, sa_type=UTCDateTime)
    weekly_capacity_hours: int = 40
    created_at: datetime = Field(default_factory=utcnow, sa_type=UTCDateTime)
