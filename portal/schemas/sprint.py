from pydantic import BaseModel
from typing import Optional
from datetime import datetime

from portal.schemas.common import UTCDatetime
from portal.schemas.progress import ProgressSummary


class SprintCreate(BaseModel):
    name: str
    start_date: UTCDatetime


class SprintRead(BaseModel):
    id: int
    project_id: int
    name: str
    start_date: datetime
    end_date: datetime

    class Config:
        from_attributes = True


class SprintWithProgress(SprintRead):
    time_progress: int
    items: ProgressSummary
    days_remaining: int


class ActiveSprint(BaseModel):
    sprint: Optional[SprintWithProgress] = None
