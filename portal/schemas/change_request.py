from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime

from portal.models.enums import ChangeRequestStatus, ChangeRequestType


class ChangeRequestCreate(BaseModel):
    title: str = Field(min_length=1)
    description: str = Field(min_length=1)
    type: ChangeRequestType = ChangeRequestType.CHANGE


class ChangeRequestReview(BaseModel):
    estimate_hours: Optional[float] = Field(default=None, gt=0)
    status: Optional[ChangeRequestStatus] = None


class ChangeRequestRead(BaseModel):
    id: int
    project_id: int
    author_id: int
    title: str
    description: str
    type: ChangeRequestType
    status: ChangeRequestStatus
    estimate_hours: Optional[float]
    estimated_timeline_delay_days: Optional[int]
    new_project_due_date: Optional[datetime]
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class SubmissionWindow(BaseModel):
    allowed: bool
    week_start: datetime
    next_available_at: Optional[datetime] = None  # set only when not allowed


class TimelineImpact(BaseModel):
    delay_days: int
    new_due_date: Optional[datetime] = None
