from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime

from portal.schemas.common import UTCDatetime
from portal.models.enums import EpicStatus, WorkItemPriority


class EpicCreate(BaseModel):
    title: str = Field(min_length=1)
    description: Optional[str] = None
    status: Optional[EpicStatus] = None
    priority: Optional[WorkItemPriority] = None
    assignee_id: Optional[int] = None
    due_date: Optional[UTCDatetime] = None
    client_visible: bool = True


class EpicUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    status: Optional[EpicStatus] = None
    priority: Optional[WorkItemPriority] = None
    assignee_id: Optional[int] = None
    due_date: Optional[UTCDatetime] = None
    client_visible: Optional[bool] = None
    order_index: Optional[int] = Field(default=None, ge=0)


class EpicRead(BaseModel):
    id: int
    project_id: int
    title: str
    description: Optional[str]
    status: EpicStatus
    priority: WorkItemPriority
    assignee_id: Optional[int]
    due_date: Optional[datetime]
    client_visible: bool
    order_index: int
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class EpicWithCount(EpicRead):
    deliverable_count: int
