# schemas/work_item.py

from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime

from portal.schemas.common import UTCDatetime
from portal.models.enums import WorkItemStatus, WorkItemPriority


class WorkItemCreate(BaseModel):
    title: str
    description: Optional[str] = None
    status: Optional[WorkItemStatus] = WorkItemStatus.BACKLOG
    priority: Optional[WorkItemPriority] = WorkItemPriority.MED
    owner_id: Optional[int] = None
    due_date: Optional[UTCDatetime] = None
    estimate: Optional[float] = Field(default=None, ge=0)
    sprint_id: Optional[int] = None
    milestone_id: Optional[int] = None
    epic_id: Optional[int] = None
    client_visible: bool = True


class WorkItemUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    status: Optional[WorkItemStatus] = None
    priority: Optional[WorkItemPriority] = None
    owner_id: Optional[int] = None
    due_date: Optional[UTCDatetime] = None
    estimate: Optional[float] = Field(default=None, ge=0)
    sprint_id: Optional[int] = None
    milestone_id: Optional[int] = None
    epic_id: Optional[int] = None
    client_visible: Optional[bool] = None


class WorkItemMove(BaseModel):
    status: WorkItemStatus
    order_index: int = Field(ge=0)


class WorkItemRead(BaseModel):
    id: int
    project_id: int
    title: str
    description: Optional[str]
    status: WorkItemStatus
    priority: WorkItemPriority
    owner_id: Optional[int]
    due_date: Optional[datetime]
    estimate: Optional[float]
    sprint_id: Optional[int]
    milestone_id: Optional[int]
    epic_id: Optional[int]
    order_index: int
    client_visible: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class WorkItemMoveResult(BaseModel):
    item: WorkItemRead
    column: List[WorkItemRead]  # destination column as stored after the move
