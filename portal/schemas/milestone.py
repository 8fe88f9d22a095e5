from pydantic import BaseModel
from typing import Optional
from datetime import datetime

from portal.schemas.common import UTCDatetime
from portal.models.enums import ApprovalStatus
from portal.schemas.progress import ProgressSummary


class MilestoneCreate(BaseModel):
    title: str
    description: Optional[str] = None
    order_index: Optional[int] = None
    due_date: Optional[UTCDatetime] = None
    client_visible: bool = True
    requires_client_approval: bool = False


class MilestoneRead(BaseModel):
    id: int
    project_id: int
    title: str
    description: Optional[str]
    order_index: int
    due_date: Optional[datetime]
    client_visible: bool
    requires_client_approval: bool
    approval_status: Optional[ApprovalStatus]
    approval_notes: Optional[str]

    class Config:
        from_attributes = True


class MilestoneWithProgress(MilestoneRead):
    progress: ProgressSummary


class ApprovalDecision(BaseModel):
    notes: Optional[str] = None
