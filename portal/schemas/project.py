from pydantic import BaseModel
from typing import Optional
from datetime import datetime

from portal.schemas.common import UTCDatetime

class ProjectCreate(BaseModel):
    name: str
    description: str = ""
    due_date: Optional[UTCDatetime] = None
    weekly_capacity_hours: int = 40

class ProjectRead(BaseModel):
    id: int
    name: str
    description: str
    due_date: Optional[datetime]
    weekly_capacity_hours: int

    class Config:
        from_attributes = True

class ProjectUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    due_date: Optional[UTCDatetime] = None
    weekly_capacity_hours: Optional[int] = None
