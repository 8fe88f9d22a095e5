from pydantic import BaseModel
from typing import Optional
from datetime import datetime


class TaskCreate(BaseModel):
    title: str


class TaskUpdate(BaseModel):
    title: Optional[str] = None
    completed: Optional[bool] = None


class TaskRead(BaseModel):
    id: int
    work_item_id: int
    title: str
    completed: bool
    completed_at: Optional[datetime]
    order_index: int
    created_at: datetime

    class Config:
        from_attributes = True
