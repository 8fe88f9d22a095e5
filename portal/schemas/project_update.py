from pydantic import BaseModel
from typing import Optional
from datetime import datetime

from portal.models.enums import UpdateType


class ProjectUpdateRead(BaseModel):
    id: int
    project_id: int
    author_id: Optional[int]
    type: UpdateType
    title: Optional[str]
    body: str
    client_visible: bool
    created_at: datetime

    class Config:
        from_attributes = True
