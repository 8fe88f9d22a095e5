from typing import Optional
from sqlmodel import SQLModel, Field
from datetime import datetime

from portal.core.clock import utcnow
from portal.models.types import UTCDateTime
from portal.models.enums import UpdateType


class ProjectUpdate(SQLModel, table=True):
    """Entry in a project's activity feed."""

    id: Optional[int] = Field(default=None, primary_key=True)
    project_id: int = Field(foreign_key="project.id", index=True)
    author_id: Optional[int] = Field(default=None, foreign_key="user.id")
    type: UpdateType = UpdateType.GENERAL
    title: Optional[str] = None
    body: str
    client_visible: bool = True
    created_at: datetime = Field(default_factory=utcnow, sa_type=UTCDateTime)
