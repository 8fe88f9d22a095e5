from typing import Optional
from sqlmodel import SQLModel, Field
from datetime import datetime

from portal.core.clock import utcnow
from portal.models.types import UTCDateTime
from portal.models.enums import UserType


class User(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    email: str = Field(index=True, unique=True)
    name: Optional[str] = None
    user_type: UserType = UserType.INTERNAL
    active: bool = True
    created_date: datetime = Field(default_factory=utcnow, sa_type=UTCDateTime)
