# schemas/user.py

from typing import Optional
from pydantic import BaseModel

from portal.models.enums import UserType


class UserRead(BaseModel):
    id: int
    email: str
    name: Optional[str]
    user_type: UserType
    active: bool

    class Config:
        from_attributes = True
